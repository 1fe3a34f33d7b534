"""SMB shares"""
from ..collection import Collection
from ..convert import Bignum
from ..resource import Field, QueryParam, Resource


class SmbShare(Resource, uri="/v1/conf/shares/smb/:id"):
    id = Field(Bignum)
    share_name = Field(str)
    fs_path = Field(str)
    description = Field(str)
    read_only = Field(bool)
    allow_guest_access = Field(bool)
    allow_fs_path_create = QueryParam("allow-fs-path-create")


class SmbShares(Collection, uri="/v1/conf/shares/smb/", item=SmbShare):
    pass

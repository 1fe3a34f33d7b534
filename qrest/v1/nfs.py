"""NFS exports"""
import typing as t

from ..collection import Collection
from ..convert import Bignum
from ..resource import Field, QueryParam, Resource

# values of NfsRestriction.user_mapping
NFS_MAP_NONE = "NFS_MAP_NONE"
NFS_MAP_ROOT = "NFS_MAP_ROOT"
NFS_MAP_ALL = "NFS_MAP_ALL"


class NfsRestriction(Resource):
    """Access restrictions of an export, for a set of hosts.
    Only exists embedded in an :class:`NfsExport`."""

    host_restrictions = Field(t.List[str])
    read_only = Field(bool)
    user_mapping = Field(str)
    # 0 unless user_mapping is NFS_MAP_ROOT or NFS_MAP_ALL
    map_to_user_id = Field(Bignum)


class NfsExport(Resource, uri="/v1/conf/shares/nfs/:id"):
    id = Field(Bignum)
    export_path = Field(str)
    fs_path = Field(str)
    description = Field(str)
    restrictions = Field(t.List[NfsRestriction])
    # create fs_path on the appliance if it is missing
    allow_fs_path_create = QueryParam("allow-fs-path-create")


class NfsExports(Collection, uri="/v1/conf/shares/nfs/", item=NfsExport):
    pass

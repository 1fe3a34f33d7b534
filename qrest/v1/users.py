"""Local users"""
from ..collection import Collection
from ..convert import Bignum
from ..resource import Field, Resource


class User(Resource, uri="/v1/auth/users/:id"):
    id = Field(Bignum)
    name = Field(str)
    sid = Field(str)
    primary_group = Field(Bignum)
    uid = Field(Bignum)


class Users(Collection, uri="/v1/auth/users/", item=User):
    """all local users, as a bare array"""


class WhoAmI(Resource, uri="/v1/who-am-i", result=User):
    """the user of the current login session"""

"""Resources of version 1 of the REST API"""
from .login import LoginSession
from .nfs import (
    NFS_MAP_ALL,
    NFS_MAP_NONE,
    NFS_MAP_ROOT,
    NfsExport,
    NfsExports,
    NfsRestriction,
)
from .smb import SmbShare, SmbShares
from .users import User, Users, WhoAmI
from .version import Version

__all__ = [
    "LoginSession",
    "User",
    "Users",
    "WhoAmI",
    "Version",
    "NfsRestriction",
    "NfsExport",
    "NfsExports",
    "NFS_MAP_NONE",
    "NFS_MAP_ROOT",
    "NFS_MAP_ALL",
    "SmbShare",
    "SmbShares",
]

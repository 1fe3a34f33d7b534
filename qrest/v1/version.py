"""Software version of the appliance"""
from ..resource import Field, Resource


class Version(Resource, uri="/v1/version"):
    revision_id = Field(str)
    build_id = Field(str)
    flavor = Field(str)
    build_date = Field(str)

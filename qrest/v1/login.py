"""The login exchange"""
from ..resource import Field, Resource


class LoginSession(Resource, uri="/v1/login"):
    """A login session.

    Posted with ``username`` and ``password``,
    the response holds the ``bearer_token`` for later requests.
    """

    # only sent
    username = Field(str)
    password = Field(str)

    # only received
    key = Field(str)
    key_id = Field(str)
    algorithm = Field(str)
    bearer_token = Field(str)

    @classmethod
    def start(cls, username, password, **options):
        """Log in. Sent without authorization.

        Raises
        ------
        RequestFailed
            if the credentials are refused
        """
        return cls(username=username, password=password).post(
            not_authorized=True, **options
        )

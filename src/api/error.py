from fastapi import status
from src.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    """
    Server-side failure.

    The message is replaced by a generic one unless expose=True, which is
    only used for errors whose text was written for the caller.
    """

    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        expose: bool = False,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.expose = expose
        super().__init__(base_error.message)

"""
Error taxonomy shared by the data-access services and the AI functions.

Data-access errors are terminal per operation: nothing retries them and
nothing rolls back local state (there is none to roll back).
"""


class DataAccessError(Exception):
    """Base class for failures raised by the data-access services."""
    pass


class Unauthenticated(DataAccessError):
    """Raised when no caller identity can be resolved."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class RemoteError(DataAccessError):
    """The store rejected the operation. The message is passed through verbatim."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(RemoteError):
    """The row does not exist or is not visible to the caller."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class UpstreamError(Exception):
    """The language-model provider failed or answered with a non-2xx status."""
    pass


class ParseError(Exception):
    """Model output was not valid JSON, or did not match the expected shape."""
    pass

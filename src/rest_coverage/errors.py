"""Exceptions raised by rest-coverage."""


class RestCoverageError(Exception):
    pass


class DocumentLoadError(RestCoverageError):
    """The API document is missing, unreadable, or not a Swagger/OpenAPI document."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load API document {path}: {reason}")


class UnknownEndpointError(RestCoverageError):
    """A recorded request does not match any declared path and method."""

    def __init__(self, path: str, method: str):
        self.path = path
        self.method = method
        super().__init__(f"{method} {path} is not declared in the API document")

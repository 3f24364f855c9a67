"""
Core error classes for the SIG welcome service.
"""


class RegistryError(Exception):
    """Base class for failures while loading an ownership document."""

    def __init__(self, message: str, path: str | None = None, ref: str | None = None) -> None:
        self.path = path
        self.ref = ref
        super().__init__(message)


class FetchError(RegistryError):
    """Raised when the registry document cannot be retrieved from the content store."""

    pass


class DecodeError(RegistryError):
    """Raised when the registry transport encoding or document structure is malformed."""

    pass

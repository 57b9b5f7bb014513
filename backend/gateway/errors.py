class ProviderError(Exception):
    def __init__(self, message, status_code=502, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class ClientInputError(ProviderError):
    """The inbound request cannot be sent upstream (missing credential, empty body)."""

    def __init__(self, message, status_code=400, details=None):
        super().__init__(message, status_code=status_code, details=details)


class UpstreamError(ProviderError):
    def __init__(self, message, status_code=500, details=None):
        super().__init__(message, status_code=status_code, details=details)


class MappingError(Exception):
    """A single supplier record could not be normalized."""

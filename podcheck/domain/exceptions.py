"""
Exceptions for the podcheck engine.

Input problems (empty text, missing documents, invalid numbers) never raise:
they become UNKNOWN classifications, sanitized values or FAILED checks.
These exceptions cover configuration and unexpected processing failures.
"""


class PodcheckError(Exception):
    """Base exception for the podcheck engine."""

    def __init__(self, message: str, component: str = None, original_error: Exception = None):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Podcheck Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class ClientConfigError(PodcheckError):
    """Client configuration is invalid or cannot be stored."""
    pass


class ClientConfigNotFoundError(ClientConfigError):
    """No configuration exists for a client and no fallback is available."""
    pass


class ValidatorRegistryError(PodcheckError):
    """Registry has no validator to return."""
    pass


class DocumentProcessingError(PodcheckError):
    """Classification or detection of a single document failed."""

    def __init__(self, message: str, document_id: str = None, failed_count: int = 1,
                 component: str = None, original_error: Exception = None):
        self.document_id = document_id
        self.failed_count = failed_count
        super().__init__(message, component=component, original_error=original_error)

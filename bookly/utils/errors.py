"""Exception hierarchy shared by the pipeline, the store and the API layer."""


class SupportError(Exception):
    """Base class for every error raised by the support backend."""

    status_code = 500
    public_message = "Internal server error during query processing"

    def __init__(self, message: str = "", details: str = None):
        super().__init__(message or self.public_message)
        self.details = details


class InputError(SupportError):
    """The caller sent a missing or malformed value (e.g. an empty query)."""

    status_code = 400
    public_message = "Query is required"


class ConfigurationError(SupportError):
    """A deployment setting the service needs is absent.

    Raised before any retrieval work so operators see the misconfiguration
    instead of a degraded answer.
    """

    public_message = "Server configuration error: GEMINI_API_KEY not set"


class PersistenceError(SupportError):
    """The order/knowledge store failed. Fatal for the current request."""


class SearchDegraded(SupportError):
    """Relevance search is unavailable; callers fall back to substring search."""


class ProviderError(SupportError):
    """The text-generation provider failed. Carries the upstream message."""


class GenerationTimeoutError(ProviderError):
    """The text-generation call did not finish within the configured timeout."""

    status_code = 504


class NotFoundError(SupportError):
    status_code = 404


class InvalidOperation(SupportError):
    status_code = 400

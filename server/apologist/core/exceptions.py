class ApologistException(Exception):
    """Base exception for the apologist RAG server."""
    pass


class ConfigException(ApologistException):
    """Exception related to configuration errors."""
    pass


class QueryValidationError(ApologistException):
    """The incoming question was empty or otherwise unusable."""
    pass


class RetrievalError(ApologistException):
    """Embedding or vector search failed.

    Raised by the retrieval providers and absorbed by the orchestrator,
    which falls back to local context instead of surfacing it.
    """
    pass


class CompletionFailure(ApologistException):
    """The language model could not produce an answer.

    ``transient`` marks failures worth one more attempt (network errors,
    rate limiting, upstream 5xx).
    """

    def __init__(self, message: str, transient: bool = False):
        super().__init__(message)
        self.transient = transient

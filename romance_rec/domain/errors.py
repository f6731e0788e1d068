"""Error taxonomy. Every error carries a machine-readable code and an HTTP status class."""


class RecommendationError(Exception):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or (self.__class__.__doc__ or self.code).strip()


class InvalidInputError(RecommendationError):
    """The request is missing a usable message."""

    code = "INVALID_INPUT"
    status_code = 400


class PreferenceExtractionFailure(RecommendationError):
    """The language model response could not be turned into preferences."""

    code = "PREFERENCE_EXTRACTION_FAILED"
    status_code = 500


class RetrievalTimeoutError(RecommendationError):
    """The catalog did not answer within the retrieval budget."""

    code = "RETRIEVAL_TIMEOUT"
    status_code = 500


class NoCandidatesError(RecommendationError):
    """No books match these preferences. Try different preferences."""

    code = "NO_BOOKS_FOUND"
    status_code = 404


class UpstreamStorageError(RecommendationError):
    """The book catalog is unavailable."""

    code = "UPSTREAM_STORAGE_ERROR"
    status_code = 500


class BookNotFoundError(RecommendationError):
    """Book not found."""

    code = "BOOK_NOT_FOUND"
    status_code = 404

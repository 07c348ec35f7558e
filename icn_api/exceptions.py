"""
Error taxonomy for the scraping pipeline and the REST surface.
"""


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SCRAPER_ERROR = "SCRAPER_ERROR"
    STALE_DATA = "STALE_DATA"
    PARTIAL_ERROR = "PARTIAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ScraperError(Exception):
    """Raised when an upstream fetch is exhausted. `source` names the failing component."""

    def __init__(self, message: str, source: str):
        super().__init__(message)
        self.message = message
        self.source = source


class AppError(Exception):
    """Error surfaced to HTTP callers with a status code and an error code."""

    def __init__(self, status_code: int, message: str, code: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(400, message, ErrorCode.VALIDATION_ERROR)

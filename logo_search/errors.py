"""Service errors, rendered by FastAPI as JSON error responses"""

from fastapi import HTTPException, status


class SourceUnavailable(HTTPException):
    """The logo index could not be fetched or parsed"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Logo index unavailable ({source}): {reason}",
        )


class InvalidInput(HTTPException):
    """A required request field is missing or empty"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


class SearchTimeout(HTTPException):
    """The fuzzy matcher did not finish within the configured budget"""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Search did not complete within {timeout:g}s",
        )

"""HTTP and domain exceptions.

HTTP errors subclass ``HTTPException`` so FastAPI renders them directly.
Domain errors raised by the analysis services carry the status code their
route should answer with.
"""

from fastapi import HTTPException, status


class BadRequestError(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedError(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PlanLimitError(ForbiddenError):
    def __init__(self, detail: str = "Plan limit reached"):
        super().__init__(detail)


class UpstreamError(HTTPException):
    def __init__(self, detail: str = "Upstream service failed"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


# ---------------------------------------------------------------------------
# Domain errors (raised by services, mapped to HTTP in the routes)
# ---------------------------------------------------------------------------


class LlmProviderError(Exception):
    """A single LLM provider call failed after retries."""

    def __init__(self, platform: str, message: str, status_code: int | None = None):
        self.platform = platform
        self.status_code = status_code
        super().__init__(f"{platform}: {message}")


class NoProvidersConfiguredError(BadRequestError):
    def __init__(self):
        super().__init__("No LLM provider API keys configured")


class AnalysisFailedError(UpstreamError):
    """Every platform failed, so there is nothing to score."""

    def __init__(self, platform_errors: dict[str, str]):
        self.platform_errors = platform_errors
        summary = "; ".join(f"{name}: {err}" for name, err in platform_errors.items())
        super().__init__(f"All LLM API calls failed. {summary}".strip())


class CompetitorDiscoveryError(UpstreamError):
    def __init__(self, detail: str):
        super().__init__(f"Competitor discovery failed: {detail}")

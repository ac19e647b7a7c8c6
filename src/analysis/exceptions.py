class AnalysisError(Exception):
    """Base class for every failure the analyzer reports to callers."""

    error_type = "internal"


class ValidationError(AnalysisError):
    """Malformed identity input. Carries every violation, not just the first."""

    error_type = "validation"

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class NotFound(AnalysisError):
    error_type = "not_found"


class RateLimitExceeded(AnalysisError):
    error_type = "rate_limited"

    def __init__(self, client_id: str, limit: int, window_sec: float) -> None:
        self.client_id = client_id
        self.limit = limit
        self.window_sec = window_sec
        super().__init__(f"Rate limit exceeded: max {limit} requests per {window_sec:g}s")


class UpstreamError(AnalysisError):
    """A single provider call failed: network, timeout, non-2xx or bad payload."""

    error_type = "upstream"

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        self.provider = provider
        self.status_code = status_code
        self.detail = message
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{provider} error{status}: {message}")


class ResolutionError(AnalysisError):
    error_type = "resolution"

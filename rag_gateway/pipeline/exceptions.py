"""Exceptions raised by pipeline adapters."""

from rag_gateway.exceptions import RAGGatewayError


class PipelineError(RAGGatewayError):
    """Base exception for pipeline failures."""
    pass


class PipelineLoadError(PipelineError):
    """Raised when the configured pipeline cannot be constructed.
    
    Attributes:
        target: Import path or URL of the pipeline that failed to load.
    """
    
    def __init__(self, target: str, reason: str):
        super().__init__(
            message=f"Could not load pipeline '{target}': {reason}",
            code="PIPELINE_LOAD_FAILED"
        )
        self.target = target
        self.reason = reason


class PipelineTimeoutError(PipelineError):
    """Raised when the pipeline service doesn't respond in time.
    
    Attributes:
        url: URL of the pipeline endpoint that timed out.
        timeout_seconds: Timeout duration that was exceeded.
    """
    
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(
            message=f"Pipeline at '{url}' timed out after {timeout_seconds}s",
            code="PIPELINE_TIMEOUT"
        )
        self.url = url
        self.timeout_seconds = timeout_seconds


class PipelineUnavailableError(PipelineError):
    """Raised when the pipeline service is unreachable.
    
    Attributes:
        url: URL of the unreachable pipeline endpoint.
        reason: Description of the connection failure.
    """
    
    def __init__(self, url: str, reason: str = "Connection failed"):
        super().__init__(
            message=f"Pipeline at '{url}' is unavailable: {reason}",
            code="PIPELINE_UNAVAILABLE"
        )
        self.url = url
        self.reason = reason


class PipelineResponseError(PipelineError):
    """Raised when the pipeline service returns an error response.
    
    Attributes:
        url: URL of the pipeline endpoint.
        status_code: HTTP status code from the service.
        detail: Error detail from the response body.
    """
    
    def __init__(self, url: str, status_code: int, detail: str = ""):
        super().__init__(
            message=f"Pipeline at '{url}' returned error {status_code}: {detail}",
            code="PIPELINE_ERROR"
        )
        self.url = url
        self.status_code = status_code
        self.detail = detail

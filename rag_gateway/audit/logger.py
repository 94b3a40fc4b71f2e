"""Structured audit logging for tool invocations."""

import time
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncGenerator
from uuid import uuid4

import structlog


logger = structlog.get_logger("audit")


class AuditStatus(str, Enum):
    """Final status of a tool invocation."""

    success = "success"
    declined = "declined"
    error = "error"


class AuditContext:
    """Tracks timing and status of a single tool invocation.
    
    Attributes:
        request_id: Correlation ID for tracing.
        tool_name: Which tool is being invoked.
        start_time: When the invocation started.
        status: Final status of the invocation.
        error_code: Error code if failed.
    """
    
    def __init__(self, request_id: str, tool_name: str) -> None:
        self.request_id = request_id
        self.tool_name = tool_name
        self.start_time = time.perf_counter()
        self.status = AuditStatus.success
        self.error_code: str | None = None
    
    def mark_error(self, error_code: str) -> None:
        """Mark the invocation as failed with an error code.
        
        Args:
            error_code: The error code to record.
        """
        self.status = AuditStatus.error
        self.error_code = error_code
    
    def mark_declined(self) -> None:
        """Mark the invocation as processed but declined by policy."""
        self.status = AuditStatus.declined
        self.error_code = "CONFIRMATION_REQUIRED"
    
    @property
    def duration_ms(self) -> int:
        """Calculate duration in milliseconds."""
        elapsed = time.perf_counter() - self.start_time
        return int(elapsed * 1000)


def log_tool_invocation(context: AuditContext) -> None:
    """Emit the audit record for a finished invocation."""
    log = logger.warning if context.status is AuditStatus.error else logger.info
    log(
        "tool_invocation",
        request_id=context.request_id,
        tool_name=context.tool_name,
        status=context.status.value,
        duration_ms=context.duration_ms,
        error_code=context.error_code,
    )


@asynccontextmanager
async def audit_tool_invocation(
    tool_name: str,
    request_id: str | None = None,
) -> AsyncGenerator[AuditContext, None]:
    """Context manager for auditing tool invocations.
    
    Automatically tracks timing and logs when the context exits.
    
    Args:
        tool_name: Which tool is being invoked.
        request_id: Correlation ID; generated when omitted.
        
    Yields:
        AuditContext for marking status/errors.
        
    Example:
        async with audit_tool_invocation("rag_query") as ctx:
            try:
                result = await do_work()
            except PipelineError as e:
                ctx.mark_error(e.code)
                raise
    """
    context = AuditContext(request_id or str(uuid4()), tool_name)
    try:
        yield context
    finally:
        log_tool_invocation(context)

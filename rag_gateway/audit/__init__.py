"""Audit module - structured invocation logging."""

from .logger import AuditContext, AuditStatus, audit_tool_invocation, log_tool_invocation

__all__ = [
    "AuditContext",
    "AuditStatus",
    "audit_tool_invocation",
    "log_tool_invocation",
]

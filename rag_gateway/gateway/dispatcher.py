"""Routes tool calls to handlers and guarantees an envelope for every call."""

from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from rag_gateway.audit import audit_tool_invocation
from rag_gateway.exceptions import RAGGatewayError
from rag_gateway.pipeline import Pipeline
from rag_gateway.registry import ToolRegistry

from .envelope import error_result, success_result
from .exceptions import ArgumentValidationError, UnknownToolError
from .handlers import HANDLERS, ToolHandler, is_declined
from .lifecycle import LifecycleGate
from .schemas import ToolResult


logger = structlog.get_logger("gateway.dispatcher")


def _format_validation_errors(exc: ValidationError) -> list[str]:
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        lines.append(f"{location}: {error['msg']}")
    return lines


class ToolDispatcher:
    """Validates, gates and runs tool calls.

    ``dispatch`` never raises: unknown tools, invalid arguments, failed
    initialization and handler errors all come back as error envelopes.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        gate: LifecycleGate,
        pipeline: Pipeline,
        handlers: Mapping[str, ToolHandler] | None = None,
    ):
        handlers = dict(HANDLERS if handlers is None else handlers)

        missing = [name for name in registry.names() if name not in handlers]
        unadvertised = [name for name in handlers if name not in registry]
        if missing or unadvertised:
            raise ValueError(
                f"tool registry and handlers disagree (no handler: {missing}, "
                f"not in registry: {unadvertised})"
            )

        self._registry = registry
        self._gate = gate
        self._pipeline = pipeline
        self._handlers = handlers

    def validate(self, name: str, arguments: Mapping[str, Any] | None) -> Any:
        """Resolve a tool and validate its arguments.

        Args:
            name: Tool name from the call.
            arguments: Raw argument mapping from the call.

        Returns:
            The validated, defaulted arguments model.

        Raises:
            UnknownToolError: If the tool isn't registered.
            ArgumentValidationError: If the arguments don't fit the tool.
        """
        if name not in self._registry:
            raise UnknownToolError(name)

        handler = self._handlers[name]
        try:
            return handler.arguments_model.model_validate(dict(arguments or {}))
        except ValidationError as e:
            raise ArgumentValidationError(name, _format_validation_errors(e)) from e

    async def dispatch(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        request_id: str | None = None,
    ) -> ToolResult:
        """Execute one tool call.

        Args:
            name: Tool to invoke.
            arguments: Raw tool arguments.
            request_id: Optional correlation ID for the audit log.

        Returns:
            ToolResult for the call, successful or not.
        """
        async with audit_tool_invocation(tool_name=name, request_id=request_id) as audit_ctx:
            try:
                validated = self.validate(name, arguments)
            except RAGGatewayError as e:
                audit_ctx.mark_error(e.code)
                return error_result(name, e)

            try:
                await self._gate.ensure_ready()
            except Exception as e:
                audit_ctx.mark_error("PIPELINE_INITIALIZATION_FAILED")
                return error_result(name, e)

            try:
                payload = await self._handlers[name].run(validated, self._pipeline)
            except Exception as e:
                audit_ctx.mark_error(getattr(e, "code", None) or e.__class__.__name__)
                logger.error("tool_failed", tool_name=name, error=str(e), exc_info=True)
                return error_result(name, e)

            try:
                result = success_result(payload)
            except Exception as e:
                audit_ctx.mark_error("UNSERIALIZABLE_RESULT")
                logger.error("tool_result_not_serializable", tool_name=name, error=str(e))
                return error_result(name, f"Result could not be serialized: {e}")

            if is_declined(payload):
                audit_ctx.mark_declined()
            return result

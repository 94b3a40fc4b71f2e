"""Pydantic schemas for tool descriptors."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolDescriptor(BaseModel):
    """A callable operation advertised through tools/list.
    
    Attributes:
        name: Stable, unique tool identifier.
        description: Human-readable description shown to the client.
        inputSchema: JSON Schema describing the tool arguments.
    """
    
    model_config = ConfigDict(frozen=True)
    
    name: str = Field(..., description="Unique tool identifier")
    description: str = Field(..., description="Human-readable description")
    inputSchema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON Schema for the tool arguments",
    )
    
    @property
    def required(self) -> list[str]:
        """Names of the arguments the schema marks as mandatory."""
        return list(self.inputSchema.get("required", []))


class ToolRegistryConfig(BaseModel):
    """Container for tool definitions."""

    tools: list[ToolDescriptor] = Field(default_factory=list)

"""Pydantic schemas for tool calls, tool results and resources."""

from typing import Any, Literal

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt

from rag_gateway.pipeline import Document


class TextContent(BaseModel):
    """Content item in a tool response."""
    
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform envelope every tool call resolves to.
    
    Attributes:
        content: Text items carrying the serialized payload.
        isError: True when the call failed.
    """
    
    content: list[TextContent]
    isError: bool = False


class ResourceDescriptor(BaseModel):
    """A URI-addressed, read-only resource."""
    
    uri: str
    name: str
    description: str
    mimeType: str


class ResourceContents(BaseModel):
    """Contents returned by a resource read."""
    
    uri: str
    mimeType: str
    text: str


# Tool arguments. Field aliases match the names advertised in tools.yaml.

# Numbers are strict: "5" and true are rejected rather than coerced.

class RagQueryArguments(BaseModel):
    question: str = Field(..., description="The question to search for")
    top_k: StrictInt = Field(default=5, alias="topK")
    threshold: StrictFloat = Field(default=0.5)
    filters: dict[str, Any] = Field(default_factory=dict)


class RagSearchArguments(BaseModel):
    query: str = Field(..., description="The search query")
    top_k: StrictInt = Field(default=10, alias="topK")
    filters: dict[str, Any] = Field(default_factory=dict)


class IndexDocumentArguments(Document):
    pass


class IndexDocumentsBatchArguments(BaseModel):
    documents: list[Document] = Field(..., description="Documents to index")


class DeleteBySourceArguments(BaseModel):
    source: str = Field(..., description="Source identifier to delete")


class GetStatsArguments(BaseModel):
    pass


class ClearCollectionArguments(BaseModel):
    # Missing confirm is a declined request, not a validation failure.
    confirm: StrictBool | None = Field(default=None, description="Must be true to confirm deletion")

"""Response models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class HealthResponse(BaseModel):
    status: str


class ToolInfo(BaseModel):
    """One entry of the tool catalogue."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(..., alias="inputSchema")


class ToolListResponse(BaseModel):
    tools: List[ToolInfo]


class ToolCallResponse(BaseModel):
    """Result of a successful tool call."""
    tool: str
    success: bool = True
    result: Any = None


class PolicyDeniedResponse(BaseModel):
    tool: str
    reason: str
    message: str


class InvalidArgumentsResponse(BaseModel):
    tool: str
    message: str
    errors: Optional[List[Dict[str, Any]]] = None

"""Cache payloads relayed from agents."""

from typing import Any, Optional

from pydantic import Field

from cache_admin.api.schemas.base import ApiModel


class ParametersDetails(ApiModel):
    """Named group of parameters reported by an agent."""

    name: str = Field(..., description="Parameter group name")
    parameters: dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Parameter values keyed by parameter name",
    )


class AgentResponse(ApiModel):
    """
    One agent node's answer to a cache request.

    Returned unmodified to the caller; ``cache_keys`` and ``cache_result``
    are opaque to this service.
    """

    id: Optional[str] = Field(None, description="Agent node identifier")
    parameters_details: list[ParametersDetails] = Field(
        default_factory=list,
        description="Parameters the agent reports for this node",
    )
    cache_keys: list[Any] = Field(default_factory=list, description="Cache keys held by the node")
    cache_result: Any = Field(None, description="Cache value or operation result")


class PingResult(ApiModel):
    """Outcome of an agent health probe. Failures are data, not errors."""

    success: bool
    status_code: int
    message: Optional[str] = None
    response_time: float = Field(..., description="Round trip time in milliseconds")

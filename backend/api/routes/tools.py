"""Tool catalogue endpoints (HTTP front-end to the dispatcher)."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from QBMCP.client import QuickBaseError
from QBMCP.policy import PolicyDeniedError
from QBMCP.utils.error_handling import ErrorContext, StepError, create_error_response
from QBMCP.utils.logging import get_logger
from backend.dependencies import get_dispatcher
from backend.models.responses import (
    InvalidArgumentsResponse,
    PolicyDeniedResponse,
    ToolCallResponse,
    ToolInfo,
    ToolListResponse,
)
from backend.tools import InvalidToolArguments, ToolDispatcher, UnknownToolError, list_tool_specs

logger = get_logger(__name__)

router = APIRouter(prefix="/api/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse, response_model_by_alias=True)
async def list_tools():
    """List every tool with its description and input schema."""
    tools = [
        ToolInfo(name=spec.name, description=spec.description, input_schema=spec.input_schema())
        for spec in list_tool_specs()
    ]
    return ToolListResponse(tools=tools)


@router.post("/{tool_name}", response_model=ToolCallResponse)
async def call_tool(
    tool_name: str,
    arguments: Optional[Dict[str, Any]] = Body(None),
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
):
    """
    Execute one tool.
    
    Failures map to status codes: unknown tool 404, policy refusal 403,
    bad arguments 422, QuickBase or build-step failure 502. A build-step
    failure body carries the identifiers created before it under ``created``.
    """
    try:
        result = await dispatcher.dispatch(tool_name, arguments or {})
    except UnknownToolError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PolicyDeniedError as e:
        body = PolicyDeniedResponse(tool=tool_name, reason=e.reason, message=str(e))
        return JSONResponse(status_code=403, content=body.model_dump())
    except InvalidToolArguments as e:
        body = InvalidArgumentsResponse(tool=tool_name, message=str(e), errors=e.errors)
        return JSONResponse(status_code=422, content=body.model_dump(mode="json"))
    except StepError as e:
        logger.error(f"Tool {tool_name} failed at step {e.context.step_id}: {e}")
        return JSONResponse(status_code=502, content=jsonable_encoder(create_error_response(e, e.context)))
    except QuickBaseError as e:
        logger.error(f"Tool {tool_name} failed: {e}")
        context = ErrorContext(operation=tool_name, step_id="remote_call")
        return JSONResponse(status_code=502, content=jsonable_encoder(create_error_response(e, context)))
    
    return ToolCallResponse(tool=tool_name, result=result)

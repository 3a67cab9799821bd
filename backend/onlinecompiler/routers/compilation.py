import logging

from fastapi import APIRouter, Depends, Request

from ..bridge import ExecutionBridge, build_request
from ..errors import BridgeError
from ..models import CompileRequest, CompileResponse, ErrorResponse

logger = logging.getLogger("onlinecompiler")

router = APIRouter()


def get_bridge(request: Request) -> ExecutionBridge:
    return request.app.state.bridge


@router.post(
    "",
    response_model=CompileResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def compile_endpoint(payload: CompileRequest, bridge: ExecutionBridge = Depends(get_bridge)):
    # validation happens before any call to Judge0
    execution_request = build_request(payload.code, payload.languageId, payload.input)
    try:
        result = await bridge.compile(execution_request)
    except BridgeError:
        raise
    except Exception as exc:
        # raised as a BridgeError so the response still carries CORS headers
        logger.exception("Unhandled error while compiling: %s", exc)
        raise BridgeError() from exc
    return CompileResponse.from_result(result)

from fastapi import APIRouter, Depends

from ..bridge import ExecutionBridge
from ..models import ErrorResponse, Language
from .compilation import get_bridge

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/languages", response_model=list[Language], responses={502: {"model": ErrorResponse}})
async def list_languages(bridge: ExecutionBridge = Depends(get_bridge)):
    return await bridge.languages()

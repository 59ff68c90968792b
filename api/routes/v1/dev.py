"""Development-only endpoints. Mounted only when APP_ENV=development."""

from fastapi import APIRouter, Depends

from api.dependencies import EntityStore, get_store
from api.schemas.common import OkResponse

router = APIRouter(prefix="/dev", tags=["dev"])


@router.post(
    "/reset",
    response_model=OkResponse,
    summary="Reset Data",
    description="Delete every job, candidate, timeline event, note, assessment and submission.",
)
async def reset(store: EntityStore = Depends(get_store)):
    await store.clear()
    return OkResponse()

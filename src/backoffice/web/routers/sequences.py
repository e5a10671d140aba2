from fastapi import APIRouter

from backoffice.core.modules.counter.models import Counter
from backoffice.web.deps import AppDep

router: APIRouter = APIRouter(tags=["sequences"])


@router.get(
    "/sequences/{entity_name}",
    summary="Get ID counter",
    description="Inspect the highest minted ID and the pending reuse queue of an entity name.",
    operation_id="getSequence",
)
async def get_sequence(entity_name: str, app: AppDep) -> Counter:
    return await app.get_sequence(entity_name)

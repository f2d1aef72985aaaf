from fastapi import APIRouter, Depends

from cardpoints.api.dependencies import get_orchestrator, to_http_exception
from cardpoints.domain.models import CalculationResult
from cardpoints.errors import RewardEngineError
from cardpoints.schemas.requests import CalculateRequest
from cardpoints.services.orchestrator import RewardOrchestrator

router = APIRouter(tags=["calculate"])


@router.post("/calculate", response_model=CalculationResult)
async def calculate(
    request: CalculateRequest,
    orchestrator: RewardOrchestrator = Depends(get_orchestrator),
) -> CalculationResult:
    try:
        return await orchestrator.calculate(request)
    except RewardEngineError as exc:
        raise to_http_exception(exc) from exc

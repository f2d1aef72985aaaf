from fastapi import APIRouter, Depends

from cardpoints.api.dependencies import get_orchestrator
from cardpoints.schemas.responses import PresetSummary
from cardpoints.services.orchestrator import RewardOrchestrator

router = APIRouter(tags=["presets"])


@router.get("/presets", response_model=list[PresetSummary])
def list_presets(orchestrator: RewardOrchestrator = Depends(get_orchestrator)) -> list[PresetSummary]:
    return [
        PresetSummary(
            key=preset.key,
            issuer=preset.issuer,
            name=preset.name,
            points_currency=preset.points_currency,
            rule_count=len(preset.rules),
        )
        for preset in orchestrator.presets.list_presets()
    ]

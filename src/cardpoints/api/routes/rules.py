from fastapi import APIRouter, Depends, Response

from cardpoints.api.dependencies import bearer_token, get_orchestrator, to_http_exception
from cardpoints.domain.models import RewardRule
from cardpoints.errors import RewardEngineError
from cardpoints.schemas.requests import BootstrapRequest, CardDetectRequest, RuleWriteRequest
from cardpoints.schemas.responses import BootstrapResponse, RuleListResponse
from cardpoints.services.orchestrator import RewardOrchestrator

router = APIRouter(tags=["rules"])


@router.get("/products/{product_id}/rules", response_model=RuleListResponse)
async def list_rules(
    product_id: str,
    orchestrator: RewardOrchestrator = Depends(get_orchestrator),
) -> RuleListResponse:
    try:
        rules = await orchestrator.list_rules_for_product(product_id)
    except RewardEngineError as exc:
        raise to_http_exception(exc) from exc
    return RuleListResponse(product_id=product_id, rules=rules)


@router.post("/rules", response_model=RewardRule, status_code=201)
async def create_rule(
    request: RuleWriteRequest,
    token: str | None = Depends(bearer_token),
    orchestrator: RewardOrchestrator = Depends(get_orchestrator),
) -> RewardRule:
    try:
        return await orchestrator.create_rule(request, token)
    except RewardEngineError as exc:
        raise to_http_exception(exc) from exc


@router.put("/rules/{rule_id}", status_code=204)
async def update_rule(
    rule_id: str,
    request: RuleWriteRequest,
    token: str | None = Depends(bearer_token),
    orchestrator: RewardOrchestrator = Depends(get_orchestrator),
) -> Response:
    existing = orchestrator.rule_store.get_rule(rule_id)
    fields = request.model_dump()
    if existing is not None:
        fields["created_at"] = existing.created_at
    try:
        await orchestrator.update_rule(RewardRule(id=rule_id, **fields), token)
    except RewardEngineError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=204)


@router.delete("/rules/{rule_id}", status_code=204)
async def delete_rule(
    rule_id: str,
    token: str | None = Depends(bearer_token),
    orchestrator: RewardOrchestrator = Depends(get_orchestrator),
) -> Response:
    try:
        await orchestrator.delete_rule(rule_id, token)
    except RewardEngineError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=204)


@router.post("/products/{product_id}/bootstrap", response_model=BootstrapResponse, status_code=201)
async def bootstrap(
    product_id: str,
    request: BootstrapRequest,
    token: str | None = Depends(bearer_token),
    orchestrator: RewardOrchestrator = Depends(get_orchestrator),
) -> BootstrapResponse:
    try:
        created = await orchestrator.bootstrap_from_preset(product_id, request.preset_key, token)
    except RewardEngineError as exc:
        raise to_http_exception(exc) from exc
    return BootstrapResponse(product_id=product_id, preset_key=request.preset_key, rules_created=created)


@router.post("/products/{product_id}/quick-setup", response_model=BootstrapResponse)
async def quick_setup(
    product_id: str,
    request: CardDetectRequest,
    token: str | None = Depends(bearer_token),
    orchestrator: RewardOrchestrator = Depends(get_orchestrator),
) -> BootstrapResponse:
    """Seed from whichever preset matches the card; ``presetKey`` is null when none does."""
    preset = orchestrator.presets.detect(request.issuer, request.name)
    try:
        created = await orchestrator.bootstrap_if_available(product_id, request.issuer, request.name, token)
    except RewardEngineError as exc:
        raise to_http_exception(exc) from exc
    return BootstrapResponse(
        product_id=product_id,
        preset_key=preset.key if preset is not None else None,
        rules_created=created,
    )

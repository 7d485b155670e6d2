import logging
from fastapi import APIRouter, Depends

from sitemedic.schemas.attribution import (
    AttributionChain,
    AttributionCheckResponse,
    AttributionEvent,
    AttributionState,
    Handoff,
    PassOnInitiateRequest,
    PassOnResolveRequest,
)
from sitemedic.services.attribution import (
    get_attribution_chain,
    initiate_pass_on,
    is_fee_policy_allowed_for_provenance,
    resolve_pass_on,
)
from sitemedic.services.webhook import send_webhook
from sitemedic.core.security import Principal, require_company_admin
from sitemedic.core.rate_limit import check_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/attribution", tags=["attribution"])


@router.post("/check", response_model=AttributionCheckResponse)
async def check_attribution(state: AttributionState):
    return AttributionCheckResponse(
        source_provenance=state.source_provenance,
        fee_policy=state.fee_policy,
        allowed=is_fee_policy_allowed_for_provenance(state.source_provenance, state.fee_policy),
    )


@router.post("/chain", response_model=AttributionChain)
async def attribution_chain(event: AttributionEvent):
    return get_attribution_chain(event)


@router.post("/pass-on", response_model=Handoff)
async def initiate(
    payload: PassOnInitiateRequest,
    principal: Principal = Depends(require_company_admin),
):
    await check_rate_limit(principal.company_id)

    handoff = initiate_pass_on(
        payload.event,
        initiating_company_id=principal.company_id,
        target_company_id=payload.target_company_id,
        reason=payload.reason,
        initiated_by=principal.user_id,
    )

    await send_webhook({
        "handoff_id": handoff.id,
        "event_id": handoff.event_id,
        "status": str(handoff.status),
        "from_company_id": handoff.current_from_company_id,
        "target_company_id": handoff.target_company_id,
    })
    return handoff


@router.post("/pass-on/resolve", response_model=Handoff)
async def resolve(
    payload: PassOnResolveRequest,
    principal: Principal = Depends(require_company_admin),
):
    await check_rate_limit(principal.company_id)

    handoff = resolve_pass_on(
        payload.handoff,
        actor_company_id=principal.company_id,
        action=payload.action,
        actor_user_id=principal.user_id,
    )

    await send_webhook({
        "handoff_id": handoff.id,
        "event_id": handoff.event_id,
        "status": str(handoff.status),
        "reason": payload.reason,
    })
    return handoff

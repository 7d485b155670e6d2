"""Attribution invariants and the pass-on handoff lifecycle.

A booking's fee policy must agree with where the work came from:

    self_sourced         -> subscription
    marketplace_sourced  -> marketplace_commission | co_share_blended

Handoffs move through solo -> pass_on_pending -> pass_on_accepted or
pass_on_declined. Only the currently responsible company may start one and
only its target may resolve it. Storage of handoffs belongs to the caller.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from sitemedic.core.enums import AttributionLifecycle, FeePolicy, PassOnAction, SourceProvenance
from sitemedic.core.errors import AttributionIntegrityError, PassOnPermissionError, PassOnStateError
from sitemedic.core.metrics import integrity_violations, pass_on_transitions
from sitemedic.schemas.attribution import AttributionChain, AttributionEvent, AttributionState, Handoff

logger = logging.getLogger(__name__)

ALLOWED_FEE_POLICIES = {
    SourceProvenance.SELF_SOURCED: frozenset({FeePolicy.SUBSCRIPTION}),
    SourceProvenance.MARKETPLACE_SOURCED: frozenset(
        {FeePolicy.MARKETPLACE_COMMISSION, FeePolicy.CO_SHARE_BLENDED}
    ),
}


def is_fee_policy_allowed_for_provenance(provenance, policy) -> bool:
    try:
        provenance = SourceProvenance(str(provenance))
        policy = FeePolicy(str(policy))
    except ValueError:
        return False
    return policy in ALLOWED_FEE_POLICIES[provenance]


def assert_pass_on_preserves_integrity(state: AttributionState) -> None:
    if not is_fee_policy_allowed_for_provenance(state.source_provenance, state.fee_policy):
        integrity_violations.inc()
        raise AttributionIntegrityError(
            f"Attribution integrity mismatch: fee policy '{state.fee_policy}' "
            f"is not allowed for source provenance '{state.source_provenance}'"
        )


def _accepted(handoffs: Iterable[Handoff]) -> list:
    return [h for h in handoffs if h.status == AttributionLifecycle.PASS_ON_ACCEPTED]


def _latest(handoffs: list) -> Optional[Handoff]:
    if not handoffs:
        return None
    # created_at may be missing on caller-built records; list order breaks ties
    indexed = list(enumerate(handoffs))
    floor = datetime.min.replace(tzinfo=timezone.utc)
    indexed.sort(key=lambda pair: (_aware(pair[1].created_at) or floor, pair[0]))
    return indexed[-1][1]


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def current_responsible_company(origin_company_id: Optional[str], handoffs: Iterable[Handoff]) -> Optional[str]:
    latest = _latest(_accepted(handoffs))
    return latest.target_company_id if latest else origin_company_id


def active_handoff(handoffs: Iterable[Handoff]) -> Optional[Handoff]:
    return _latest([h for h in handoffs if h.status == AttributionLifecycle.PASS_ON_PENDING])


def lifecycle_state(handoffs: Iterable[Handoff]) -> AttributionLifecycle:
    handoffs = list(handoffs)
    pending = active_handoff(handoffs)
    if pending:
        return pending.status
    latest = _latest(handoffs)
    return latest.status if latest else AttributionLifecycle.SOLO


def get_attribution_chain(event: AttributionEvent) -> AttributionChain:
    return AttributionChain(
        event_id=event.event_id,
        lifecycle_state=lifecycle_state(event.handoffs),
        source_provenance=event.source_provenance,
        fee_policy=event.fee_policy,
        origin_company_id=event.origin_company_id,
        current_responsible_company_id=current_responsible_company(event.origin_company_id, event.handoffs),
        active_handoff=active_handoff(event.handoffs),
    )


def initiate_pass_on(
    event: AttributionEvent,
    initiating_company_id: str,
    target_company_id: str,
    reason: str,
    initiated_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Handoff:
    state = AttributionState(source_provenance=event.source_provenance, fee_policy=event.fee_policy)
    assert_pass_on_preserves_integrity(state)

    if not event.origin_company_id:
        raise PassOnStateError("Could not resolve origin company for this event")

    responsible = current_responsible_company(event.origin_company_id, event.handoffs)
    if responsible != initiating_company_id:
        raise PassOnPermissionError("Only the currently responsible company can initiate pass-on")

    if target_company_id == responsible:
        raise PassOnStateError("Target company must differ from current responsible company")

    if active_handoff(event.handoffs) is not None:
        raise PassOnStateError("A pass-on handoff is already pending for this event")

    handoff = Handoff(
        id=str(uuid.uuid4()),
        event_id=event.event_id,
        origin_company_id=event.origin_company_id,
        current_from_company_id=responsible,
        target_company_id=target_company_id,
        source_provenance_snapshot=event.source_provenance,
        fee_policy_snapshot=event.fee_policy,
        status=AttributionLifecycle.PASS_ON_PENDING,
        reason=reason,
        initiated_by=initiated_by,
        created_at=now or datetime.now(timezone.utc),
    )
    pass_on_transitions.labels(status=str(handoff.status)).inc()
    logger.info(
        f"Pass-on initiated for event {event.event_id}: {responsible} -> {target_company_id}"
    )
    return handoff


def resolve_pass_on(
    handoff: Handoff,
    actor_company_id: str,
    action: PassOnAction,
    actor_user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Handoff:
    if handoff.status != AttributionLifecycle.PASS_ON_PENDING:
        raise PassOnStateError("Handoff is not pending")

    if handoff.target_company_id != actor_company_id:
        raise PassOnPermissionError("Only the target company can accept or decline this handoff")

    assert_pass_on_preserves_integrity(
        AttributionState(
            source_provenance=handoff.source_provenance_snapshot,
            fee_policy=handoff.fee_policy_snapshot,
        )
    )

    now = now or datetime.now(timezone.utc)
    if action == PassOnAction.ACCEPT:
        update = {
            "status": AttributionLifecycle.PASS_ON_ACCEPTED,
            "accepted_by": actor_user_id,
            "accepted_at": now,
        }
    else:
        update = {
            "status": AttributionLifecycle.PASS_ON_DECLINED,
            "declined_by": actor_user_id,
            "declined_at": now,
        }

    resolved = handoff.model_copy(update=update)
    pass_on_transitions.labels(status=str(resolved.status)).inc()
    logger.info(f"Handoff {handoff.id} for event {handoff.event_id} is now {resolved.status}")
    return resolved

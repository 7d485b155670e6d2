from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from sitemedic.core.enums import AttributionLifecycle, FeePolicy, PassOnAction, SourceProvenance


class AttributionState(BaseModel):
    source_provenance: SourceProvenance
    fee_policy: FeePolicy


class AttributionCheckResponse(BaseModel):
    source_provenance: SourceProvenance
    fee_policy: FeePolicy
    allowed: bool


class Handoff(BaseModel):
    id: str
    event_id: str
    origin_company_id: str
    current_from_company_id: str
    target_company_id: str
    source_provenance_snapshot: SourceProvenance
    fee_policy_snapshot: FeePolicy
    status: AttributionLifecycle = AttributionLifecycle.PASS_ON_PENDING
    reason: str = ""
    initiated_by: Optional[str] = None
    accepted_by: Optional[str] = None
    accepted_at: Optional[datetime] = None
    declined_by: Optional[str] = None
    declined_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AttributionEvent(BaseModel):
    """Event attribution as held by the caller: state plus handoff history."""

    event_id: str
    source_provenance: SourceProvenance
    fee_policy: FeePolicy
    origin_company_id: Optional[str] = None
    handoffs: List[Handoff] = Field(default_factory=list)


class PassOnInitiateRequest(BaseModel):
    event: AttributionEvent
    target_company_id: str
    reason: str = Field(min_length=1, max_length=1000)


class PassOnResolveRequest(BaseModel):
    handoff: Handoff
    action: PassOnAction
    reason: Optional[str] = Field(default=None, max_length=1000)


class AttributionChain(BaseModel):
    event_id: str
    lifecycle_state: AttributionLifecycle
    source_provenance: SourceProvenance
    fee_policy: FeePolicy
    origin_company_id: Optional[str] = None
    current_responsible_company_id: Optional[str] = None
    active_handoff: Optional[Handoff] = None

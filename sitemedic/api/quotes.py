"""Quote ranking and submission checks, with Redis caching of rankings"""
import json
import logging
import uuid
from datetime import datetime, timezone
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from sitemedic.schemas.quote import Quote, QuoteSubmission, RankQuotesRequest, RankQuotesResponse
from sitemedic.schemas.rates import RateCheckRequest, RateCheckResult
from sitemedic.services.scoring import filter_quotes, sort_quotes
from sitemedic.services.minimum_rates import (
    event_duration_hours,
    validate_minimum_rates,
    validate_quote_against_minimum_rates,
)
from sitemedic.core.enums import QuoteStatus
from sitemedic.core.errors import MarketplaceError
from sitemedic.core.metrics import cache_hits, cache_misses, quotes_ranked, submissions_blocked
from sitemedic.core.redis import get_redis
from sitemedic.core.config import settings
from sitemedic.utils.hashing import cache_key

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/rank", response_model=RankQuotesResponse)
async def rank_quotes(req: RankQuotesRequest):

    key = cache_key("rank", req)
    redis = get_redis()

    if redis is not None:
        try:
            cached = await redis.get(key)
            if cached:
                cache_hits.labels(cache="rank").inc()
                return RankQuotesResponse.model_validate(json.loads(cached))
            cache_misses.labels(cache="rank").inc()
        except Exception as e:
            logger.warning(f"Cache retrieval failed: {e}")

    visible = filter_quotes(req.quotes, req.filters)
    ranked = sort_quotes(visible, req.sort_by)
    quotes_ranked.labels(sort_by=str(req.sort_by)).inc(len(ranked))
    result = RankQuotesResponse(total=len(ranked), quotes=ranked)

    if redis is not None:
        try:
            await redis.set(key, result.model_dump_json(), ex=settings.RANKING_CACHE_TTL)
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")

    return result


@router.post("/rate-check", response_model=RateCheckResult)
async def rate_check(req: RateCheckRequest):
    if req.staffing_plan is not None:
        return validate_minimum_rates(req.staffing_plan)

    if req.total_price is None or not req.headcount_plans or req.duration_hours is None:
        raise MarketplaceError(
            "Provide either staffing_plan, or total_price with headcount_plans and duration_hours"
        )
    return validate_quote_against_minimum_rates(req.total_price, req.headcount_plans, req.duration_hours)


@router.post("/submit", response_model=Quote)
async def submit_quote(payload: QuoteSubmission):
    """Gate a quote submission on the minimum rate floors.

    Violations are a hard block: the whole list comes back with a 400.
    """
    total_price = payload.pricing_breakdown.total
    duration = event_duration_hours(payload.event_days)
    check = validate_quote_against_minimum_rates(total_price, payload.headcount(), duration)

    if not check.is_valid:
        submissions_blocked.inc()
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Quote is below minimum rate guidelines",
                "violations": [v.model_dump(mode="json") for v in check.violations],
                "messages": check.messages,
            },
        )

    return Quote(
        id=payload.id or str(uuid.uuid4()),
        event_id=payload.event_id,
        company_id=payload.company_id,
        total_price=total_price,
        submitted_at=datetime.now(timezone.utc),
        status=QuoteStatus.SUBMITTED,
        qualifications=sorted({plan.role for plan in payload.headcount()}, key=str),
    )

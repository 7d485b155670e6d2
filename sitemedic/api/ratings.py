from fastapi import APIRouter

from sitemedic.schemas.rating import RatingVisibility, RatingVisibilityRequest
from sitemedic.services.ratings import resolve_rating_visibility

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("/visibility", response_model=RatingVisibility)
async def rating_visibility(req: RatingVisibilityRequest):
    return resolve_rating_visibility(
        req.ratings,
        viewer_user_id=req.viewer_user_id,
        last_event_day=req.last_event_day,
        now=req.now,
    )

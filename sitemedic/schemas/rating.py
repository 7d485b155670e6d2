from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from sitemedic.core.enums import RaterType


class Rating(BaseModel):
    id: str
    rater_user_id: str
    rater_type: RaterType
    rating: int = Field(ge=1, le=5)
    review: Optional[str] = Field(default=None, max_length=2000)
    created_at: Optional[datetime] = None


class RatingVisibilityRequest(BaseModel):
    ratings: List[Rating] = Field(default_factory=list)
    viewer_user_id: str
    last_event_day: date
    now: Optional[datetime] = None


class RatingVisibility(BaseModel):
    blind_window_active: bool
    blind_window_expires_at: datetime
    both_parties_rated: bool
    viewer_rating: Optional[Rating] = None
    visible_ratings: List[Rating]
    average_rating: Optional[float] = None
    count: int = 0

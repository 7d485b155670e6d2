from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional

from sitemedic.core.config import settings
from sitemedic.core.enums import RaterType
from sitemedic.schemas.rating import Rating, RatingVisibility


def blind_window_expires_at(last_event_day: date) -> datetime:
    start_of_day = datetime.combine(last_event_day, time.min, tzinfo=timezone.utc)
    return start_of_day + timedelta(days=settings.BLIND_WINDOW_DAYS)


def average_rating(ratings: Iterable[Rating]) -> Optional[float]:
    values = [r.rating for r in ratings]
    if not values:
        return None
    return round(sum(values) / len(values), 1)


def resolve_rating_visibility(
    ratings: Iterable[Rating],
    viewer_user_id: str,
    last_event_day: date,
    now: Optional[datetime] = None,
) -> RatingVisibility:
    """Hide the other party's rating until both have rated or the window closes.

    The viewer always sees their own rating. While the window is open the
    average is withheld and the count covers only what the viewer can see.
    """
    ratings = list(ratings)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    expires_at = blind_window_expires_at(last_event_day)

    rater_types = {r.rater_type for r in ratings}
    both_rated = RaterType.CLIENT in rater_types and RaterType.COMPANY in rater_types
    active = not both_rated and now <= expires_at

    viewer_rating = next((r for r in ratings if r.rater_user_id == viewer_user_id), None)
    if active:
        visible = [viewer_rating] if viewer_rating else []
    else:
        visible = ratings

    return RatingVisibility(
        blind_window_active=active,
        blind_window_expires_at=expires_at,
        both_parties_rated=both_rated,
        viewer_rating=viewer_rating,
        visible_ratings=visible,
        average_rating=None if active else average_rating(ratings),
        count=len(visible),
    )

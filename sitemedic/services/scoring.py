"""Best-value quote ranking plus the other quote list orderings.

Price and rating are each normalised to a 0-100 sub-score and blended
60/40. Ranking is deterministic: equal composites fall back to the most
recent submission, then the higher company rating, then quote id.
"""
import logging
from typing import Iterable, List, Optional

from sitemedic.core.enums import QuoteStatus, SortMode
from sitemedic.schemas.quote import Quote, QuoteFilters, RankedQuote

logger = logging.getLogger(__name__)

PRICE_WEIGHT = 0.6
RATING_WEIGHT = 0.4
MAX_RATING = 5.0
TIED_PRICE_SCORE = 50.0
SINGLE_QUOTE_SCORE = 100.0

RANKABLE_STATUSES = {QuoteStatus.SUBMITTED, QuoteStatus.REVISED}


def is_rankable(quote: Quote) -> bool:
    return quote.status in RANKABLE_STATUSES


def calculate_price_score(price: float, min_price: float, max_price: float) -> float:
    if max_price == min_price:
        return TIED_PRICE_SCORE
    return (max_price - price) / (max_price - min_price) * 100.0


def calculate_rating_score(rating: Optional[float]) -> float:
    if rating is None:
        return 0.0
    clamped = max(0.0, min(MAX_RATING, float(rating)))
    return clamped / MAX_RATING * 100.0


def _tie_break_key(composite: float, quote: Quote):
    submitted = quote.submitted_at.timestamp() if quote.submitted_at else None
    rating = quote.company_rating if quote.company_rating is not None else -1.0
    return (
        -round(composite, 9),
        submitted is None,
        -(submitted or 0.0),
        -rating,
        quote.id,
    )


def rank_quotes_by_best_value(quotes: Iterable[Quote]) -> List[RankedQuote]:
    rankable = [q for q in quotes if is_rankable(q)]
    if not rankable:
        return []

    if len(rankable) == 1:
        only = rankable[0]
        return [
            RankedQuote(
                quote=only,
                rank=1,
                best_value_score=SINGLE_QUOTE_SCORE,
                price_score=100.0,
                rating_score=calculate_rating_score(only.company_rating),
            )
        ]

    prices = [q.total_price for q in rankable]
    min_price, max_price = min(prices), max(prices)

    scored = []
    for quote in rankable:
        price_score = calculate_price_score(quote.total_price, min_price, max_price)
        rating_score = calculate_rating_score(quote.company_rating)
        composite = PRICE_WEIGHT * price_score + RATING_WEIGHT * rating_score
        scored.append((
            composite,
            RankedQuote(
                quote=quote,
                rank=0,
                best_value_score=round(composite, 2),
                price_score=round(price_score, 2),
                rating_score=round(rating_score, 2),
            ),
        ))

    # order on the unrounded composite; rounding is for display only
    scored.sort(key=lambda pair: _tie_break_key(pair[0], pair[1].quote))
    ranked_quotes = [ranked for _, ranked in scored]
    for position, ranked in enumerate(ranked_quotes, start=1):
        ranked.rank = position

    logger.debug(f"Ranked {len(ranked_quotes)} quotes, top={ranked_quotes[0].quote.id}")
    return ranked_quotes


def filter_quotes(quotes: Iterable[Quote], filters: Optional[QuoteFilters] = None) -> List[Quote]:
    """Drop drafts, then apply the optional qualification/price/rating filters."""
    result = [q for q in quotes if q.status != QuoteStatus.DRAFT]
    if filters is None:
        return result

    if filters.qualification is not None:
        result = [q for q in result if filters.qualification in q.qualifications]
    if filters.price_min is not None:
        result = [q for q in result if q.total_price >= filters.price_min]
    if filters.price_max is not None:
        result = [q for q in result if q.total_price <= filters.price_max]
    if filters.min_rating is not None:
        result = [q for q in result if (q.company_rating or 0.0) >= filters.min_rating]
    return result


def _positional(quotes: List[Quote]) -> List[RankedQuote]:
    return [
        RankedQuote(quote=q, rank=idx, best_value_score=0.0)
        for idx, q in enumerate(quotes, start=1)
    ]


def sort_quotes(quotes: Iterable[Quote], mode: SortMode = SortMode.BEST_VALUE) -> List[RankedQuote]:
    quotes = list(quotes)

    if mode == SortMode.BEST_VALUE:
        return rank_quotes_by_best_value(quotes)

    if mode == SortMode.PRICE_LOW:
        ordered = sorted(quotes, key=lambda q: (q.total_price, q.id))
    elif mode == SortMode.PRICE_HIGH:
        ordered = sorted(quotes, key=lambda q: (-q.total_price, q.id))
    elif mode == SortMode.RATING:
        ordered = sorted(
            quotes,
            key=lambda q: (-(q.company_rating if q.company_rating is not None else -1.0), q.id),
        )
    elif mode == SortMode.RECENT:
        ordered = sorted(
            quotes,
            key=lambda q: (
                q.submitted_at is None,
                -(q.submitted_at.timestamp() if q.submitted_at else 0.0),
                q.id,
            ),
        )
    else:
        raise ValueError(f"Unsupported sort mode: {mode}")

    return _positional(ordered)

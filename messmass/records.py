"""
Event statistic records and the stored event document shape.

A StatRecord is the flat per-event map of counters (images, fans,
demographics, merchandise, visits, ...). It is kept as a plain dict so that
stored documents round-trip without loss; this module provides the field
catalogue and the helpers everything else reads them through.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
import logging
import math
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

StatRecord = Dict[str, Any]

IMAGE_FIELDS: Tuple[str, ...] = (
    'remoteImages', 'hostessImages', 'selfies', 'approvedImages', 'rejectedImages',
)
FAN_FIELDS: Tuple[str, ...] = ('remoteFans', 'indoor', 'outdoor', 'stadium')
DEMOGRAPHIC_FIELDS: Tuple[str, ...] = (
    'female', 'male', 'genAlpha', 'genYZ', 'genX', 'boomer',
)
MERCHANDISE_FIELDS: Tuple[str, ...] = (
    'merched', 'jersey', 'scarf', 'flags', 'baseballCap', 'other',
)
MERCHANDISE_PRICE_FIELDS: Tuple[str, ...] = (
    'jerseyPrice', 'scarfPrice', 'flagsPrice', 'capPrice', 'otherPrice',
)
VISIT_FIELDS: Tuple[str, ...] = (
    'visitQrCode', 'visitShortUrl', 'visitWeb', 'visitFacebook', 'visitInstagram',
    'visitYoutube', 'visitTiktok', 'visitX', 'visitTrustpilot', 'socialVisit',
    'visitCta1', 'visitCta2', 'visitCta3',
)
EVENT_FIELDS: Tuple[str, ...] = (
    'eventAttendees', 'eventTicketPurchases', 'eventResultHome', 'eventResultVisitor',
    'eventValuePropositionVisited', 'eventValuePropositionPurchases',
)
BITLY_FIELDS: Tuple[str, ...] = (
    'bitlyTotalClicks', 'bitlyUniqueClicks', 'bitlyMobileClicks', 'bitlyDesktopClicks',
    'bitlyTabletClicks', 'bitlyiOSClicks', 'bitlyAndroidClicks', 'bitlyQrCodeClicks',
    'bitlySocialClicks', 'bitlyDirectClicks', 'bitlyCountryCount', 'bitlyReferrerCount',
)
GAME_FIELDS: Tuple[str, ...] = (
    'totalGames', 'gamesWithoutAds', 'gamesWithAds', 'gamesWithoutSlideshow',
    'gamesWithSlideshow', 'gamesWithoutTech', 'gamesWithSelfie', 'gamesWithoutSelfie',
    'userRegistration', 'userRegistrationHostess',
)

STAT_FIELDS: Tuple[str, ...] = (
    IMAGE_FIELDS + FAN_FIELDS + DEMOGRAPHIC_FIELDS + MERCHANDISE_FIELDS
    + MERCHANDISE_PRICE_FIELDS + VISIT_FIELDS + EVENT_FIELDS + BITLY_FIELDS + GAME_FIELDS
)

# Rate fields: aggregated by mean, every other numeric field by sum.
AVERAGED_FIELDS = frozenset(MERCHANDISE_PRICE_FIELDS)

# Computed on demand by the chart calculator, never stored.
DERIVED_FIELDS: Tuple[str, ...] = ('totalFans', 'allImages')

_FIELD_LOOKUP: Dict[str, str] = {name.upper(): name for name in STAT_FIELDS + DERIVED_FIELDS}


def resolve_field_name(name: str) -> str:
    """
    Map a formula token to its StatRecord key.

    Accepts `stats.remoteImages`, `remoteImages` and the upper-case token
    form `REMOTE_IMAGES`. Unknown names are returned unchanged (minus any
    `stats.` prefix) so that dynamic keys still resolve.
    """
    name = name.strip()
    if name.startswith('stats.'):
        name = name[len('stats.'):]
    if name in _FIELD_LOOKUP.values():
        return name
    return _FIELD_LOOKUP.get(name.replace('_', '').upper(), name)


def is_number(value: Any) -> bool:
    """True for int values and finite floats, excluding bool."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def numeric_value(record: Mapping[str, Any], key: str) -> Optional[float]:
    """Return the numeric value stored under key, or None when absent or not numeric."""
    value = record.get(key)
    if is_number(value):
        return float(value)
    return None


def stat(record: Mapping[str, Any], key: str) -> float:
    """Numeric value under key, treating absent values as zero."""
    value = numeric_value(record, key)
    return value if value is not None else 0.0


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is zero."""
    if not denominator:
        return 0.0
    return numerator / denominator


def parse_event_date(value: Any) -> Optional[date]:
    """
    Parse a stored event date.

    Args:
        value: date, datetime, or ISO string ('2024-03-12' or '2024-03-12T18:00:00.000Z').

    Returns:
        Optional[date]: Parsed date, or None when value is empty.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Invalid event date: {value!r}") from e


@dataclass(frozen=True)
class EventDocument:
    """
    One stored event with its statistics.

    Attributes:
        event_id (str): Storage identifier.
        name (str): Event name.
        event_date (date): Day the event took place.
        hashtags (Tuple[str, ...]): Unscoped lowercase hashtags.
        categorized_hashtags (Dict[str, Tuple[str, ...]]): Category name -> hashtags.
        stats (StatRecord): Counter map for the event.
        partner_id (Optional[str]): Owning (home) partner.
        opponent_id (Optional[str]): Opposing partner, for sports fixtures.
        is_home_game (Optional[bool]): Home/away flag when known.
    """
    event_id: str
    name: str
    event_date: date
    hashtags: Tuple[str, ...] = ()
    categorized_hashtags: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    stats: StatRecord = field(default_factory=dict)
    partner_id: Optional[str] = None
    opponent_id: Optional[str] = None
    is_home_game: Optional[bool] = None

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> EventDocument:
        """Create from the stored camelCase document shape."""
        event_id = doc.get('_id', doc.get('id'))
        if event_id is None:
            raise ValueError("Event document has no '_id' or 'id'")
        event_date = parse_event_date(doc.get('eventDate'))
        if event_date is None:
            raise ValueError(f"Event document {event_id} has no eventDate")
        categorized = {
            str(category).lower(): tuple(str(tag).lower() for tag in (tags or ()))
            for category, tags in (doc.get('categorizedHashtags') or {}).items()
        }
        return cls(
            event_id=str(event_id),
            name=doc.get('eventName', ''),
            event_date=event_date,
            hashtags=tuple(str(tag).lower() for tag in (doc.get('hashtags') or ())),
            categorized_hashtags=categorized,
            stats=dict(doc.get('stats') or {}),
            partner_id=doc.get('partner1Id') or doc.get('partnerId'),
            opponent_id=doc.get('partner2Id'),
            is_home_game=doc.get('isHomeGame'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored camelCase document shape."""
        return {
            '_id': self.event_id,
            'eventName': self.name,
            'eventDate': self.event_date.isoformat(),
            'hashtags': list(self.hashtags),
            'categorizedHashtags': {k: list(v) for k, v in self.categorized_hashtags.items()},
            'stats': dict(self.stats),
            'partner1Id': self.partner_id,
            'partner2Id': self.opponent_id,
            'isHomeGame': self.is_home_game,
        }

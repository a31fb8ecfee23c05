"""
Pure helpers over lists of match records (selectors output).

Nothing here touches the database; every function takes and returns plain
sequences so the API can filter, sort and summarize whatever it fetched.
"""
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import datetime

from django.utils import timezone

from algorithms.blood_compatibility import BLOOD_TYPES
from .models import DonationMatch

BLOOD_TYPE_RANK = {blood_type: rank for rank, blood_type in enumerate(BLOOD_TYPES)}

SORT_KEYS = {
    'created_at': lambda m: m.created_at,
    'blood_type': lambda m: BLOOD_TYPE_RANK.get(m.blood_type, len(BLOOD_TYPES)),
    'requester_name': lambda m: (m.requester_name or '').casefold(),
    'donor_name': lambda m: (m.donor_name or '').casefold(),
    'location': lambda m: m.location.casefold(),
}
SORT_ORDERS = ('asc', 'desc')


@dataclass(frozen=True)
class MatchStatistics:
    total_matches: int = 0
    pending_matches: int = 0
    accepted_matches: int = 0
    declined_matches: int = 0
    completed_matches: int = 0
    cancelled_matches: int = 0
    average_response_time_minutes: float = 0.0
    success_rate: float = 0.0

    def to_dict(self):
        return asdict(self)


def filter_by_status(matches, status):
    return [match for match in matches if match.status == status]


def local_date(value):
    """Calendar date of `value` in the current time zone."""
    if timezone.is_aware(value):
        return timezone.localdate(value)
    return value.date()


def _on_or_after(created_at, start):
    if isinstance(start, datetime):
        return created_at >= start
    return local_date(created_at) >= start


def _on_or_before(created_at, end):
    if isinstance(end, datetime):
        return created_at <= end
    return local_date(created_at) <= end


def filter_by_date_range(matches, start=None, end=None):
    """
    Keep matches created within [start, end]. Either bound may be omitted.
    A `date` bound covers that whole day, a `datetime` bound is exact.
    """
    return [
        match for match in matches
        if (start is None or _on_or_after(match.created_at, start))
        and (end is None or _on_or_before(match.created_at, end))
    ]


def filter_by_location(matches, city=None, state=None):
    """Exact city/state match against the location the record carries."""
    return [
        match for match in matches
        if (not city or match.city == city)
        and (not state or match.state == state)
    ]


def filter_matches(matches, status=None, city=None, state=None, start=None, end=None):
    matches = list(matches)
    if status:
        matches = filter_by_status(matches, status)
    if start is not None or end is not None:
        matches = filter_by_date_range(matches, start, end)
    if city or state:
        matches = filter_by_location(matches, city, state)
    return matches


def compute_statistics(matches):
    """
    Summarize a list of matches.

    success_rate is (Accepted + Completed) / (total - Pending), a fraction in
    [0, 1]; average response time covers matches that have been answered.
    Both are 0 when there is nothing to divide by.
    """
    matches = list(matches)
    counts = Counter(match.status for match in matches)

    response_minutes = [
        (match.response_time - match.created_at).total_seconds() / 60
        for match in matches
        if match.response_time is not None
    ]
    answered = len(matches) - counts[DonationMatch.PENDING]
    successful = counts[DonationMatch.ACCEPTED] + counts[DonationMatch.COMPLETED]

    return MatchStatistics(
        total_matches=len(matches),
        pending_matches=counts[DonationMatch.PENDING],
        accepted_matches=counts[DonationMatch.ACCEPTED],
        declined_matches=counts[DonationMatch.DECLINED],
        completed_matches=counts[DonationMatch.COMPLETED],
        cancelled_matches=counts[DonationMatch.CANCELLED],
        average_response_time_minutes=(
            sum(response_minutes) / len(response_minutes) if response_minutes else 0.0
        ),
        success_rate=successful / answered if answered else 0.0,
    )


def sort_matches(matches, key='created_at', order='asc'):
    """
    Stable sort by one of SORT_KEYS.

    Raises ValueError for an unknown key or order, or when a record's view
    does not offer the key (e.g. donor_name on a donor's own view).
    """
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{key}'. Choose from: {', '.join(SORT_KEYS)}")
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order '{order}'. Use 'asc' or 'desc'")

    matches = list(matches)
    for match in matches:
        if key not in match.sort_keys:
            raise ValueError(f"Cannot sort {type(match).__name__} records by '{key}'")

    return sorted(matches, key=SORT_KEYS[key], reverse=(order == 'desc'))

"""
Read-side views of donation matches.

A match is shown with the *other* party's details: donors see the request
they were matched to (MatchWithRequest), requesters see the donor
(MatchWithDonor). Both carry the same core fields.
"""
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from .exceptions import Forbidden
from .lifecycle import is_match_donor, is_match_requester
from .models import DonationMatch


@dataclass(frozen=True)
class MatchCore:
    view: ClassVar[str] = 'core'
    sort_keys: ClassVar[FrozenSet[str]] = frozenset({'created_at'})

    id: int
    request_id: int
    donor_id: int
    status: str
    created_at: datetime
    updated_at: datetime
    response_time: Optional[datetime]
    donation_time: Optional[datetime]
    notes: Optional[str]
    distance_km: Optional[float]

    @staticmethod
    def core_fields(match: DonationMatch) -> dict:
        return {
            'id': match.pk,
            'request_id': match.request_id,
            'donor_id': match.donor_id,
            'status': match.status,
            'created_at': match.created_at,
            'updated_at': match.updated_at,
            'response_time': match.response_time,
            'donation_time': match.donation_time,
            'notes': match.notes,
            'distance_km': match.distance_km,
        }

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MatchWithRequest(MatchCore):
    """Donor's view: blood_type, city and state are the request's"""
    view: ClassVar[str] = 'request'
    sort_keys: ClassVar[FrozenSet[str]] = frozenset(
        {'created_at', 'blood_type', 'requester_name', 'location'}
    )

    blood_type: str
    units_needed: int
    urgency_level: str
    required_by_date: Optional[datetime]
    hospital_name: str
    hospital_address: str
    city: str
    state: str
    requester_name: str

    @property
    def location(self) -> str:
        return f"{self.city}, {self.state}"

    @classmethod
    def from_match(cls, match: DonationMatch) -> 'MatchWithRequest':
        blood_request = match.request
        return cls(
            **cls.core_fields(match),
            blood_type=blood_request.blood_type,
            units_needed=blood_request.units_needed,
            urgency_level=blood_request.urgency_level,
            required_by_date=blood_request.required_by_date,
            hospital_name=blood_request.hospital_name,
            hospital_address=blood_request.hospital_address,
            city=blood_request.hospital_city,
            state=blood_request.hospital_state,
            requester_name=blood_request.requester.display_name,
        )


@dataclass(frozen=True)
class MatchWithDonor(MatchCore):
    """Requester's view: blood_type, city and state are the donor's"""
    view: ClassVar[str] = 'donor'
    sort_keys: ClassVar[FrozenSet[str]] = frozenset(
        {'created_at', 'blood_type', 'donor_name', 'location'}
    )

    blood_type: str
    donor_name: str
    donor_phone: str
    donor_email: str
    city: str
    state: str

    @property
    def location(self) -> str:
        return f"{self.city}, {self.state}"

    @classmethod
    def from_match(cls, match: DonationMatch) -> 'MatchWithDonor':
        donor = match.donor
        return cls(
            **cls.core_fields(match),
            blood_type=donor.blood_type,
            donor_name=donor.full_name,
            donor_phone=donor.phone,
            donor_email=donor.user.email,
            city=donor.city,
            state=donor.state,
        )


def matches_for_donor(donor):
    queryset = DonationMatch.objects.filter(donor=donor).select_related(
        'request', 'request__requester'
    ).order_by('-created_at')
    return [MatchWithRequest.from_match(match) for match in queryset]


def matches_for_request(blood_request):
    queryset = DonationMatch.objects.filter(request=blood_request).select_related(
        'donor', 'donor__user'
    ).order_by('-created_at')
    return [MatchWithDonor.from_match(match) for match in queryset]


def matches_for_user(user):
    """Every match the user takes part in, seen from their side."""
    donor = getattr(user, 'donor_profile', None)
    results = matches_for_donor(donor) if donor is not None else []

    queryset = DonationMatch.objects.filter(request__requester=user).select_related(
        'donor', 'donor__user'
    ).order_by('-created_at')
    results.extend(MatchWithDonor.from_match(match) for match in queryset)
    return results


def match_detail(match, viewer):
    if is_match_donor(match, viewer):
        return MatchWithRequest.from_match(match)
    if is_match_requester(match, viewer):
        return MatchWithDonor.from_match(match)
    raise Forbidden(f"You are not a party to match #{match.pk}")

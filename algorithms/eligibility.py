"""
Candidate donor search for a blood request.

`find_compatible_donors` is the default DONOR_SEARCH_BACKEND: blood-type and
geographic filtering plus TOPSIS ranking, returning donor ids with a
`distance_km` figure per candidate.
"""
import logging
from datetime import date

from django.conf import settings

from algorithms.blood_compatibility import get_compatible_donors, is_compatible
from algorithms.haversine import distance_between
from algorithms.mcdm import rank_donors_mcdm
from bloodrequests.models import BloodRequest
from donors.models import DonorProfile
from matching.exceptions import NotFound
from matching.models import DonationMatch

logger = logging.getLogger(__name__)


def is_donor_eligible(donor, blood_request, include_unavailable=False, today=None):
    """
    Check if a donor may be offered a given blood request.

    Criteria:
    - Donor is available and out of the donation cooldown (unless include_unavailable)
    - Donor blood type compatible with request

    Distance is checked separately since it needs the search radius.
    """
    if not include_unavailable:
        if not donor.is_available:
            return False

        if donor.last_donation_date:
            days_since_last = ((today or date.today()) - donor.last_donation_date).days
            if days_since_last < settings.DONATION_COOLDOWN_DAYS:
                return False

    return is_compatible(donor.blood_type, blood_request.blood_type)


def find_compatible_donors(request_id, max_distance=None, max_results=None, include_unavailable=False):
    """
    Search, filter and rank donors for a blood request.

    Args:
        request_id: BloodRequest primary key
        max_distance: search radius in km (settings.MATCH_MAX_DISTANCE_KM)
        max_results: how many ranked candidates to return (settings.MATCH_MAX_RESULTS)
        include_unavailable: also consider unavailable / cooling-down donors

    Returns:
        {'matches': [{'donor_id', 'distance_km', 'score'}, ...], 'total_count': int}
        where total_count counts every eligible donor before truncation.
    """
    if max_distance is None:
        max_distance = settings.MATCH_MAX_DISTANCE_KM
    if max_results is None:
        max_results = settings.MATCH_MAX_RESULTS

    try:
        blood_request = BloodRequest.objects.get(pk=request_id)
    except BloodRequest.DoesNotExist:
        raise NotFound(f"Blood request {request_id} not found")

    donors = DonorProfile.objects.filter(
        blood_type__in=get_compatible_donors(blood_request.blood_type),
        user__is_active=True,
    )
    if not include_unavailable:
        donors = donors.filter(is_available=True)

    # Donors who already answered no, or already hold a live candidacy
    excluded_ids = DonationMatch.objects.filter(
        request=blood_request,
        status__in=[DonationMatch.DECLINED, *DonationMatch.LIVE_STATUSES],
    ).values_list('donor_id', flat=True)
    donors = donors.exclude(id__in=excluded_ids)

    today = date.today()
    eligible = []
    distances = {}
    for donor in donors:
        if not is_donor_eligible(donor, blood_request, include_unavailable, today):
            continue

        distance = distance_between(
            blood_request.hospital_latitude,
            blood_request.hospital_longitude,
            donor.latitude,
            donor.longitude,
        )
        if distance is not None and distance > max_distance:
            continue

        distances[donor.id] = round(distance, 2) if distance is not None else None
        eligible.append(donor)

    ranked = rank_donors_mcdm(eligible, distances, blood_request.blood_type, today=today)

    logger.info(
        f"{len(ranked)} donors eligible for blood request {blood_request.id} "
        f"within {max_distance}km"
    )

    return {
        'matches': [
            {
                'donor_id': donor.id,
                'distance_km': distances[donor.id],
                'score': round(score, 4),
            }
            for donor, score in ranked[:max_results]
        ],
        'total_count': len(ranked),
    }

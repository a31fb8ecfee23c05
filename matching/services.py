# matching/services.py
"""
Match creation and lookup.

Donor search itself is pluggable: DONOR_SEARCH_BACKEND names a callable
taking (request_id, max_distance, max_results, include_unavailable) and
returning {'matches': [{'donor_id', 'distance_km', ...}], 'total_count'}.
"""
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.module_loading import import_string

from algorithms.blood_compatibility import is_compatible
from bloodrequests.models import BloodRequest
from donors.models import DonorProfile
from notifications.models import Notification
from notifications.services import notify
from .exceptions import Conflict, Forbidden, MatchValidationError, NotFound
from .models import DonationMatch

logger = logging.getLogger(__name__)


def get_search_backend():
    return import_string(settings.DONOR_SEARCH_BACKEND)


def get_match(match_id):
    try:
        return DonationMatch.objects.select_related(
            'donor', 'donor__user', 'request', 'request__requester'
        ).get(pk=match_id)
    except DonationMatch.DoesNotExist:
        raise NotFound(f"Donation match {match_id} not found")


def get_blood_request(request_id):
    try:
        return BloodRequest.objects.select_related('requester').get(pk=request_id)
    except BloodRequest.DoesNotExist:
        raise NotFound(f"Blood request {request_id} not found")


def _ensure_requester(blood_request, actor):
    if actor is None or blood_request.requester_id != actor.pk:
        raise Forbidden(f"Only the owner of blood request {blood_request.pk} can match donors to it")


def find_matches(blood_request, max_distance=None, max_results=None, include_unavailable=False):
    """Run the configured donor search for a request. Nothing is written."""
    search = get_search_backend()
    result = search(
        blood_request.pk,
        max_distance=max_distance,
        max_results=max_results,
        include_unavailable=include_unavailable,
    )
    return {
        'matches': list(result.get('matches') or []),
        'total_count': result.get('total_count') or 0,
    }


def _normalize_candidates(candidates):
    """Accept donor ids or search result dicts; keep the first distance seen per donor."""
    normalized = {}
    for candidate in candidates:
        if isinstance(candidate, dict):
            donor_id = candidate['donor_id']
            distance = candidate.get('distance_km')
        else:
            donor_id, distance = candidate, None
        normalized.setdefault(donor_id, distance)
    return normalized


def create_matches(blood_request, candidates, actor):
    """
    Create Pending matches between a blood request and candidate donors.

    Args:
        blood_request: the BloodRequest being matched
        candidates: donor ids, or dicts with 'donor_id' and optional 'distance_km'
        actor: the requesting user; must own the blood request

    Returns:
        list of created DonationMatch objects. Donors that already hold a
        live match for this request are skipped.

    Raises:
        Forbidden: actor does not own the request
        MatchValidationError: request is closed, or a donor's blood type
            cannot give to the request's blood type
        NotFound: a candidate donor does not exist
        Conflict: a concurrent call created a live match for the same donor
    """
    _ensure_requester(blood_request, actor)

    if not blood_request.is_open:
        raise MatchValidationError(
            f"Blood request {blood_request.pk} is {blood_request.status}; donors can no longer be matched"
        )

    wanted = _normalize_candidates(candidates)
    donors = DonorProfile.objects.select_related('user').in_bulk(list(wanted))

    missing = [donor_id for donor_id in wanted if donor_id not in donors]
    if missing:
        raise NotFound(f"Donor(s) not found: {', '.join(str(donor_id) for donor_id in missing)}")

    for donor in donors.values():
        if not is_compatible(donor.blood_type, blood_request.blood_type):
            logger.error(
                f"Refusing match: donor {donor.pk} ({donor.blood_type}) cannot give to "
                f"request {blood_request.pk} ({blood_request.blood_type})"
            )
            raise MatchValidationError(
                f"Donor {donor.pk} with blood type {donor.blood_type} is not compatible "
                f"with requested blood type {blood_request.blood_type}"
            )

    live = set(DonationMatch.objects.filter(
        request=blood_request,
        donor_id__in=list(wanted),
        status__in=DonationMatch.LIVE_STATUSES,
    ).values_list('donor_id', flat=True))

    for donor_id in live:
        logger.warning(f"Donor {donor_id} already has a live match for request {blood_request.pk}, skipping")

    created = []
    try:
        with transaction.atomic():
            for donor_id, distance in wanted.items():
                if donor_id in live:
                    continue
                match = DonationMatch.objects.create(
                    request=blood_request,
                    donor=donors[donor_id],
                    distance_km=distance,
                )
                created.append(match)

            if created and blood_request.status == BloodRequest.PENDING:
                BloodRequest.objects.filter(pk=blood_request.pk).update(
                    status=BloodRequest.MATCHING,
                    updated_at=timezone.now(),
                )
                blood_request.status = BloodRequest.MATCHING
    except IntegrityError:
        raise Conflict(
            f"Another live match was created concurrently for blood request {blood_request.pk}"
        )

    logger.info(f"Created {len(created)} matches for blood request {blood_request.pk}")

    for match in created:
        notify_donor_of_match(match)

    return created


def match_blood_request(blood_request, actor, max_distance=None, max_results=None, include_unavailable=False):
    """Search donors for a request and create matches for every candidate found."""
    _ensure_requester(blood_request, actor)
    result = find_matches(
        blood_request,
        max_distance=max_distance,
        max_results=max_results,
        include_unavailable=include_unavailable,
    )
    created = create_matches(blood_request, result['matches'], actor)
    return {
        'matches': created,
        'total_count': result['total_count'],
    }


def cancel_blood_request(blood_request, actor):
    """
    Close a request so no further donors can be matched to it. Existing
    matches keep their status; donors holding a live one are told.
    """
    _ensure_requester(blood_request, actor)
    if not blood_request.is_open:
        raise MatchValidationError(
            f"Blood request {blood_request.pk} is {blood_request.status} and cannot be cancelled"
        )

    updated = BloodRequest.objects.filter(
        pk=blood_request.pk,
        status__in=BloodRequest.OPEN_STATUSES,
    ).update(status=BloodRequest.CANCELLED, updated_at=timezone.now())
    if updated == 0:
        raise Conflict(f"Blood request {blood_request.pk} changed while cancelling; reload it")
    blood_request.status = BloodRequest.CANCELLED

    logger.info(f"Blood request {blood_request.pk} cancelled by requester {actor.pk}")

    donor_user_ids = list(blood_request.matches.filter(
        status__in=DonationMatch.LIVE_STATUSES,
    ).values_list('donor__user_id', flat=True))
    if donor_user_ids:
        notify(
            donor_user_ids,
            Notification.REQUEST,
            'Blood Request Cancelled',
            f"The blood request for {blood_request.hospital_name} has been cancelled by the requester.",
            related_entity_id=blood_request.pk,
            related_entity_type='blood_requests',
        )
    return blood_request


def notify_donor_of_match(match):
    blood_request = match.request
    notify(
        match.donor.user_id,
        Notification.MATCH,
        'New Donation Match',
        f"You've been matched with a blood request for {blood_request.blood_type} at "
        f"{blood_request.hospital_name}. Please check your matches for details.",
        related_entity_id=match.pk,
        related_entity_type='donation_matches',
    )

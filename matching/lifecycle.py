"""
Donation match lifecycle.

    Pending --accept--> Accepted --complete--> Completed
       |                    |
       +--decline--> Declined   +--cancel--> Cancelled

Every write is conditioned on the status the caller read (compare-and-set),
so two racing transitions on one match cannot both succeed.
"""
import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from bloodrequests.models import BloodRequest
from donors.models import DonationHistory, DonorProfile
from notifications.models import Notification
from notifications.services import notify
from .aggregation import local_date
from .exceptions import Conflict, Forbidden, InvalidTransition, NotFound
from .models import DonationMatch

logger = logging.getLogger(__name__)

TRANSITIONS = {
    DonationMatch.PENDING: frozenset([DonationMatch.ACCEPTED, DonationMatch.DECLINED]),
    DonationMatch.ACCEPTED: frozenset([DonationMatch.COMPLETED, DonationMatch.CANCELLED]),
}

CANCEL_NOTE_PREFIX = 'Cancelled: '
DEFAULT_CANCEL_NOTE = 'Cancelled by user'


def can_transition(current, requested):
    return requested in TRANSITIONS.get(current, frozenset())


def is_match_donor(match, actor):
    return actor is not None and match.donor.user_id == actor.pk


def is_match_requester(match, actor):
    return actor is not None and match.request.requester_id == actor.pk


def authorize(match, actor, requested):
    """
    Only the match's donor may move it, except Cancel which the request's
    owner may also apply. Returns the role the actor acts in.
    """
    if is_match_donor(match, actor):
        return 'donor'
    if requested == DonationMatch.CANCELLED and is_match_requester(match, actor):
        return 'requester'
    raise Forbidden(f"You are not authorized to mark match #{match.pk} as {requested}")


def _apply(match, requested, **fields):
    """
    Compare-and-set the new status against the status held by `match`.
    Updates `match` in place on success.
    """
    expected = match.status
    if not can_transition(expected, requested):
        raise InvalidTransition(expected, requested)

    fields['status'] = requested
    fields['updated_at'] = timezone.now()

    updated = DonationMatch.objects.filter(pk=match.pk, status=expected).update(**fields)
    if updated == 0:
        if not DonationMatch.objects.filter(pk=match.pk).exists():
            raise NotFound(f"Donation match {match.pk} not found")
        raise Conflict(
            f"Match #{match.pk} is no longer {expected}; reload it before retrying"
        )

    for name, value in fields.items():
        setattr(match, name, value)

    logger.info(f"Match #{match.pk} moved {expected} -> {requested}")
    return match


# ============================================
# TRANSITIONS
# ============================================
def accept_match(match, actor):
    authorize(match, actor, DonationMatch.ACCEPTED)
    _apply(match, DonationMatch.ACCEPTED, response_time=timezone.now())
    notify_requester_of_status(match)
    return match


def decline_match(match, actor, notes=None):
    authorize(match, actor, DonationMatch.DECLINED)
    fields = {'response_time': timezone.now()}
    if notes:
        fields['notes'] = notes
    _apply(match, DonationMatch.DECLINED, **fields)
    notify_requester_of_status(match)
    return match


def complete_match(match, actor, notes=None, donation_time=None):
    """
    Accepted -> Completed. Fulfils the request, records the donation in the
    donor's history and updates the donor's counters, atomically.
    """
    authorize(match, actor, DonationMatch.COMPLETED)
    fields = {'donation_time': donation_time or timezone.now()}
    if notes:
        fields['notes'] = notes

    with transaction.atomic():
        _apply(match, DonationMatch.COMPLETED, **fields)

        blood_request = match.request
        BloodRequest.objects.filter(pk=blood_request.pk).update(
            status=BloodRequest.FULFILLED,
            updated_at=timezone.now(),
        )
        blood_request.status = BloodRequest.FULFILLED

        donor = match.donor
        donated_on = local_date(match.donation_time)
        DonationHistory.objects.create(
            donor=donor,
            blood_request=blood_request,
            date_donated=donated_on,
            blood_type=donor.blood_type,
            units_donated=1,
            location=blood_request.hospital_location,
            notes=match.notes or 'Donation completed',
        )

        DonorProfile.objects.filter(pk=donor.pk).update(
            donation_count=F('donation_count') + 1,
            last_donation_date=donated_on,
        )
        donor.refresh_from_db(fields=['donation_count', 'last_donation_date'])

    logger.info(f"Blood request {blood_request.pk} fulfilled by match #{match.pk}")
    notify_requester_of_status(match)
    return match


def cancel_match(match, actor, reason=None):
    role = authorize(match, actor, DonationMatch.CANCELLED)
    notes = f"{CANCEL_NOTE_PREFIX}{reason}" if reason else DEFAULT_CANCEL_NOTE
    _apply(match, DonationMatch.CANCELLED, notes=notes)

    if role == 'donor':
        notify_requester_of_status(match)
    else:
        notify_donor_of_cancellation(match)
    return match


# ============================================
# NOTIFICATIONS (best-effort)
# ============================================
STATUS_MESSAGES = {
    DonationMatch.ACCEPTED: (
        'Donation Match Accepted',
        '{donor} has accepted your blood request for {hospital}.',
    ),
    DonationMatch.DECLINED: (
        'Donation Match Declined',
        'A donor has declined your blood request for {hospital}.',
    ),
    DonationMatch.COMPLETED: (
        'Donation Completed',
        '{donor} has completed their donation for your request at {hospital}.',
    ),
    DonationMatch.CANCELLED: (
        'Donation Match Cancelled',
        'A donation match for your request at {hospital} has been cancelled.',
    ),
}


def notify_requester_of_status(match):
    title, template = STATUS_MESSAGES[match.status]
    message = template.format(donor=match.donor.full_name, hospital=match.request.hospital_name)
    notify(
        match.request.requester_id,
        Notification.MATCH,
        title,
        message,
        related_entity_id=match.pk,
        related_entity_type='donation_matches',
    )


def notify_donor_of_cancellation(match):
    notify(
        match.donor.user_id,
        Notification.MATCH,
        'Donation Match Cancelled',
        f"A blood request match for {match.request.hospital_name} has been cancelled by the requester.",
        related_entity_id=match.pk,
        related_entity_type='donation_matches',
    )

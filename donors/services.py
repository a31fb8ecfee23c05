from django.db.models import Sum

# Each whole-blood donation can help up to three patients
LIVES_PER_DONATION = 3


def get_donor_stats(donor):
    """
    Summary of a donor's record for their dashboard
    """
    history = donor.donation_history.all()
    total_donations = history.count()
    total_units = history.aggregate(total=Sum('units_donated'))['total'] or 0
    latest = history.order_by('-date_donated').first()

    return {
        'total_donations': total_donations,
        'total_units': total_units,
        'last_donation_date': latest.date_donated if latest else donor.last_donation_date,
        'lives_impacted': total_donations * LIVES_PER_DONATION,
        'can_donate': donor.can_donate,
        'days_until_eligible': donor.days_until_eligible,
    }

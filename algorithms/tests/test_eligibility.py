from datetime import date, timedelta

from django.test import TestCase, override_settings

from algorithms.eligibility import find_compatible_donors, is_donor_eligible
from matching.exceptions import NotFound
from matching.models import DonationMatch
from matching.tests.factories import make_blood_request, make_donor, make_match, make_requester

KATHMANDU = (27.7172, 85.3240)


@override_settings(MATCH_MAX_DISTANCE_KM=50, MATCH_MAX_RESULTS=20, DONATION_COOLDOWN_DAYS=90)
class FindCompatibleDonorsTests(TestCase):
    def setUp(self):
        self.requester = make_requester()
        self.blood_request = make_blood_request(
            self.requester,
            blood_type='A+',
            hospital_latitude=KATHMANDU[0],
            hospital_longitude=KATHMANDU[1],
        )

    def _near(self, username, blood_type, **fields):
        return make_donor(username, blood_type, latitude=27.72, longitude=85.33, **fields)

    def _donor_ids(self, result):
        return {match['donor_id'] for match in result['matches']}

    def test_only_compatible_nearby_eligible_donors(self):
        o_neg = self._near('oneg', 'O-')
        self._near('bpos', 'B+')
        self._near('away', 'A+', is_available=False)
        self._near('recent', 'A+', last_donation_date=date.today() - timedelta(days=10))
        make_donor('far', 'A-', latitude=28.7172, longitude=85.3240)
        no_coords = make_donor('nocoords', 'A+')

        result = find_compatible_donors(self.blood_request.id)

        self.assertEqual(self._donor_ids(result), {o_neg.id, no_coords.id})
        self.assertEqual(result['total_count'], 2)
        distances = {m['donor_id']: m['distance_km'] for m in result['matches']}
        self.assertIsNone(distances[no_coords.id])
        self.assertLess(distances[o_neg.id], 2)

    def test_include_unavailable(self):
        away = self._near('away', 'A+', is_available=False)

        result = find_compatible_donors(self.blood_request.id, include_unavailable=True)

        self.assertIn(away.id, self._donor_ids(result))

    def test_declined_and_live_donors_are_excluded(self):
        declined = self._near('declined', 'O+')
        pending = self._near('pending', 'O+')
        fresh = self._near('fresh', 'O+')
        make_match(self.blood_request, declined, status=DonationMatch.DECLINED)
        make_match(self.blood_request, pending)

        result = find_compatible_donors(self.blood_request.id)

        self.assertEqual(self._donor_ids(result), {fresh.id})

    def test_max_results_truncates_but_counts_everyone(self):
        for i in range(3):
            self._near(f"donor{i}", 'A+')

        result = find_compatible_donors(self.blood_request.id, max_results=2)

        self.assertEqual(len(result['matches']), 2)
        self.assertEqual(result['total_count'], 3)

    def test_inactive_users_are_skipped(self):
        donor = self._near('inactive', 'A+')
        donor.user.is_active = False
        donor.user.save()

        result = find_compatible_donors(self.blood_request.id)

        self.assertEqual(result['matches'], [])

    def test_missing_request(self):
        with self.assertRaises(NotFound):
            find_compatible_donors(999999)


@override_settings(DONATION_COOLDOWN_DAYS=90)
class IsDonorEligibleTests(TestCase):
    def test_cooldown_boundary(self):
        requester = make_requester()
        blood_request = make_blood_request(requester, blood_type='O+')
        today = date(2024, 6, 1)
        donor = make_donor('d1', 'O+', last_donation_date=today - timedelta(days=89))

        self.assertFalse(is_donor_eligible(donor, blood_request, today=today))

        donor.last_donation_date = today - timedelta(days=90)
        self.assertTrue(is_donor_eligible(donor, blood_request, today=today))

    def test_incompatible_even_when_unavailable_allowed(self):
        requester = make_requester()
        blood_request = make_blood_request(requester, blood_type='O-')
        donor = make_donor('d1', 'O+')

        self.assertFalse(is_donor_eligible(donor, blood_request, include_unavailable=True))

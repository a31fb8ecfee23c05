from django.db.models import ProtectedError
from django.test import TestCase

from matching.exceptions import Forbidden
from matching.models import DonationMatch
from matching.selectors import (
    MatchWithDonor,
    MatchWithRequest,
    match_detail,
    matches_for_donor,
    matches_for_request,
    matches_for_user,
)
from matching.serializers import serialize_match_view
from matching.services import get_match
from .factories import make_blood_request, make_donor, make_match, make_requester, make_user


class SelectorTests(TestCase):
    def setUp(self):
        self.requester = make_requester(first_name='Sita', last_name='Sharma')
        self.blood_request = make_blood_request(
            self.requester,
            blood_type='AB+',
            units_needed=2,
            hospital_name='Patan Hospital',
            hospital_city='Lalitpur',
            hospital_state='Bagmati',
        )
        self.donor = make_donor(
            'ram', 'O-',
            full_name='Ram Thapa',
            phone='9801234567',
            city='Pokhara',
            state='Gandaki',
        )
        self.match = make_match(self.blood_request, self.donor, distance_km=7.5)

    def test_donor_sees_the_request(self):
        [record] = matches_for_donor(self.donor)

        self.assertIsInstance(record, MatchWithRequest)
        self.assertEqual(record.id, self.match.pk)
        self.assertEqual(record.blood_type, 'AB+')
        self.assertEqual(record.units_needed, 2)
        self.assertEqual(record.hospital_name, 'Patan Hospital')
        self.assertEqual(record.city, 'Lalitpur')
        self.assertEqual(record.location, 'Lalitpur, Bagmati')
        self.assertEqual(record.requester_name, 'Sita Sharma')
        self.assertEqual(record.distance_km, 7.5)
        self.assertFalse(hasattr(record, 'donor_name'))

    def test_requester_sees_the_donor(self):
        [record] = matches_for_request(self.blood_request)

        self.assertIsInstance(record, MatchWithDonor)
        self.assertEqual(record.blood_type, 'O-')
        self.assertEqual(record.donor_name, 'Ram Thapa')
        self.assertEqual(record.donor_phone, '9801234567')
        self.assertEqual(record.donor_email, 'ram@example.com')
        self.assertEqual(record.location, 'Pokhara, Gandaki')
        self.assertFalse(hasattr(record, 'requester_name'))

    def test_matches_for_user_covers_both_roles(self):
        self.assertEqual([type(r) for r in matches_for_user(self.donor.user)], [MatchWithRequest])
        self.assertEqual([type(r) for r in matches_for_user(self.requester)], [MatchWithDonor])
        self.assertEqual(matches_for_user(make_user('nobody')), [])

    def test_match_detail_depends_on_viewer(self):
        match = get_match(self.match.pk)

        self.assertIsInstance(match_detail(match, self.donor.user), MatchWithRequest)
        self.assertIsInstance(match_detail(match, self.requester), MatchWithDonor)
        with self.assertRaises(Forbidden):
            match_detail(match, make_user('stranger'))

    def test_records_serialize_to_dicts(self):
        [record] = matches_for_request(self.blood_request)

        data = record.to_dict()

        self.assertEqual(data['donor_name'], 'Ram Thapa')
        self.assertEqual(data['status'], 'Pending')

    def test_each_view_serializes_with_its_own_fields(self):
        [donor_side] = matches_for_donor(self.donor)
        [requester_side] = matches_for_request(self.blood_request)

        request_data = serialize_match_view(donor_side)
        donor_data = serialize_match_view(requester_side)

        self.assertEqual(request_data['view'], 'request')
        self.assertEqual(request_data['requester_name'], 'Sita Sharma')
        self.assertNotIn('donor_name', request_data)
        self.assertEqual(donor_data['view'], 'donor')
        self.assertEqual(donor_data['donor_name'], 'Ram Thapa')
        self.assertNotIn('requester_name', donor_data)

    def test_request_with_matches_cannot_be_deleted(self):
        with self.assertRaises(ProtectedError):
            self.blood_request.delete()

        self.assertTrue(DonationMatch.objects.filter(pk=self.match.pk).exists())

from unittest import mock

from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from bloodrequests.models import BloodRequest
from matching.exceptions import Conflict
from matching.models import DonationMatch
from notifications.models import Notification
from notifications.services import notify
from matching.tests.factories import make_blood_request, make_donor, make_match, make_requester


class BloodRequestApiTests(APITestCase):
    def setUp(self):
        self.requester = make_requester()
        self.client.force_authenticate(self.requester)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)

        response = self.client.get(reverse('api:blood-request-list'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_and_list_own_requests(self):
        make_blood_request(make_requester('other'))

        response = self.client.post(reverse('api:blood-request-list'), {
            'patient_name': 'Hari',
            'blood_type': 'O+',
            'units_needed': 2,
            'urgency_level': 'Critical',
            'hospital_name': 'Bir Hospital',
            'status': 'Fulfilled',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], BloodRequest.PENDING)
        self.assertEqual(response.data['requester'], self.requester.pk)

        listing = self.client.get(reverse('api:blood-request-list'))
        self.assertEqual([item['patient_name'] for item in listing.data], ['Hari'])

    def test_run_matching(self):
        blood_request = make_blood_request(
            self.requester, blood_type='A+', hospital_latitude=27.7172, hospital_longitude=85.3240,
        )
        donor = make_donor('ram', 'O-', latitude=27.72, longitude=85.33)
        make_donor('far', 'O-', latitude=26.0, longitude=85.33)

        response = self.client.post(
            reverse('api:blood-request-match', args=[blood_request.pk]),
            {'max_distance': 25},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_count'], 1)
        self.assertEqual(response.data['matches'][0]['donor'], donor.pk)
        self.assertEqual(response.data['request_status'], BloodRequest.MATCHING)

    def test_incompatible_donor_is_a_validation_error(self):
        blood_request = make_blood_request(self.requester, blood_type='O-')
        donor = make_donor('ram', 'A+')

        response = self.client.post(
            reverse('api:blood-request-matches', args=[blood_request.pk]),
            {'donor_ids': [donor.pk]},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'validation_error')

    def test_list_matches_for_request_shows_donor(self):
        blood_request = make_blood_request(self.requester, blood_type='A+')
        make_match(blood_request, make_donor('ram', 'O-', full_name='Ram Thapa'))

        response = self.client.get(reverse('api:blood-request-matches', args=[blood_request.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['view'], 'donor')
        self.assertEqual(response.data[0]['donor_name'], 'Ram Thapa')

    def test_other_users_requests_are_hidden(self):
        foreign = make_blood_request(make_requester('other'))

        response = self.client.post(reverse('api:blood-request-cancel', args=[foreign.pk]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cancel_request(self):
        blood_request = make_blood_request(self.requester)

        response = self.client.post(reverse('api:blood-request-cancel', args=[blood_request.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], BloodRequest.CANCELLED)

    def test_requests_cannot_be_deleted(self):
        blood_request = make_blood_request(self.requester, blood_type='A+', status=BloodRequest.MATCHING)
        match = make_match(blood_request, make_donor('ram', 'O-'))

        response = self.client.delete(reverse('api:blood-request-detail', args=[blood_request.pk]))

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertTrue(BloodRequest.objects.filter(pk=blood_request.pk).exists())
        self.assertTrue(DonationMatch.objects.filter(pk=match.pk).exists())

    def test_blood_type_is_fixed_after_creation(self):
        blood_request = make_blood_request(self.requester, blood_type='A+')

        response = self.client.patch(
            reverse('api:blood-request-detail', args=[blood_request.pk]),
            {'blood_type': 'AB+'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('blood_type', response.data)
        blood_request.refresh_from_db()
        self.assertEqual(blood_request.blood_type, 'A+')

    def test_open_request_details_can_be_edited(self):
        blood_request = make_blood_request(self.requester, blood_type='A+')

        response = self.client.patch(
            reverse('api:blood-request-detail', args=[blood_request.pk]),
            {'units_needed': 3, 'blood_type': 'A+'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['units_needed'], 3)

    def test_closed_requests_cannot_be_edited(self):
        for closed_status in (BloodRequest.FULFILLED, BloodRequest.CANCELLED):
            blood_request = make_blood_request(self.requester, status=closed_status, units_needed=1)

            response = self.client.patch(
                reverse('api:blood-request-detail', args=[blood_request.pk]),
                {'units_needed': 4},
                format='json',
            )

            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            blood_request.refresh_from_db()
            self.assertEqual(blood_request.units_needed, 1)


class MatchApiTests(APITestCase):
    def setUp(self):
        self.requester = make_requester(first_name='Sita', last_name='Sharma')
        self.blood_request = make_blood_request(self.requester, blood_type='A+', status=BloodRequest.MATCHING)
        self.donor = make_donor('ram', 'O-', full_name='Ram Thapa')
        self.match = make_match(self.blood_request, self.donor)

    def _post(self, action, user, data=None, pk=None):
        self.client.force_authenticate(user)
        return self.client.post(
            reverse(f"api:match-{action}", args=[pk or self.match.pk]),
            data or {},
            format='json',
        )

    def test_donor_lists_matches_from_request_side(self):
        self.client.force_authenticate(self.donor.user)

        response = self.client.get(reverse('api:match-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['view'], 'request')
        self.assertEqual(response.data[0]['requester_name'], 'Sita Sharma')

    def test_list_filters_and_invalid_sort(self):
        self.client.force_authenticate(self.donor.user)

        accepted = self.client.get(reverse('api:match-list'), {'status': 'Accepted'})
        bad_sort = self.client.get(reverse('api:match-list'), {'sort': 'donor_name'})
        bad_status = self.client.get(reverse('api:match-list'), {'status': 'Lost'})

        self.assertEqual(accepted.data, [])
        self.assertEqual(bad_sort.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(bad_status.status_code, status.HTTP_400_BAD_REQUEST)

    def test_detail(self):
        self.client.force_authenticate(self.requester)

        response = self.client.get(reverse('api:match-detail', args=[self.match.pk]))
        missing = self.client.get(reverse('api:match-detail', args=[999999]))

        self.assertEqual(response.data['donor_name'], 'Ram Thapa')
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data['code'], 'not_found')

    def test_accept_then_complete(self):
        accepted = self._post('accept', self.donor.user)
        completed = self._post('complete', self.donor.user, {'notes': 'All good'})

        self.assertEqual(accepted.status_code, status.HTTP_200_OK)
        self.assertEqual(accepted.data['status'], DonationMatch.ACCEPTED)
        self.assertEqual(completed.status_code, status.HTTP_200_OK)
        self.assertEqual(completed.data['status'], DonationMatch.COMPLETED)
        self.blood_request.refresh_from_db()
        self.assertEqual(self.blood_request.status, BloodRequest.FULFILLED)

    def test_invalid_transition_is_400(self):
        self._post('accept', self.donor.user)

        response = self._post('accept', self.donor.user)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_transition')
        self.assertEqual(response.data['current_status'], DonationMatch.ACCEPTED)

    def test_requester_cannot_accept(self):
        response = self._post('accept', self.requester)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'forbidden')

    def test_requester_can_cancel_with_reason(self):
        self._post('accept', self.donor.user)

        response = self._post('cancel', self.requester, {'reason': 'Patient discharged'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notes'], 'Cancelled: Patient discharged')

    def test_conflict_is_409(self):
        with mock.patch('api.views.lifecycle.accept_match', side_effect=Conflict('stale')):
            response = self._post('accept', self.donor.user)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {'error': 'stale', 'code': 'conflict'})

    def test_statistics(self):
        other = make_match(self.blood_request, make_donor('maya', 'A+'))
        self._post('decline', other.donor.user, pk=other.pk)
        self._post('accept', self.donor.user)
        self.client.force_authenticate(self.requester)

        response = self.client.get(reverse('api:match-statistics'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_matches'], 2)
        self.assertEqual(response.data['accepted_matches'], 1)
        self.assertEqual(response.data['declined_matches'], 1)
        self.assertEqual(response.data['success_rate'], 0.5)


class DonorApiTests(APITestCase):
    def setUp(self):
        self.donor = make_donor('maya', 'B+')
        self.client.force_authenticate(self.donor.user)

    def test_profile_get_and_patch(self):
        response = self.client.patch(reverse('api:donor-me'), {'is_available': False, 'donation_count': 50}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_available'])
        self.assertEqual(response.data['donation_count'], 0)
        self.assertEqual(self.client.get(reverse('api:donor-me')).data['email'], 'maya@example.com')

    def test_history_and_stats(self):
        self.assertEqual(self.client.get(reverse('api:donor-history')).data, [])
        self.assertEqual(self.client.get(reverse('api:donor-stats')).data['total_donations'], 0)

    def test_requester_has_no_donor_profile(self):
        self.client.force_authenticate(make_requester())

        response = self.client.get(reverse('api:donor-me'))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class NotificationApiTests(APITestCase):
    def setUp(self):
        self.user = make_requester()
        self.client.force_authenticate(self.user)
        notify(self.user, Notification.MATCH, 'Donation Match Accepted', 'Ram accepted')
        notify(self.user, Notification.SYSTEM, 'Maintenance', 'Tonight')
        notify(make_requester('other'), Notification.SYSTEM, 'Not yours', 'Hidden')

    def test_list_filter_and_read(self):
        listing = self.client.get(reverse('api:notification-list'))
        matches_only = self.client.get(reverse('api:notification-list'), {'type': 'Match'})

        self.assertEqual(len(listing.data), 2)
        self.assertEqual(len(matches_only.data), 1)

        notification_id = matches_only.data[0]['id']
        read = self.client.post(reverse('api:notification-read', args=[notification_id]))
        unread = self.client.get(reverse('api:notification-list'), {'is_read': 'false'})

        self.assertTrue(read.data['is_read'])
        self.assertEqual(len(unread.data), 1)

    def test_read_all_stats_and_delete(self):
        self.assertEqual(self.client.post(reverse('api:notification-read-all')).data, {'updated_count': 2})

        stats = self.client.get(reverse('api:notification-stats')).data
        self.assertEqual(stats['total_count'], 2)
        self.assertEqual(stats['unread_count'], 0)

        notification = Notification.objects.filter(recipient=self.user).first()
        response = self.client.delete(reverse('api:notification-detail', args=[notification.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(Notification.objects.filter(recipient=self.user).count(), 1)

    def test_cannot_touch_other_users_notifications(self):
        foreign = Notification.objects.get(title='Not yours')

        response = self.client.post(reverse('api:notification-read', args=[foreign.pk]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_all(self):
        response = self.client.delete(reverse('api:notification-delete-all'))

        self.assertEqual(response.data, {'deleted_count': 2})
        self.assertFalse(Notification.objects.filter(recipient=self.user).exists())
        self.assertTrue(Notification.objects.filter(title='Not yours').exists())

    def test_preferences_read_and_partial_update(self):
        defaults = self.client.get(reverse('api:notification-preferences'))

        self.assertEqual(defaults.status_code, status.HTTP_200_OK)
        self.assertTrue(defaults.data['in_app_enabled'])
        self.assertFalse(defaults.data['email_enabled'])

        response = self.client.patch(
            reverse('api:notification-preferences'),
            {'email_enabled': True, 'system_notifications': False},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['email_enabled'])
        self.assertFalse(response.data['system_notifications'])
        self.assertTrue(response.data['match_notifications'])

    def test_email_preference_applies_to_match_responses(self):
        self.client.patch(reverse('api:notification-preferences'), {'email_enabled': True}, format='json')
        blood_request = make_blood_request(self.user, blood_type='A+', status=BloodRequest.MATCHING)
        donor = make_donor('ram', 'O-', full_name='Ram Thapa')
        match = make_match(blood_request, donor)

        self.client.force_authenticate(donor.user)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(reverse('api:match-accept', args=[match.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        email_copy = Notification.objects.get(
            recipient=self.user, channel=Notification.EMAIL, title='Donation Match Accepted',
        )
        self.assertEqual(email_copy.delivery_status, Notification.SENT)
        self.assertEqual(mail.outbox[-1].to, [self.user.email])

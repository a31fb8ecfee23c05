# api/views.py
import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from accounts.permissions import IsDonor
from bloodrequests.models import BloodRequest
from bloodrequests.serializers import BloodRequestSerializer, MatchRequestSerializer
from donors.serializers import DonationHistorySerializer, DonorSerializer, DonorStatsSerializer
from donors.services import get_donor_stats
from matching import aggregation, lifecycle, selectors, services
from matching.serializers import (
    CancelMatchSerializer,
    CompleteMatchSerializer,
    CreateMatchesSerializer,
    DeclineMatchSerializer,
    DonationMatchSerializer,
    MatchQuerySerializer,
    MatchStatisticsSerializer,
    serialize_match_view,
)
from notifications.models import Notification
from notifications.serializers import (
    NotificationPreferenceSerializer,
    NotificationSerializer,
    NotificationStatsSerializer,
)
from notifications.services import (
    delete_all_notifications,
    delete_notification,
    filter_notifications,
    get_notification_preferences,
    get_notification_stats,
    mark_all_as_read,
    mark_as_read,
    update_notification_preferences,
)

logger = logging.getLogger(__name__)


# ============================================
# BLOOD REQUESTS
# ============================================
class BloodRequestViewSet(mixins.CreateModelMixin,
                          mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.UpdateModelMixin,
                          viewsets.GenericViewSet):
    """Requesters manage their own blood requests and run matching on them.
    Requests are closed through cancel, never deleted."""
    serializer_class = BloodRequestSerializer

    def get_queryset(self):
        queryset = BloodRequest.objects.filter(requester=self.request.user).order_by('-created_at')
        status_filter = self.request.query_params.get('status')
        if status_filter and status_filter != 'all':
            queryset = queryset.filter(status=status_filter)
        return queryset

    def perform_create(self, serializer):
        blood_request = serializer.save(requester=self.request.user)
        logger.info(f"Blood request {blood_request.id} created by {self.request.user.username}")

    @action(detail=True, methods=['post'])
    def match(self, request, pk=None):
        """Search compatible donors and create matches for them"""
        blood_request = self.get_object()
        params = MatchRequestSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        result = services.match_blood_request(blood_request, request.user, **params.validated_data)
        return Response({
            'matches': DonationMatchSerializer(result['matches'], many=True).data,
            'created_count': len(result['matches']),
            'total_count': result['total_count'],
            'request_status': blood_request.status,
        }, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get', 'post'])
    def matches(self, request, pk=None):
        """GET: matches for this request with donor details. POST: match chosen donors."""
        blood_request = self.get_object()

        if request.method == 'POST':
            serializer = CreateMatchesSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            created = services.create_matches(blood_request, serializer.validated_data['donor_ids'], request.user)
            return Response({
                'matches': DonationMatchSerializer(created, many=True).data,
                'created_count': len(created),
                'request_status': blood_request.status,
            }, status=status.HTTP_201_CREATED)

        records = selectors.matches_for_request(blood_request)
        return Response([serialize_match_view(record) for record in records])

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        blood_request = self.get_object()
        services.cancel_blood_request(blood_request, request.user)
        return Response(self.get_serializer(blood_request).data)


# ============================================
# MATCHES
# ============================================
class MatchViewSet(viewsets.ViewSet):
    """
    Matches the current user takes part in, as donor or as requester.

    Query params (list, statistics): status, city, state, start_date,
    end_date; list also takes sort and order.
    """
    lookup_value_regex = r'\d+'

    def _filtered_records(self, request, include_status=True):
        query = MatchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        records = aggregation.filter_matches(
            selectors.matches_for_user(request.user),
            status=params.get('status') if include_status else None,
            city=params.get('city'),
            state=params.get('state'),
            start=params.get('start_date'),
            end=params.get('end_date'),
        )
        return records, params

    def list(self, request):
        records, params = self._filtered_records(request)
        try:
            records = aggregation.sort_matches(records, params['sort'], params['order'])
        except ValueError as e:
            raise ValidationError({'sort': [str(e)]})
        return Response([serialize_match_view(record) for record in records])

    def retrieve(self, request, pk=None):
        match = services.get_match(pk)
        return Response(serialize_match_view(selectors.match_detail(match, request.user)))

    @action(detail=False, methods=['get'])
    def statistics(self, request):
        records, _ = self._filtered_records(request, include_status=False)
        stats = aggregation.compute_statistics(records)
        return Response(MatchStatisticsSerializer(stats).data)

    @action(detail=True, methods=['post'])
    def accept(self, request, pk=None):
        match = lifecycle.accept_match(services.get_match(pk), request.user)
        return Response(DonationMatchSerializer(match).data)

    @action(detail=True, methods=['post'])
    def decline(self, request, pk=None):
        serializer = DeclineMatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        match = lifecycle.decline_match(
            services.get_match(pk), request.user,
            notes=serializer.validated_data.get('notes'),
        )
        return Response(DonationMatchSerializer(match).data)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        serializer = CompleteMatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        match = lifecycle.complete_match(
            services.get_match(pk), request.user,
            notes=serializer.validated_data.get('notes'),
            donation_time=serializer.validated_data.get('donation_time'),
        )
        return Response(DonationMatchSerializer(match).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = CancelMatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        match = lifecycle.cancel_match(
            services.get_match(pk), request.user,
            reason=serializer.validated_data.get('reason'),
        )
        return Response(DonationMatchSerializer(match).data)


# ============================================
# DONORS
# ============================================
class DonorViewSet(viewsets.GenericViewSet):
    """The signed-in donor's own profile, history and stats"""
    serializer_class = DonorSerializer
    permission_classes = [IsDonor]

    def get_object(self):
        return self.request.user.donor_profile

    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        donor = self.get_object()
        if request.method == 'PATCH':
            serializer = self.get_serializer(donor, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return Response(serializer.data)
        return Response(self.get_serializer(donor).data)

    @action(detail=False, methods=['get'], url_path='me/history')
    def history(self, request):
        history = self.get_object().donation_history.select_related('donor').order_by('-date_donated')
        return Response(DonationHistorySerializer(history, many=True).data)

    @action(detail=False, methods=['get'], url_path='me/stats')
    def stats(self, request):
        return Response(DonorStatsSerializer(get_donor_stats(self.get_object())).data)


# ============================================
# NOTIFICATIONS
# ============================================
class NotificationViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    serializer_class = NotificationSerializer

    def get_queryset(self):
        queryset = Notification.objects.filter(recipient=self.request.user).order_by('-created_at')
        if self.action != 'list':
            return queryset

        params = self.request.query_params
        is_read = params.get('is_read')
        return filter_notifications(
            queryset,
            notification_type=params.get('type'),
            is_read=None if is_read is None else is_read.lower() in ('1', 'true', 'yes'),
            search=params.get('search'),
        )

    def perform_destroy(self, instance):
        delete_notification(instance)

    @action(detail=True, methods=['post'])
    def read(self, request, pk=None):
        notification = mark_as_read(self.get_object())
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=['post'], url_path='read-all')
    def read_all(self, request):
        updated = mark_all_as_read(request.user)
        return Response({'updated_count': updated})

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(NotificationStatsSerializer(get_notification_stats(request.user)).data)

    @action(detail=False, methods=['delete'], url_path='delete-all')
    def delete_all(self, request):
        deleted = delete_all_notifications(request.user)
        return Response({'deleted_count': deleted})

    @action(detail=False, methods=['get', 'patch'])
    def preferences(self, request):
        preferences = get_notification_preferences(request.user)
        if request.method == 'GET':
            return Response(NotificationPreferenceSerializer(preferences).data)

        serializer = NotificationPreferenceSerializer(preferences, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        preferences = update_notification_preferences(request.user, **serializer.validated_data)
        return Response(NotificationPreferenceSerializer(preferences).data)

# matching/serializers.py
from rest_framework import serializers

from .aggregation import SORT_KEYS, SORT_ORDERS
from .models import DonationMatch


class DonationMatchSerializer(serializers.ModelSerializer):
    """Raw match row, returned after creation and transitions"""
    donor_name = serializers.CharField(source='donor.full_name', read_only=True)
    response_minutes = serializers.FloatField(read_only=True)

    class Meta:
        model = DonationMatch
        fields = [
            'id',
            'request',
            'donor',
            'donor_name',
            'status',
            'created_at',
            'updated_at',
            'response_time',
            'response_minutes',
            'donation_time',
            'notes',
            'distance_km',
        ]
        read_only_fields = fields


# ---------------------------
# Match views (selectors output)
# ---------------------------
class MatchCoreSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    request_id = serializers.IntegerField()
    donor_id = serializers.IntegerField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    response_time = serializers.DateTimeField(allow_null=True)
    donation_time = serializers.DateTimeField(allow_null=True)
    notes = serializers.CharField(allow_null=True)
    distance_km = serializers.FloatField(allow_null=True)


class MatchWithRequestSerializer(MatchCoreSerializer):
    view = serializers.CharField()
    blood_type = serializers.CharField()
    units_needed = serializers.IntegerField()
    urgency_level = serializers.CharField()
    required_by_date = serializers.DateTimeField(allow_null=True)
    hospital_name = serializers.CharField()
    hospital_address = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
    location = serializers.CharField()
    requester_name = serializers.CharField()


class MatchWithDonorSerializer(MatchCoreSerializer):
    view = serializers.CharField()
    blood_type = serializers.CharField()
    donor_name = serializers.CharField()
    donor_phone = serializers.CharField()
    donor_email = serializers.EmailField()
    city = serializers.CharField()
    state = serializers.CharField()
    location = serializers.CharField()


VIEW_SERIALIZERS = {
    'request': MatchWithRequestSerializer,
    'donor': MatchWithDonorSerializer,
}


def serialize_match_view(record):
    """Pick the serializer for whichever view the selector produced."""
    return VIEW_SERIALIZERS[record.view](record).data


class MatchStatisticsSerializer(serializers.Serializer):
    total_matches = serializers.IntegerField()
    pending_matches = serializers.IntegerField()
    accepted_matches = serializers.IntegerField()
    declined_matches = serializers.IntegerField()
    completed_matches = serializers.IntegerField()
    cancelled_matches = serializers.IntegerField()
    average_response_time_minutes = serializers.FloatField()
    success_rate = serializers.FloatField()


# ---------------------------
# Inputs
# ---------------------------
class MatchQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DonationMatch.STATUS_CHOICES, required=False)
    city = serializers.CharField(required=False)
    state = serializers.CharField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    sort = serializers.ChoiceField(choices=list(SORT_KEYS), required=False, default='created_at')
    order = serializers.ChoiceField(choices=SORT_ORDERS, required=False, default='desc')

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError("start_date must be on or before end_date")
        return attrs


class CreateMatchesSerializer(serializers.Serializer):
    donor_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
    )


class DeclineMatchSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)


class CompleteMatchSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)
    donation_time = serializers.DateTimeField(required=False)


class CancelMatchSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)

# donors/serializers.py
from rest_framework import serializers

from .models import DonorProfile, DonationHistory


class DonorSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = DonorProfile
        fields = [
            'id', 'full_name', 'email', 'phone', 'blood_type',
            'address', 'city', 'state', 'latitude', 'longitude',
            'donation_count', 'last_donation_date', 'is_available', 'weight',
            'medical_conditions', 'created_at', 'updated_at', 'can_donate',
        ]
        read_only_fields = ['donation_count', 'last_donation_date', 'created_at', 'updated_at']


class DonationHistorySerializer(serializers.ModelSerializer):
    donor_name = serializers.CharField(source='donor.full_name', read_only=True)

    class Meta:
        model = DonationHistory
        fields = [
            'id', 'donor', 'donor_name', 'blood_request', 'date_donated',
            'blood_type', 'units_donated', 'location', 'notes', 'created_at',
        ]
        read_only_fields = fields


class DonorStatsSerializer(serializers.Serializer):
    total_donations = serializers.IntegerField()
    total_units = serializers.IntegerField()
    last_donation_date = serializers.DateField(allow_null=True)
    lives_impacted = serializers.IntegerField()
    can_donate = serializers.BooleanField()
    days_until_eligible = serializers.IntegerField()

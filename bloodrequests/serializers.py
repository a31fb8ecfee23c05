# bloodrequests/serializers.py
from rest_framework import serializers

from .models import BloodRequest


class BloodRequestSerializer(serializers.ModelSerializer):
    requester_name = serializers.CharField(source='requester.display_name', read_only=True)

    class Meta:
        model = BloodRequest
        fields = [
            'id',
            'requester',
            'requester_name',
            'patient_name',
            'blood_type',
            'units_needed',
            'urgency_level',
            'hospital_name',
            'hospital_address',
            'hospital_city',
            'hospital_state',
            'hospital_postal_code',
            'hospital_latitude',
            'hospital_longitude',
            'required_by_date',
            'status',
            'medical_notes',
            'contact_phone',
            'contact_email',
            'created_at',
            'updated_at',
        ]
        # status moves only through matching / completion / cancel
        read_only_fields = ['requester', 'status', 'created_at', 'updated_at']

    def validate(self, attrs):
        instance = self.instance
        if instance is None:
            return attrs
        if not instance.is_open:
            raise serializers.ValidationError(
                f"Blood request is {instance.status} and can no longer be edited"
            )
        blood_type = attrs.get('blood_type')
        if blood_type is not None and blood_type != instance.blood_type:
            raise serializers.ValidationError(
                {'blood_type': ['Blood type cannot be changed after the request is created']}
            )
        return attrs


class MatchRequestSerializer(serializers.Serializer):
    """Parameters forwarded to the donor search"""
    max_distance = serializers.FloatField(required=False, min_value=0)
    max_results = serializers.IntegerField(required=False, min_value=1, max_value=200)
    include_unavailable = serializers.BooleanField(required=False, default=False)

from rest_framework import serializers

from .models import Notification, NotificationPreference


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            'id', 'type', 'title', 'message', 'related_entity_id', 'related_entity_type',
            'is_read', 'read_at', 'delivery_status', 'channel', 'created_at',
        ]
        read_only_fields = fields


class NotificationStatsSerializer(serializers.Serializer):
    total_count = serializers.IntegerField()
    unread_count = serializers.IntegerField()
    request_count = serializers.IntegerField()
    match_count = serializers.IntegerField()
    system_count = serializers.IntegerField()


class NotificationPreferenceSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationPreference
        fields = [
            'in_app_enabled', 'email_enabled',
            'request_notifications', 'match_notifications', 'system_notifications',
            'updated_at',
        ]
        read_only_fields = ['updated_at']

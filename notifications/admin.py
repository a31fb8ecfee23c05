from django.contrib import admin

from .models import Notification, NotificationPreference


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display  = ['recipient', 'type', 'title', 'channel', 'delivery_status', 'is_read', 'created_at']
    list_filter   = ['type', 'channel', 'delivery_status', 'is_read']
    search_fields = ['recipient__username', 'title', 'message']
    ordering      = ['-created_at']
    readonly_fields = ['created_at', 'read_at']


@admin.register(NotificationPreference)
class NotificationPreferenceAdmin(admin.ModelAdmin):
    list_display  = ['user', 'in_app_enabled', 'email_enabled', 'updated_at']
    list_filter   = ['in_app_enabled', 'email_enabled']
    search_fields = ['user__username', 'user__email']

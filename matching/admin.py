from django.contrib import admin

from .models import DonationMatch


@admin.register(DonationMatch)
class DonationMatchAdmin(admin.ModelAdmin):
    list_display = ['id', 'donor', 'request', 'status', 'distance_km', 'created_at', 'response_minutes']
    list_filter = ['status', 'created_at']
    search_fields = ['donor__full_name', 'request__hospital_name', 'request__patient_name']
    list_select_related = ['donor', 'request']
    ordering = ['-created_at']

    # Status moves through the lifecycle functions only
    readonly_fields = ['status', 'created_at', 'updated_at', 'response_time', 'donation_time']

    fieldsets = (
        ('Match', {
            'fields': ('request', 'donor', 'status', 'distance_km')
        }),
        ('Timeline', {
            'fields': ('created_at', 'updated_at', 'response_time', 'donation_time')
        }),
        ('Notes', {
            'fields': ('notes',)
        }),
    )

    @admin.display(description='Response (min)')
    def response_minutes(self, obj):
        minutes = obj.response_minutes
        return round(minutes, 1) if minutes is not None else '-'

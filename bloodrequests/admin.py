# bloodrequests/admin.py
from django.contrib import admin
from django.utils.html import format_html

from matching.models import DonationMatch
from .models import BloodRequest


class DonationMatchInline(admin.TabularInline):
    model = DonationMatch
    extra = 0
    fields = ['donor', 'status', 'distance_km', 'created_at', 'response_time', 'donation_time']
    readonly_fields = fields
    can_delete = False


@admin.register(BloodRequest)
class BloodRequestAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'hospital_name',
        'patient_name',
        'blood_type',
        'urgency_level',
        'status',
        'match_count',
    ]
    list_filter = ['status', 'urgency_level', 'blood_type', 'hospital_state', 'created_at']
    search_fields = ['patient_name', 'hospital_name', 'hospital_city', 'requester__username']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [DonationMatchInline]

    fieldsets = (
        ('Request Information', {
            'fields': ('requester', 'patient_name', 'blood_type', 'units_needed',
                       'urgency_level', 'required_by_date', 'status', 'medical_notes')
        }),
        ('Hospital', {
            'fields': ('hospital_name', 'hospital_address', 'hospital_city', 'hospital_state',
                       'hospital_postal_code', 'hospital_latitude', 'hospital_longitude')
        }),
        ('Contact', {
            'fields': ('contact_phone', 'contact_email')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Matches')
    def match_count(self, obj):
        total = obj.matches.count()
        pending = obj.matches.filter(status=DonationMatch.PENDING).count()
        accepted = obj.matches.filter(status=DonationMatch.ACCEPTED).count()

        return format_html(
            '<span style="color: blue;">Total: {}</span> | '
            '<span style="color: orange;">Pending: {}</span> | '
            '<span style="color: green;">Accepted: {}</span>',
            total, pending, accepted
        )

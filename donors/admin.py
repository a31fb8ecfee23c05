from django.contrib import admin

from .models import DonorProfile, DonationHistory


@admin.register(DonorProfile)
class DonorProfileAdmin(admin.ModelAdmin):
    list_display   = ['full_name', 'blood_type', 'city', 'donation_count', 'is_available', 'can_donate_display']
    list_filter    = ['blood_type', 'is_available', 'state']
    search_fields  = ['full_name', 'user__username', 'phone', 'city']
    ordering       = ['-donation_count']
    readonly_fields = ['donation_count', 'last_donation_date', 'created_at', 'updated_at']

    fieldsets = (
        ('Personal Info', {
            'fields': ('user', 'full_name', 'phone', 'blood_type')
        }),
        ('Location', {
            'fields': ('address', 'city', 'state', 'latitude', 'longitude')
        }),
        ('Donation Stats', {
            'fields': ('donation_count', 'last_donation_date', 'is_available')
        }),
        ('Health', {
            'fields': ('weight', 'medical_conditions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(boolean=True, description='Can Donate Now')
    def can_donate_display(self, obj):
        return obj.can_donate


@admin.register(DonationHistory)
class DonationHistoryAdmin(admin.ModelAdmin):
    list_display  = ['donor', 'blood_type', 'location', 'date_donated', 'units_donated']
    list_filter   = ['date_donated', 'blood_type']
    search_fields = ['donor__full_name', 'location']
    ordering      = ['-date_donated']
    readonly_fields = ['created_at']

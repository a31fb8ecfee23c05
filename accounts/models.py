from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    DONOR = 'donor'
    REQUESTER = 'requester'
    SUPER_ADMIN = 'super_admin'

    USER_TYPE_CHOICES = (
        (DONOR, 'Donor'),
        (REQUESTER, 'Requester'),
        (SUPER_ADMIN, 'Super Admin'),
    )

    user_type = models.CharField(
        max_length=15,
        choices=USER_TYPE_CHOICES,
        default=DONOR
    )
    email = models.EmailField(unique=True)
    phone_number = models.CharField(max_length=20, blank=True)

    def __str__(self):
        return f"{self.username} ({self.user_type})"

    @property
    def display_name(self):
        return self.get_full_name() or self.username

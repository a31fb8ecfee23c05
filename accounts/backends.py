# accounts/backends.py
from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model
from django.db.models import Q

User = get_user_model()


class EmailBackend(ModelBackend):
    """
    Authenticate with either the username or the email address
    """
    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None or password is None:
            return None

        try:
            user = User.objects.get(Q(email__iexact=username) | Q(username=username))
        except User.DoesNotExist:
            # Run the hasher once so unknown accounts take as long as known ones
            User().set_password(password)
            return None
        except User.MultipleObjectsReturned:
            user = (
                User.objects.filter(username=username).first()
                or User.objects.filter(email__iexact=username).first()
            )

        if user and user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None

# accounts/backends.py
from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model
from django.db.models import Q

User = get_user_model()


class EmailOrUsernameBackend(ModelBackend):
    """
    Lets users sign in with either their email address or username.
    Locked accounts never authenticate.
    """
    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None or password is None:
            return None

        # Exact username wins over an email that happens to match
        user = (
            User.objects.filter(username=username).first()
            or User.objects.filter(Q(email__iexact=username)).first()
        )
        if user is None:
            # Run the default password hasher once to reduce timing attack
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None

    def user_can_authenticate(self, user):
        if getattr(user, 'is_locked', False):
            return False
        return super().user_can_authenticate(user)

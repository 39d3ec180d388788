# accounts/backends.py
from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class CaseInsensitiveModelBackend(ModelBackend):
    """
    Login do back office sem diferenciar maiúsculas/minúsculas no username
    (a constraint ``unique_username_ci`` garante a unicidade).
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        User = get_user_model()
        if username is None:
            username = kwargs.get(User.USERNAME_FIELD)
        if not username or password is None:
            return None

        try:
            user = User._default_manager.get(**{f"{User.USERNAME_FIELD}__iexact": username.strip()})
        except User.DoesNotExist:
            # mesmo custo de hash que um login válido (anti-timing)
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None

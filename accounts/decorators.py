from functools import wraps
from django.shortcuts import redirect
from django.contrib import messages
from rest_framework.exceptions import PermissionDenied, NotAuthenticated
from rest_framework.permissions import BasePermission


def is_api_request(request):
    return (
        request.path.startswith('/api/') or
        request.content_type == 'application/json' or
        'application/json' in request.META.get('HTTP_ACCEPT', '')
    )


def role_required(*required_roles):
    """
    Role-based decorator that works for both REST API and Django template views
    Automatically detects the type of view and responds appropriately

    Usage: @role_required('hospital_staff', 'hospital_admin')
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            user = request.user
            api_request = is_api_request(request)

            # Check authentication
            if not user or not user.is_authenticated:
                if api_request:
                    raise NotAuthenticated("Authentication required")
                messages.error(request, "Please log in to access this page.")
                return redirect('accounts:login_page')

            # Check role/user_type
            if user.user_type not in required_roles:
                if api_request:
                    raise PermissionDenied("Access denied")
                roles = ', '.join(r.replace('_', ' ') for r in required_roles)
                messages.error(request, f"Access denied. This page is for {roles} accounts only.")
                return redirect('home')

            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator


HOSPITAL_ROLES = ('hospital_staff', 'hospital_admin')


def hospital_required(view_func):
    """
    role_required for hospital staff/admins that also resolves the user's
    hospital onto ``request.hospital``
    """
    @role_required(*HOSPITAL_ROLES)
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        hospital = request.user.hospital
        if hospital is None:
            if is_api_request(request):
                raise PermissionDenied("No hospital is linked to this account")
            messages.error(request, "Could not find your hospital assignment.")
            return redirect('home')
        request.hospital = hospital
        return view_func(request, *args, **kwargs)
    return wrapper


class HasRole(BasePermission):
    """
    DRF permission checking request.user.user_type against the view's
    ``allowed_roles`` attribute
    """
    message = "Access denied"

    def has_permission(self, request, view):
        allowed = getattr(view, 'allowed_roles', None)
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return allowed is None or user.user_type in allowed


# REST API Token serializer
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['user_type'] = user.user_type
        token['username'] = user.username
        return token

import logging

from django.contrib import messages
from django.contrib.auth import authenticate, get_user_model, login as auth_login, logout as auth_logout
from django.db import transaction
from django.db.models import Q
from django.shortcuts import render, redirect
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from algorithms.choices import BloodType
from donors.models import DonorProfile
from hospitals.models import Hospital
from recipients.models import RecipientProfile

User = get_user_model()

logger = logging.getLogger(__name__)

SELF_REGISTER_ROLES = (User.DONOR, User.RECIPIENT, User.HOSPITAL_ADMIN)

PROFILE_REQUIRED_FIELDS = {
    User.DONOR: ['full_name', 'blood_type', 'date_of_birth'],
    User.RECIPIENT: ['full_name', 'blood_type', 'date_of_birth'],
    User.HOSPITAL_ADMIN: [
        'full_name', 'hospital_name', 'address', 'city', 'state',
        'postal_code', 'phone', 'license_number',
    ],
}


# -----------------------------
# HELPER: JWT TOKEN GENERATOR
# -----------------------------
def get_tokens_for_user(user):
    """
    Generate JWT tokens and embed role in payload
    """
    refresh = RefreshToken.for_user(user)
    refresh['user_type'] = user.user_type
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def attempt_login(request, identifier, password):
    """
    Authenticate by username or email, counting failures.
    The account locks after 5 failed attempts.

    Raises:
        AuthenticationFailed
    """
    user = User.objects.filter(Q(username=identifier) | Q(email__iexact=identifier)).first()
    if not user:
        raise AuthenticationFailed("Invalid credentials")

    if user.is_locked:
        raise AuthenticationFailed("Account locked due to multiple failed attempts")

    user_auth = authenticate(request, username=identifier, password=password)
    if user_auth is None:
        user.register_failed_login()
        logger.warning(f"Failed login for {user.username} ({user.failed_attempts} attempt(s))")
        raise AuthenticationFailed("Invalid credentials")

    user_auth.reset_failed_logins()
    return user_auth


# -----------------------------
# REGISTER API
# -----------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    Registers a donor, recipient or hospital administrator and returns JWT tokens
    """
    data = request.data
    user_type = data.get('user_type')
    username = data.get('username')
    password = data.get('password')
    email = data.get('email')

    # -----------------------------
    # BASIC USER VALIDATION
    # -----------------------------
    if user_type not in SELF_REGISTER_ROLES:
        return Response({"error": "Invalid user type"}, status=status.HTTP_400_BAD_REQUEST)

    if not all([username, password, email]):
        return Response({"error": "Username, email and password are required"}, status=status.HTTP_400_BAD_REQUEST)

    if User.objects.filter(username=username).exists():
        return Response({"error": "Username already exists"}, status=status.HTTP_400_BAD_REQUEST)

    if User.objects.filter(email__iexact=email).exists():
        return Response({"error": "Email already registered"}, status=status.HTTP_400_BAD_REQUEST)

    # -----------------------------
    # PROFILE VALIDATION (BEFORE USER CREATION)
    # -----------------------------
    for field in PROFILE_REQUIRED_FIELDS[user_type]:
        if not data.get(field):
            return Response(
                {"error": f"{field} is required for {user_type.replace('_', ' ')} registration"},
                status=status.HTTP_400_BAD_REQUEST
            )

    if 'blood_type' in PROFILE_REQUIRED_FIELDS[user_type] and data['blood_type'] not in BloodType.values:
        return Response({"error": "Invalid blood type"}, status=status.HTTP_400_BAD_REQUEST)

    if user_type == User.HOSPITAL_ADMIN and Hospital.objects.filter(license_number=data['license_number']).exists():
        return Response({"error": "A hospital with this license number is already registered"},
                        status=status.HTTP_400_BAD_REQUEST)

    # -----------------------------
    # CREATE USER + PROFILE
    # -----------------------------
    with transaction.atomic():
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            user_type=user_type,
            full_name=data.get('full_name', ''),
            phone=data.get('phone', ''),
        )

        if user_type == User.DONOR:
            DonorProfile.objects.create(
                user=user,
                blood_type=data['blood_type'],
                date_of_birth=data['date_of_birth'],
                weight_kg=data.get('weight_kg') or None,
                emergency_contact_name=data.get('emergency_contact_name', ''),
                emergency_contact_phone=data.get('emergency_contact_phone', ''),
            )
        elif user_type == User.RECIPIENT:
            RecipientProfile.objects.create(
                user=user,
                blood_type=data['blood_type'],
                date_of_birth=data['date_of_birth'],
                emergency_contact_name=data.get('emergency_contact_name', ''),
                emergency_contact_phone=data.get('emergency_contact_phone', ''),
            )
        else:  # hospital admin, hospital awaits verification
            Hospital.objects.create(
                admin_user=user,
                name=data['hospital_name'],
                address=data['address'],
                city=data['city'],
                state=data['state'],
                postal_code=data['postal_code'],
                phone=data['phone'],
                email=data.get('hospital_email') or email,
                website=data.get('website', ''),
                license_number=data['license_number'],
            )

    logger.info(f"Registered {user.username} as {user.user_type}")

    return Response(
        {
            "message": "Registration successful",
            "tokens": get_tokens_for_user(user),
            "user_type": user.user_type
        },
        status=status.HTTP_201_CREATED
    )


# -----------------------------
# LOGIN API
# -----------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    JWT login with account lock after 5 failed attempts
    """
    user = attempt_login(request, request.data.get('username'), request.data.get('password'))
    tokens = get_tokens_for_user(user)

    # Also log the user into Django's session framework (for template-based views)
    auth_login(request._request, user)

    return Response({
        "message": "Login successful",
        "tokens": tokens,
        "user_type": user.user_type
    })


# -----------------------------
# TEMPLATE LOGIN / LOGOUT
# -----------------------------
def login_page(request):
    """
    Login form for browser users
    """
    if request.method == 'POST':
        identifier = request.POST.get('username', '').strip()
        password = request.POST.get('password', '')
        try:
            user = attempt_login(request, identifier, password)
        except AuthenticationFailed as e:
            messages.error(request, str(e.detail))
            return render(request, 'accounts/login.html', {'username': identifier}, status=401)

        auth_login(request, user)
        messages.success(request, "Successfully signed in!")
        return redirect('dashboard_router')

    return render(request, 'accounts/login.html')


def logout_view(request):
    """
    Logs out the user from the session
    """
    auth_logout(request)
    messages.success(request, "Successfully signed out!")
    return redirect('home')

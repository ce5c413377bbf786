from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from . import views
from .decorators import CustomTokenObtainPairSerializer

app_name = 'accounts'

urlpatterns = [
    # ========================================
    # USER AUTHENTICATION
    # ========================================
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('login-page/', views.login_page, name='login_page'),
    path('logout/', views.logout_view, name='logout'),

    # ========================================
    # JWT TOKEN MANAGEMENT
    # ========================================
    path('token/', TokenObtainPairView.as_view(serializer_class=CustomTokenObtainPairSerializer), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]

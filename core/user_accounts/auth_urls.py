"""
URL Configuration for Authentication endpoints.

Login itself is handled by simplejwt: the client posts email/password to
token/ and sends the access token as "Authorization: Bearer <token>".
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

app_name = 'auth'

urlpatterns = [
    path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]

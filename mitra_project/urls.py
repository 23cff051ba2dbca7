"""
URL configuration for mitra_project.

    hr/     Employee records, mutation requests and bulk import
    auth/   JWT token endpoints
"""
from django.urls import path, include

urlpatterns = [
    path('hr/', include('HR.urls')),

    # Authentication endpoints (tokens)
    path('auth/', include('core.user_accounts.auth_urls')),
]

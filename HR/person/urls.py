"""
URL configuration for HR Person module.
"""
from django.urls import path

from . import views

app_name = 'person'

urlpatterns = [
    # Employee endpoints
    path('employees/', views.employee_list, name='employee_list'),
    path('employees/check-nik/', views.check_nik, name='check_nik'),
    path('employees/<int:pk>/', views.employee_detail, name='employee_detail'),
    path('employees/<int:pk>/status/', views.employee_status, name='employee_status'),
    path('employees/<int:pk>/clear-blacklist/', views.clear_blacklist, name='clear_blacklist'),
    path('employees/<int:pk>/history/', views.employee_history, name='employee_history'),

    # Bulk import endpoints
    path('employees/import/', views.import_confirm, name='import_confirm'),
    path('employees/import/preview/', views.import_preview, name='import_preview'),
    path('employees/import/template/', views.import_template, name='import_template'),

    # Mutation request endpoints
    path('mutations/', views.mutation_list, name='mutation_list'),
    path('mutations/<int:pk>/approve/', views.mutation_approve, name='mutation_approve'),
    path('mutations/<int:pk>/reject/', views.mutation_reject, name='mutation_reject'),
]

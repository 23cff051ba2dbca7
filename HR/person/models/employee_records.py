from django.conf import settings
from django.db import models
from core.base.models import AuditMixin
from .employee import Employee
from .person import Person


class Vaccination(AuditMixin, models.Model):
    """Vaccination record attached to an employment."""

    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name='vaccinations'
    )
    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name='vaccinations'
    )
    employee_number = models.CharField(max_length=50, db_index=True)

    vaccine_type = models.CharField(max_length=100, blank=True, default='')
    dose = models.CharField(max_length=50, blank=True, default='')
    vaccination_date = models.DateField(null=True, blank=True)
    note = models.TextField(blank=True, default='')
    file_url = models.CharField(max_length=500, blank=True, default='')

    class Meta:
        db_table = 'employee_vaccination'
        ordering = ['vaccination_date', 'id']

    def __str__(self):
        return f"{self.employee_number} {self.vaccine_type} {self.dose}".strip()


class EmployeeDocument(AuditMixin, models.Model):
    """
    Supporting document of an employment.

    file_url is an opaque reference to wherever the file is stored.
    """

    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name='documents'
    )
    name = models.CharField(max_length=255, blank=True, default='')
    document_type = models.CharField(max_length=100, blank=True, default='')
    file_url = models.CharField(max_length=500)

    class Meta:
        db_table = 'employee_document'
        ordering = ['id']

    def __str__(self):
        return self.name or self.file_url


class NikNotice(models.Model):
    """
    Notice stored when a NIK with a blacklist or violation history is hired,
    so HR can verify the hire afterwards.
    """

    employee_number = models.CharField(max_length=50, db_index=True)
    employee = models.ForeignKey(
        Employee,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='nik_notices'
    )
    detected_status = models.CharField(max_length=20)
    message = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    class Meta:
        db_table = 'employee_nik_notice'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.employee_number} {self.detected_status}"

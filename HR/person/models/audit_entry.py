from django.conf import settings
from django.db import models
from django.utils import timezone
from core.base.models import AppendOnlyMixin
from .choices import ChangeSource
from .employee import Employee
from .person import Person


class EmployeeAuditEntry(AppendOnlyMixin, models.Model):
    """One changed field of an employment or its person. Never updated or deleted."""

    employee = models.ForeignKey(
        Employee,
        on_delete=models.PROTECT,
        related_name='audit_entries'
    )
    person = models.ForeignKey(Person, on_delete=models.PROTECT, related_name='+')
    employee_number = models.CharField(max_length=50, db_index=True)

    field_name = models.CharField(max_length=100)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)

    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    actor_name = models.CharField(max_length=150, blank=True, default='')
    changed_at = models.DateTimeField(default=timezone.now, db_index=True)
    source = models.CharField(max_length=20, choices=ChangeSource.choices)

    class Meta:
        db_table = 'employee_audit_entry'
        ordering = ['-changed_at', '-id']
        verbose_name_plural = 'Employee audit entries'

    def __str__(self):
        return f"{self.employee_number}.{self.field_name}: {self.old_value!r} -> {self.new_value!r}"

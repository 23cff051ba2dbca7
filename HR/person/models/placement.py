from django.conf import settings
from django.db import models
from HR.work_structures.models import Company, Department, Section, Position
from .choices import MobilityClass, ChangeSource
from .employee import Employee


class Placement(models.Model):
    """
    Organizational placement history of an employment.

    A row is written when an employment is created (mobility class from the
    NIK's history) and whenever its department/section/position changes
    (class 'mutasi').
    """

    employee = models.ForeignKey(
        Employee,
        on_delete=models.PROTECT,
        related_name='placements'
    )
    employee_number = models.CharField(max_length=50, db_index=True)

    origin_company = models.ForeignKey(
        Company, on_delete=models.PROTECT, null=True, blank=True, related_name='+'
    )
    destination_company = models.ForeignKey(
        Company, on_delete=models.PROTECT, related_name='+'
    )
    department = models.ForeignKey(
        Department, on_delete=models.PROTECT, null=True, blank=True, related_name='+'
    )
    section = models.ForeignKey(
        Section, on_delete=models.PROTECT, null=True, blank=True, related_name='+'
    )
    position = models.ForeignKey(
        Position, on_delete=models.PROTECT, null=True, blank=True, related_name='+'
    )

    start_date = models.DateField()
    mobility_class = models.CharField(max_length=20, choices=MobilityClass.choices)
    source = models.CharField(max_length=20, choices=ChangeSource.choices)
    note = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    class Meta:
        db_table = 'employee_placement'
        ordering = ['-start_date', '-id']

    def __str__(self):
        return f"{self.employee_number} {self.mobility_class} -> {self.destination_company_id}"

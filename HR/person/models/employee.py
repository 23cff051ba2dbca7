from django.db import models
from core.base.models import AuditMixin
from HR.person.managers import EmployeeManager
from HR.work_structures.models import Company, Department, Section, Position
from .person import Person


class Employee(AuditMixin, models.Model):
    """
    One person's engagement with one company (an "employment").

    employee_number (NIK) is unique per company only: the same NIK recurs
    when the same individual works for several companies over time. Moving
    to another company never updates this row; it creates a new Employee
    at the destination.

    Employments are deactivated, never deleted. Status history lives in
    StatusEvent, placement history in Placement, field changes in
    EmployeeAuditEntry.
    """

    person = models.ForeignKey(
        Person,
        on_delete=models.PROTECT,
        related_name='employments'
    )
    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name='employees'
    )

    employee_number = models.CharField(
        max_length=50,
        db_index=True,
        help_text="NIK: unique within a company, may repeat across companies"
    )
    employee_code = models.CharField(
        max_length=20,
        blank=True,
        default='',
        db_index=True,
        help_text="Generated code (IC-XXXXXXX), shared by all employments of a NIK"
    )
    acr_number = models.CharField(max_length=50, blank=True, default='')

    # Organizational placement (all optional)
    department = models.ForeignKey(
        Department, on_delete=models.PROTECT, null=True, blank=True, related_name='employees'
    )
    section = models.ForeignKey(
        Section, on_delete=models.PROTECT, null=True, blank=True, related_name='employees'
    )
    position = models.ForeignKey(
        Position, on_delete=models.PROTECT, null=True, blank=True, related_name='employees'
    )

    # Dates
    hire_date = models.DateField(null=True, blank=True, help_text="Date of hire")
    join_date = models.DateField(null=True, blank=True, help_text="First day at this company")
    active_date = models.DateField(
        null=True,
        blank=True,
        help_text="Date the employment becomes effective; used for mobility rules"
    )

    # Work details
    office_email = models.EmailField(blank=True, default='')
    photo_url = models.CharField(max_length=500, blank=True, default='')
    grade = models.CharField(max_length=50, blank=True, default='')
    classification = models.CharField(max_length=100, blank=True, default='')
    work_roster = models.CharField(max_length=100, blank=True, default='')
    point_of_hire = models.CharField(max_length=100, blank=True, default='')
    work_location = models.CharField(max_length=100, blank=True, default='')
    agreement_number = models.CharField(max_length=100, blank=True, default='')

    # Lifecycle
    is_active = models.BooleanField(default=True)
    deactivation_date = models.DateField(null=True, blank=True)
    deactivation_reason = models.TextField(blank=True, default='')

    objects = EmployeeManager()

    class Meta:
        db_table = 'employee'
        constraints = [
            models.UniqueConstraint(
                fields=['company', 'employee_number'],
                name='uniq_employee_number_per_company'
            ),
        ]
        indexes = [
            models.Index(fields=['employee_number', 'created_at']),
            models.Index(fields=['company', 'is_active']),
        ]

    def __str__(self):
        return f"{self.employee_number} - {self.person.full_name} ({self.company.name})"


class EmployeeNumberLock(models.Model):
    """
    One row per NIK ever written. Taking it FOR UPDATE serializes every
    check-and-write on that NIK, including the first hire of a brand new
    NIK (when there are no Employee rows yet to lock).
    """
    employee_number = models.CharField(max_length=50, primary_key=True)

    class Meta:
        db_table = 'employee_number_lock'

    def __str__(self):
        return self.employee_number

    @classmethod
    def acquire(cls, employee_number):
        """Lock the NIK for the rest of the current transaction."""
        cls.objects.get_or_create(employee_number=employee_number)
        return cls.objects.select_for_update().get(employee_number=employee_number)

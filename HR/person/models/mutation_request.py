from django.conf import settings
from django.db import models
from django.db.models import Q
from HR.person.managers import MutationRequestManager
from HR.work_structures.models import Company
from .choices import RequestStatus
from .employee import Employee
from .person import Person


class MutationRequest(models.Model):
    """
    Request to move a NIK from its origin company to a destination company.

    pending -> approved | rejected, decided by an actor of the origin
    company (or a privileged one). An approved request is consumed by the
    first hire at the destination that relies on it.
    """

    employee = models.ForeignKey(
        Employee,
        on_delete=models.PROTECT,
        related_name='mutation_requests',
        help_text="Employment at the origin company"
    )
    person = models.ForeignKey(Person, on_delete=models.PROTECT, related_name='+')
    employee_number = models.CharField(max_length=50, db_index=True)

    origin_company = models.ForeignKey(Company, on_delete=models.PROTECT, related_name='+')
    destination_company = models.ForeignKey(Company, on_delete=models.PROTECT, related_name='+')

    status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING
    )
    note = models.TextField(blank=True, default='')

    requested_at = models.DateTimeField(auto_now_add=True)
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    decided_at = models.DateTimeField(null=True, blank=True)
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )

    consumed_at = models.DateTimeField(null=True, blank=True)
    consumed_by_employee = models.ForeignKey(
        Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )

    objects = MutationRequestManager()

    class Meta:
        db_table = 'employee_mutation_request'
        ordering = ['-requested_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['employee_number', 'origin_company', 'destination_company'],
                condition=Q(status=RequestStatus.PENDING),
                name='uniq_pending_mutation_per_route'
            ),
        ]

    def __str__(self):
        return (
            f"{self.employee_number}: {self.origin_company_id} -> "
            f"{self.destination_company_id} ({self.status})"
        )

    @property
    def is_pending(self):
        return self.status == RequestStatus.PENDING

from django.conf import settings
from django.db import models
from django.db.models import Q
from HR.person.managers import StatusEventManager
from .choices import StatusType
from .employee import Employee
from .person import Person


class StatusEvent(models.Model):
    """
    Status ledger entry of an employment.

    Append-only, with one exception: clearing a blacklist sets end_date on
    the open blacklist event. An event without end_date is "open".
    employee_number is copied from the employment so NIK-wide questions
    (is this NIK blacklisted anywhere? when was it last deactivated?) are a
    single indexed lookup.
    """

    employee = models.ForeignKey(
        Employee,
        on_delete=models.PROTECT,
        related_name='status_events'
    )
    person = models.ForeignKey(
        Person,
        on_delete=models.PROTECT,
        related_name='status_events'
    )
    employee_number = models.CharField(max_length=50, db_index=True)

    status_type = models.CharField(max_length=20, choices=StatusType.choices)
    category = models.CharField(max_length=100, blank=True, default='')
    reason = models.TextField(blank=True, default='')
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    document_url = models.CharField(max_length=500, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    objects = StatusEventManager()

    class Meta:
        db_table = 'employee_status_event'
        ordering = ['-start_date', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['employee'],
                condition=Q(status_type=StatusType.BLACKLIST, end_date__isnull=True),
                name='uniq_open_blacklist_per_employee'
            ),
        ]
        indexes = [
            models.Index(fields=['employee_number', 'status_type', 'start_date']),
        ]

    def __str__(self):
        return f"{self.employee_number} {self.status_type} {self.start_date:%Y-%m-%d}"

    @property
    def is_open(self):
        return self.end_date is None

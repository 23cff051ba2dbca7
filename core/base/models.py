from django.db import models
from django.conf import settings
from django.core.exceptions import PermissionDenied


class StatusChoices(models.TextChoices):
    """
    Standard status choices for reference data (companies, departments, ...).

    Employee lifecycle states are NOT modelled with this; they live in the
    status ledger of HR.person.
    """
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


class AuditMixin(models.Model):
    """
    Row-level creation / modification stamps.

    created_by and updated_by are filled by the service layer from the acting
    user (HR.person.actor.ActorContext.user_id). Field-level change history
    is kept separately in EmployeeAuditEntry.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_created',
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_updated',
    )

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Mixin for reference data that is retired instead of deleted.

    Fields:
        - status: StatusChoices (ACTIVE/INACTIVE)

    Methods:
        - deactivate(): Marks record as inactive (soft delete)
        - reactivate(): Marks record as active again
    """
    status = models.CharField(
        max_length=10,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE,
        help_text="Record status. Set to INACTIVE instead of deleting."
    )

    class Meta:
        abstract = True

    def deactivate(self):
        self.status = StatusChoices.INACTIVE
        self.save(update_fields=['status'])

    def reactivate(self):
        self.status = StatusChoices.ACTIVE
        self.save(update_fields=['status'])


class AppendOnlyMixin(models.Model):
    """
    Rows can be inserted but never changed or removed.

    Used for history tables (audit entries). Queryset-level bulk updates are
    not intercepted; callers must go through the model.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise PermissionDenied(f"{self.__class__.__name__} rows are append-only")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionDenied(f"{self.__class__.__name__} rows are append-only")

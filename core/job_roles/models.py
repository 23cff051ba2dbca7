"""
Job Role Models

A job role carries an access level. Employee data scope and
"top-of-company" authority for mutation decisions are derived from it
(see HR.person.actor.ActorContext).
"""
from django.db import models
from django.core.exceptions import ValidationError


class JobRole(models.Model):
    """
    Job role assigned to users.

    access_level: higher means broader authority. A user whose role holds the
    highest level defined in the system counts as top of their company.
    """
    name = models.CharField(max_length=100, unique=True, db_index=True)
    description = models.TextField(blank=True, null=True)
    access_level = models.PositiveSmallIntegerField(
        default=1,
        help_text="Authority level; the highest defined level is company top"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'job_roles'
        verbose_name = 'Job Role'
        verbose_name_plural = 'Job Roles'
        ordering = ['-access_level', 'name']

    def __str__(self):
        return f"{self.name} (level {self.access_level})"

    @classmethod
    def max_access_level(cls):
        """Highest access level defined across all roles (0 when none exist)."""
        result = cls.objects.aggregate(max_level=models.Max('access_level'))
        return result['max_level'] or 0

    def delete(self, *args, **kwargs):
        """
        Prevent deletion if job role is assigned to users.
        """
        if self.users.exists():
            raise ValidationError(
                f"Cannot delete job role '{self.name}' because it is assigned to "
                f"{self.users.count()} user(s)"
            )
        return super().delete(*args, **kwargs)

"""
Core Base Managers Module

Exports:
    QuerySets:
        - SoftDeleteQuerySet: active(), inactive()

    Managers:
        - SoftDeleteManager: For SoftDeleteMixin models

Usage:
    from core.base.models import SoftDeleteMixin
    from core.base.managers import SoftDeleteManager

    class Company(SoftDeleteMixin, models.Model):
        objects = SoftDeleteManager()

    Company.objects.active()
"""

from django.db import models
from core.base.models import StatusChoices


class SoftDeleteQuerySet(models.QuerySet):
    """QuerySet for SoftDeleteMixin models (models with status field)."""

    def active(self):
        """Return only active records (status=ACTIVE)."""
        return self.filter(status=StatusChoices.ACTIVE)

    def inactive(self):
        """Return only retired records (status=INACTIVE)."""
        return self.filter(status=StatusChoices.INACTIVE)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    pass

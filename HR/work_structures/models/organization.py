from django.db import models
from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteManager


class Company(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Legal-entity employer.

    Companies share one workforce pool: the same person can be employed by
    several companies over time, each engagement being its own Employee row.

    Fields:
    - name: Unique company name (import files reference companies by name)
    - code: Optional short code
    - parent: Holding company, if any
    """

    name = models.CharField(
        max_length=150,
        unique=True,
        db_index=True,
        help_text="Unique company name"
    )
    code = models.CharField(max_length=30, blank=True, default='')
    address = models.TextField(blank=True, default='')
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='subsidiaries',
        help_text="Holding company (null for top-level companies)"
    )

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'company'
        verbose_name = 'Company'
        verbose_name_plural = 'Companies'
        ordering = ['name']

    def __str__(self):
        return self.name


class Department(SoftDeleteMixin, AuditMixin, models.Model):
    """Department within one company."""

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name='departments'
    )
    name = models.CharField(max_length=150)

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'department'
        ordering = ['company_id', 'name']
        constraints = [
            models.UniqueConstraint(fields=['company', 'name'], name='uniq_department_name_per_company'),
        ]

    def __str__(self):
        return f"{self.name} ({self.company.name})"


class Section(SoftDeleteMixin, AuditMixin, models.Model):
    """Section within one department."""

    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        related_name='sections'
    )
    name = models.CharField(max_length=150)

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'section'
        ordering = ['department_id', 'name']
        constraints = [
            models.UniqueConstraint(fields=['department', 'name'], name='uniq_section_name_per_department'),
        ]

    def __str__(self):
        return self.name


class Position(SoftDeleteMixin, AuditMixin, models.Model):
    """Position (job title slot) within one section."""

    section = models.ForeignKey(
        Section,
        on_delete=models.PROTECT,
        related_name='positions'
    )
    name = models.CharField(max_length=150)

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'position'
        ordering = ['section_id', 'name']
        constraints = [
            models.UniqueConstraint(fields=['section', 'name'], name='uniq_position_name_per_section'),
        ]

    def __str__(self):
        return self.name

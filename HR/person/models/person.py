from django.db import models
from core.base.models import AuditMixin
from .choices import Citizenship


class Person(AuditMixin, models.Model):
    """
    One individual, independent of any employer.

    Identity numbers deduplicate people: no two Persons may share a non-null
    national ID or a non-null family card number. Blank input is stored as
    NULL so that the unique constraints only bite on real numbers.

    Attributes are the latest known truth and are updated in place when the
    same individual is (re)hired anywhere; history of changes lives in the
    audit trail.
    """

    # Identifiers
    national_id = models.CharField(
        max_length=50,
        unique=True,
        null=True,
        blank=True,
        help_text="National ID (16 digits for WNI) or passport number (WNA)"
    )
    family_card_number = models.CharField(
        max_length=50,
        unique=True,
        null=True,
        blank=True,
        help_text="Family card number"
    )
    citizenship = models.CharField(
        max_length=3,
        choices=Citizenship.choices,
        default=Citizenship.DOMESTIC
    )

    # Names
    full_name = models.CharField(max_length=200)
    alias = models.CharField(max_length=100, blank=True, default='')

    # Demographics
    gender = models.CharField(max_length=20, blank=True, default='')
    birth_place = models.CharField(max_length=100, blank=True, default='')
    date_of_birth = models.DateField(null=True, blank=True)
    religion = models.CharField(max_length=50, blank=True, default='')
    marital_status = models.CharField(max_length=50, blank=True, default='')

    # Contact
    personal_email = models.EmailField(blank=True, default='')
    phone_1 = models.CharField(max_length=30, blank=True, default='')
    phone_2 = models.CharField(max_length=30, blank=True, default='')
    mother_name = models.CharField(max_length=200, blank=True, default='')
    father_name = models.CharField(max_length=200, blank=True, default='')

    # Tax and social security
    tax_number = models.CharField(max_length=50, blank=True, default='')
    bpjs_employment_number = models.CharField(max_length=50, blank=True, default='')
    bpjs_health_number = models.CharField(max_length=50, blank=True, default='')
    bpjs_pension_number = models.CharField(max_length=50, blank=True, default='')

    # Address
    address = models.TextField(blank=True, default='')
    province = models.CharField(max_length=100, blank=True, default='')
    regency = models.CharField(max_length=100, blank=True, default='')
    district = models.CharField(max_length=100, blank=True, default='')
    village = models.CharField(max_length=100, blank=True, default='')
    postal_code = models.CharField(max_length=10, blank=True, default='')

    supporting_file_url = models.CharField(max_length=500, blank=True, default='')

    class Meta:
        db_table = 'person'
        indexes = [
            models.Index(fields=['full_name']),
        ]

    def __str__(self):
        return self.full_name

    def save(self, *args, **kwargs):
        self.national_id = (self.national_id or '').strip() or None
        self.family_card_number = (self.family_card_number or '').strip() or None
        super().save(*args, **kwargs)


class Education(AuditMixin, models.Model):
    """Education history entry of a person."""

    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name='educations'
    )
    level = models.CharField(max_length=50, blank=True, default='')
    school_name = models.CharField(max_length=200, blank=True, default='')
    faculty = models.CharField(max_length=200, blank=True, default='')
    major = models.CharField(max_length=200, blank=True, default='')
    supporting_file_url = models.CharField(max_length=500, blank=True, default='')

    class Meta:
        db_table = 'person_education'
        ordering = ['id']

    def __str__(self):
        return f"{self.level} {self.school_name}".strip()

    def same_as(self, level, school_name, faculty, major):
        """True when the entry describes the same education (used by imports)."""
        return (
            self.level == (level or '') and
            self.school_name == (school_name or '') and
            self.faculty == (faculty or '') and
            self.major == (major or '')
        )

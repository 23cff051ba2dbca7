"""
Identity Service - person de-duplication and identity conflicts.

A person is identified by national ID and family card number. An identity
number may belong to only one NIK: when another NIK (at any company) already
claims it, the write is rejected with field-level messages.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db.models import Q

from core.base.exceptions import ConflictError
from HR.person.models import Person, Employee, Citizenship

logger = logging.getLogger(__name__)


IDENTITY_FIELDS = ('national_id', 'family_card_number')

FIELD_LABELS = {
    'national_id': 'National ID',
    'family_card_number': 'Family card number',
}


@dataclass
class IdentityConflict:
    field: str
    employee_number: str
    company_name: str

    @property
    def label(self):
        return f"{self.employee_number} - {self.company_name}"


def clean_number(value):
    return (value or '').strip()


class IdentityService:
    """Service layer for identity resolution"""

    MAX_REPORTED_CONFLICTS = 3

    @staticmethod
    def validate_national_id(national_id, citizenship=None):
        """
        Validate the national ID against the citizenship.

        WNI: exactly 16 digits. WNA: a non-empty alphanumeric passport number.

        Returns:
            str: the trimmed national ID
        """
        citizenship = citizenship or getattr(settings, 'DEFAULT_CITIZENSHIP', Citizenship.DOMESTIC)
        if citizenship not in Citizenship.values:
            raise ValidationError({'citizenship': [f"Unknown citizenship '{citizenship}'."]})

        value = clean_number(national_id)
        if citizenship == Citizenship.DOMESTIC:
            if not value:
                raise ValidationError({'national_id': ["National ID is required for WNI."]})
            if len(value) != 16 or not value.isdigit():
                raise ValidationError({'national_id': ["National ID must be exactly 16 digits for WNI."]})
        else:
            if not value:
                raise ValidationError({'national_id': ["Passport number is required for WNA."]})
            if not value.isalnum():
                raise ValidationError({'national_id': ["Passport number must be alphanumeric."]})
        return value

    @staticmethod
    def find_person(national_id, family_card_number) -> Optional[Person]:
        """
        Return the Person matching either number, preferring one matching both.
        None when nothing matches (the caller creates a Person).
        """
        national_id = clean_number(national_id)
        family_card_number = clean_number(family_card_number)
        if not national_id and not family_card_number:
            return None

        query = Q()
        if national_id:
            query |= Q(national_id=national_id)
        if family_card_number:
            query |= Q(family_card_number=family_card_number)

        candidates = list(Person.objects.filter(query).order_by('pk'))
        if not candidates:
            return None

        for person in candidates:
            if national_id and family_card_number and \
                    person.national_id == national_id and person.family_card_number == family_card_number:
                return person
        for person in candidates:
            if national_id and person.national_id == national_id:
                return person
        return candidates[0]

    @staticmethod
    def detect_conflicts(national_id, family_card_number, employee_number,
                         ignore_person_id=None) -> List[IdentityConflict]:
        """
        Employments of other NIKs whose person claims one of the numbers.

        Rows with the same NIK (case-insensitive) and rows of the person being
        edited are not conflicts.
        """
        values = {
            'national_id': clean_number(national_id),
            'family_card_number': clean_number(family_card_number),
        }
        employee_number = clean_number(employee_number)

        conflicts = []
        for field_name in IDENTITY_FIELDS:
            value = values[field_name]
            if not value:
                continue
            queryset = Employee.objects.filter(**{f'person__{field_name}': value})
            if employee_number:
                queryset = queryset.exclude(employee_number__iexact=employee_number)
            if ignore_person_id:
                queryset = queryset.exclude(person_id=ignore_person_id)
            rows = queryset.order_by('employee_number', 'company__name').values_list(
                'employee_number', 'company__name'
            )
            conflicts.extend(IdentityConflict(field_name, nik, company) for nik, company in rows)
        return conflicts

    @staticmethod
    def conflict_errors(conflicts):
        """Field-level messages, at most MAX_REPORTED_CONFLICTS distinct pairs per field."""
        errors = {}
        for field_name in IDENTITY_FIELDS:
            labels = []
            for conflict in conflicts:
                if conflict.field == field_name and conflict.label not in labels:
                    labels.append(conflict.label)
            if labels:
                shown = ', '.join(labels[:IdentityService.MAX_REPORTED_CONFLICTS])
                errors[field_name] = [
                    f"{FIELD_LABELS[field_name]} is already used by another NIK: {shown}."
                ]
        return errors

    @staticmethod
    def ensure_no_conflicts(national_id, family_card_number, employee_number, ignore_person_id=None):
        """Raise ConflictError when another NIK claims one of the numbers."""
        conflicts = IdentityService.detect_conflicts(
            national_id, family_card_number, employee_number, ignore_person_id
        )
        if conflicts:
            logger.warning(
                f"Identity conflict for NIK {employee_number}: "
                f"{', '.join(c.label for c in conflicts[:IdentityService.MAX_REPORTED_CONFLICTS])}"
            )
            raise ConflictError(IdentityService.conflict_errors(conflicts))

    @staticmethod
    def ensure_numbers_available(national_id, family_card_number, person_id=None):
        """
        Raise ConflictError when a different Person row already holds one of
        the numbers (e.g. a person record with no employment).
        """
        errors = {}
        for field_name, value in zip(IDENTITY_FIELDS, (national_id, family_card_number)):
            value = clean_number(value)
            if not value:
                continue
            others = Person.objects.filter(**{field_name: value})
            if person_id:
                others = others.exclude(pk=person_id)
            if others.exists():
                errors[field_name] = [
                    f"{FIELD_LABELS[field_name]} is already used by another person record."
                ]
        if errors:
            raise ConflictError(errors)

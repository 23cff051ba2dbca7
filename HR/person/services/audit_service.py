"""
Audit Service - field-level change log for employments and persons.

Tracked fields are declared once in a registry (audit name -> model
attribute). Writers take a snapshot before and after a change and record
the difference; unchanged fields produce no entry.
"""
import logging
from datetime import date, datetime

from django.db import models
from django.utils import timezone

from HR.person.models import EmployeeAuditEntry

logger = logging.getLogger(__name__)


PERSON_TRACKED_FIELDS = {
    'national_id': 'national_id',
    'family_card_number': 'family_card_number',
    'citizenship': 'citizenship',
    'full_name': 'full_name',
    'alias': 'alias',
    'gender': 'gender',
    'birth_place': 'birth_place',
    'date_of_birth': 'date_of_birth',
    'religion': 'religion',
    'marital_status': 'marital_status',
    'personal_email': 'personal_email',
    'phone_1': 'phone_1',
    'phone_2': 'phone_2',
    'mother_name': 'mother_name',
    'father_name': 'father_name',
    'tax_number': 'tax_number',
    'bpjs_employment_number': 'bpjs_employment_number',
    'bpjs_health_number': 'bpjs_health_number',
    'bpjs_pension_number': 'bpjs_pension_number',
    'address': 'address',
    'province': 'province',
    'regency': 'regency',
    'district': 'district',
    'village': 'village',
    'postal_code': 'postal_code',
    'supporting_file_url': 'supporting_file_url',
}

EMPLOYEE_TRACKED_FIELDS = {
    'employee_number': 'employee_number',
    'employee_code': 'employee_code',
    'acr_number': 'acr_number',
    'company': 'company_id',
    'department': 'department_id',
    'section': 'section_id',
    'position': 'position_id',
    'hire_date': 'hire_date',
    'join_date': 'join_date',
    'active_date': 'active_date',
    'office_email': 'office_email',
    'photo_url': 'photo_url',
    'grade': 'grade',
    'classification': 'classification',
    'work_roster': 'work_roster',
    'point_of_hire': 'point_of_hire',
    'work_location': 'work_location',
    'agreement_number': 'agreement_number',
    'status_aktif': 'is_active',
    'deactivation_date': 'deactivation_date',
    'deactivation_reason': 'deactivation_reason',
}


class AuditService:
    """Service layer for the employee audit trail"""

    @staticmethod
    def normalize(value):
        """Render a value the way it is stored in the audit trail (str or None)."""
        if value is None:
            return None
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, models.Model):
            return str(value.pk)
        value = str(value).strip()
        return value or None

    @staticmethod
    def snapshot(instance, fields):
        """Current values of the tracked fields of a model instance."""
        if instance is None:
            return {}
        return {name: getattr(instance, attr) for name, attr in fields.items()}

    @staticmethod
    def diff(old_values, new_values, fields=None):
        """
        Compare two snapshots.

        Returns:
            list of (field_name, old, new) tuples with normalized values,
            one per changed field, in registry order.
        """
        names = fields if fields is not None else list(new_values.keys())
        changes = []
        for name in names:
            old = AuditService.normalize(old_values.get(name))
            new = AuditService.normalize(new_values.get(name))
            if old != new:
                changes.append((name, old, new))
        return changes

    @staticmethod
    def record(actor, employee, changes, source, changed_at=None):
        """
        Append one entry per change. Runs inside the caller's transaction.

        Args:
            actor: ActorContext
            employee: Employee the changes belong to
            changes: output of diff()
            source: ChangeSource value
        """
        if not changes:
            return []

        changed_at = changed_at or timezone.now()
        entries = [
            EmployeeAuditEntry(
                employee=employee,
                person_id=employee.person_id,
                employee_number=employee.employee_number,
                field_name=name,
                old_value=old,
                new_value=new,
                changed_by_id=actor.user_id,
                actor_name=actor.username,
                changed_at=changed_at,
                source=source,
            )
            for name, old, new in changes
        ]
        EmployeeAuditEntry.objects.bulk_create(entries)
        logger.debug(f"Audit: {len(entries)} change(s) on NIK {employee.employee_number} ({source})")
        return entries

    @staticmethod
    def record_snapshots(actor, employee, before_person, before_employee, source):
        """Diff the person and employment against earlier snapshots and record the changes."""
        changes = AuditService.diff(
            before_person,
            AuditService.snapshot(employee.person, PERSON_TRACKED_FIELDS),
            list(PERSON_TRACKED_FIELDS),
        )
        changes += AuditService.diff(
            before_employee,
            AuditService.snapshot(employee, EMPLOYEE_TRACKED_FIELDS),
            list(EMPLOYEE_TRACKED_FIELDS),
        )
        return AuditService.record(actor, employee, changes, source)

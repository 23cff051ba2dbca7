"""
Employee Import Service - bulk spreadsheet reconciliation.

classify() decides per row what would happen, without writing:

    Error     missing/invalid data, unknown organization, identity conflict,
              blacklisted NIK, failed mobility gate
    Update    the NIK already works at the row's company
    Transfer  the NIK works (or worked) at another company
    Insert    the NIK is new

All lookups are loaded once per batch into an ImportSnapshot, so the
classification of a batch costs a fixed number of queries.

apply() re-classifies and pushes each valid row through the same
EmployeeService.create / update path as the API, one transaction per row:
a failing row never rolls back another.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Set, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError, PermissionDenied, ObjectDoesNotExist
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from core.base.exceptions import ConflictError, error_text
from HR.person.dtos import EmployeeCreateDTO, EmployeeUpdateDTO, EducationDTO, PERSON_FIELDS
from HR.person.models import (
    Employee, StatusEvent, MutationRequest, MobilityClass, ChangeSource,
)
from HR.person.services.employee_service import EmployeeService
from HR.person.services.identity_service import IdentityService, IdentityConflict, IDENTITY_FIELDS
from HR.person.services.mobility_service import MobilityService
from HR.work_structures.services import OrganizationService, OrganizationLookup

logger = logging.getLogger(__name__)

BULK_DEACTIVATION_REASON = 'Deactivated by bulk import'


class RowAction:
    INSERT = 'insert'
    UPDATE = 'update'
    TRANSFER = 'transfer'
    ERROR = 'error'


@dataclass
class RowResult:
    row: int
    employee_number: str
    company: str
    action: str
    company_id: Optional[int] = None
    department_id: Optional[int] = None
    section_id: Optional[int] = None
    position_id: Optional[int] = None
    employee_id: Optional[int] = None
    mobility_class: Optional[str] = None
    errors: List[str] = field(default_factory=list)


@dataclass
class ImportResult:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)
    rows: List[RowResult] = field(default_factory=list)


@dataclass
class EmploymentRef:
    pk: int
    company_id: int
    person_id: int


@dataclass
class ImportSnapshot:
    """Everything classify() needs about the batch's NIKs and identity numbers."""
    lookup: OrganizationLookup
    employments: Dict[str, List[EmploymentRef]] = field(default_factory=dict)
    blacklisted: Set[str] = field(default_factory=set)
    latest_inactive: Dict[str, date] = field(default_factory=dict)
    approvals: Set[Tuple[str, int, int]] = field(default_factory=set)
    claims: Dict[Tuple[str, str], List[Tuple[str, str, int]]] = field(default_factory=dict)

    @classmethod
    def build(cls, rows):
        niks = {(row.get('employee_number') or '').strip() for row in rows} - {''}
        snapshot = cls(lookup=OrganizationService.build_lookup())

        employments = (
            Employee.objects.filter(employee_number__in=niks)
            .order_by('-created_at', '-pk')
            .values_list('pk', 'employee_number', 'company_id', 'person_id')
        )
        for pk, nik, company_id, person_id in employments:
            snapshot.employments.setdefault(nik, []).append(EmploymentRef(pk, company_id, person_id))

        snapshot.blacklisted = set(
            StatusEvent.objects.filter(employee_number__in=niks).blacklists().open()
            .values_list('employee_number', flat=True)
        )
        snapshot.latest_inactive = dict(
            StatusEvent.objects.filter(employee_number__in=niks).inactivations()
            .order_by().values('employee_number').annotate(latest=Max('start_date'))
            .values_list('employee_number', 'latest')
        )
        snapshot.approvals = set(
            MutationRequest.objects.approved().unconsumed().filter(employee_number__in=niks)
            .values_list('employee_number', 'origin_company_id', 'destination_company_id')
        )

        for field_name in IDENTITY_FIELDS:
            values = {(row.get(field_name) or '').strip() for row in rows} - {''}
            if not values:
                continue
            claims = Employee.objects.filter(**{f'person__{field_name}__in': values}).values_list(
                f'person__{field_name}', 'employee_number', 'company__name', 'person_id'
            ).order_by('employee_number', 'company__name')
            for value, nik, company_name, person_id in claims:
                snapshot.claims.setdefault((field_name, value), []).append((nik, company_name, person_id))
        return snapshot

    def employment_at(self, nik, company_id) -> Optional[EmploymentRef]:
        for ref in self.employments.get(nik, []):
            if ref.company_id == company_id:
                return ref
        return None

    def latest_elsewhere(self, nik, company_id) -> Optional[EmploymentRef]:
        for ref in self.employments.get(nik, []):
            if ref.company_id != company_id:
                return ref
        return None

    def conflicts(self, values, nik, ignore_person_id=None) -> List[IdentityConflict]:
        """Same rules as IdentityService.detect_conflicts, against the snapshot."""
        found = []
        for field_name in IDENTITY_FIELDS:
            value = (values.get(field_name) or '').strip()
            for claim_nik, company_name, person_id in self.claims.get((field_name, value), []):
                if claim_nik.lower() == nik.lower():
                    continue
                if ignore_person_id and person_id == ignore_person_id:
                    continue
                found.append(IdentityConflict(field_name, claim_nik, company_name))
        return found


def _flatten(errors):
    return [message for messages in errors.values() for message in messages]


class EmployeeImportService:
    """Service layer for bulk employee reconciliation"""

    @staticmethod
    def classify(rows, actor, snapshot: Optional[ImportSnapshot] = None) -> List[RowResult]:
        """
        Classify every row as insert / update / transfer / error. Read-only.

        Args:
            rows: row dicts as produced by import_io.read_rows
            actor: ActorContext
        """
        snapshot = snapshot or ImportSnapshot.build(rows)
        lookup = snapshot.lookup
        today = timezone.localdate()
        seen = {}
        results = []

        for position_in_batch, row in enumerate(rows, start=1):
            nik = (row.get('employee_number') or '').strip()
            company = lookup.resolve_company(row.get('company_id'), row.get('company'))
            result = RowResult(
                row=row.get('_row', position_in_batch),
                employee_number=nik,
                company=company.name if company else (row.get('company') or ''),
                company_id=company.pk if company else None,
                action=RowAction.ERROR,
                errors=list(row.get('_errors', [])),
            )
            results.append(result)
            errors = result.errors

            # 1. Required data and formats
            if not nik:
                errors.append("NIK is required.")
            if not (row.get('full_name') or '').strip():
                errors.append("Full name is required.")
            if company is None:
                errors.append(f"Company not found: {row.get('company') or row.get('company_id') or '(blank)'}")
            elif not actor.can_access_company(company.pk):
                errors.append(f"Company {company.name} is outside your scope.")
            try:
                IdentityService.validate_national_id(row.get('national_id'), row.get('citizenship') or None)
            except ValidationError as exc:
                errors.append(error_text(exc))

            if company is not None:
                EmployeeImportService._resolve_org(lookup, row, result)

            if nik and company is not None:
                key = (nik, company.pk)
                if key in seen:
                    errors.append(f"Duplicate row for NIK {nik} at {company.name} (row {seen[key]}).")
                else:
                    seen[key] = result.row

            if errors:
                continue

            # 2. Identity conflicts
            existing = snapshot.employment_at(nik, company.pk)
            conflicts = snapshot.conflicts(row, nik, existing.person_id if existing else None)
            if conflicts:
                errors.extend(_flatten(IdentityService.conflict_errors(conflicts)))
                continue

            if nik in snapshot.blacklisted and not actor.is_privileged:
                errors.append("NIK detected blacklist.")
                continue

            # 3. Update at the same company
            if existing is not None:
                result.action = RowAction.UPDATE
                result.employee_id = existing.pk
                continue

            # 4. Transfer from another company
            elsewhere = snapshot.latest_elsewhere(nik, company.pk)
            if elsewhere is not None:
                history = MobilityService.classify(elsewhere.company_id, snapshot.latest_inactive.get(nik))
                approved = (nik, elsewhere.company_id, company.pk) in snapshot.approvals
                try:
                    MobilityService.gate(actor, nik, history, row.get('active_date') or today, approved)
                except ConflictError as exc:
                    errors.append(error_text(exc))
                    continue
                result.action = RowAction.TRANSFER
                result.mobility_class = history.mobility_class
                continue

            # 5. New NIK
            result.action = RowAction.INSERT
            result.mobility_class = MobilityClass.REKRUT

        return results

    @staticmethod
    def _resolve_org(lookup, row, result):
        names = {name: (row.get(name) or '').strip() for name in ('department', 'section', 'position')}

        if names['department']:
            result.department_id = lookup.resolve_department(result.company_id, names['department'])
            if result.department_id is None:
                result.errors.append(f"Department not found in {result.company}: {names['department']}")
        if names['section']:
            result.section_id = lookup.resolve_section(result.department_id, names['section'])
            if result.section_id is None:
                result.errors.append(f"Section not found: {names['section']}")
        if names['position']:
            result.position_id = lookup.resolve_position(result.section_id, names['position'])
            if result.position_id is None:
                result.errors.append(f"Position not found: {names['position']}")

    @staticmethod
    def _educations(row):
        education = EducationDTO(
            level=row.get('education_level') or '',
            school_name=row.get('school_name') or '',
            faculty=row.get('faculty') or '',
            major=row.get('major') or '',
        )
        return [] if education.is_empty() else [education]

    @staticmethod
    def to_create_dto(row, result: RowResult) -> EmployeeCreateDTO:
        values = {name: row.get(name) for name in PERSON_FIELDS if row.get(name) not in (None, '')}
        employment = {
            name: row.get(name)
            for name in ('acr_number', 'hire_date', 'join_date', 'active_date', 'office_email',
                         'grade', 'classification', 'work_roster', 'point_of_hire',
                         'work_location', 'agreement_number')
            if row.get(name) not in (None, '')
        }
        values.pop('full_name', None)
        inactive = row.get('is_active') is False
        return EmployeeCreateDTO(
            employee_number=result.employee_number,
            full_name=row['full_name'].strip(),
            company_id=result.company_id,
            department_id=result.department_id,
            section_id=result.section_id,
            position_id=result.position_id,
            is_active=not inactive,
            deactivate=inactive,
            deactivation_reason=BULK_DEACTIVATION_REASON if inactive else '',
            educations=EmployeeImportService._educations(row),
            source=ChangeSource.IMPORT,
            **values,
            **employment,
        )

    @staticmethod
    def to_update_dto(row, result: RowResult) -> EmployeeUpdateDTO:
        """Blank cells leave the stored value unchanged."""
        dto = EmployeeUpdateDTO(employee_id=result.employee_id, source=ChangeSource.IMPORT)
        for name in PERSON_FIELDS + ('acr_number', 'hire_date', 'join_date', 'active_date', 'office_email',
                                     'grade', 'classification', 'work_roster', 'point_of_hire',
                                     'work_location', 'agreement_number'):
            value = row.get(name)
            if value not in (None, ''):
                setattr(dto, name, value)
        for name in ('department_id', 'section_id', 'position_id'):
            value = getattr(result, name)
            if value is not None:
                setattr(dto, name, value)
        if row.get('is_active') is not None:
            dto.is_active = row['is_active']
            if not row['is_active']:
                dto.deactivation_reason = BULK_DEACTIVATION_REASON
        dto.educations = EmployeeImportService._educations(row)
        return dto

    @staticmethod
    def apply(rows, actor) -> ImportResult:
        """
        Classify, then write every valid row in its own transaction.

        Returns:
            ImportResult: counters, the first BULK_IMPORT_MAX_ERRORS error
            lines and the per-row outcome
        """
        max_errors = getattr(settings, 'BULK_IMPORT_MAX_ERRORS', 5)
        results = EmployeeImportService.classify(rows, actor)
        outcome = ImportResult(rows=results)
        error_lines = []

        for row, result in zip(rows, results):
            if result.action == RowAction.ERROR:
                outcome.skipped += 1
                error_lines.append(f"Row {result.row}: {'; '.join(result.errors)}")
                continue

            try:
                with transaction.atomic():
                    if result.action == RowAction.UPDATE:
                        written = EmployeeService.update(actor, EmployeeImportService.to_update_dto(row, result))
                    else:
                        written = EmployeeService.create(actor, EmployeeImportService.to_create_dto(row, result))
            except (ValidationError, PermissionDenied, ObjectDoesNotExist) as exc:
                result.action = RowAction.ERROR
                result.errors.append(error_text(exc))
                outcome.skipped += 1
                error_lines.append(f"Row {result.row}: {'; '.join(result.errors)}")
                continue

            result.employee_id = written.employee.pk
            if written.mobility_class:
                result.mobility_class = written.mobility_class
            if result.action == RowAction.UPDATE:
                outcome.updated += 1
            else:
                outcome.inserted += 1

        outcome.errors = error_lines[:max_errors]
        logger.info(
            f"Employee import by {actor.username}: {outcome.inserted} inserted, "
            f"{outcome.updated} updated, {outcome.skipped} skipped"
        )
        return outcome

"""
Employee Service - Business Logic Layer

Handles the employment write paths shared by the API and the bulk importer:
- create(): hire a NIK at a company (new person, rehire, transfer)
- update(): edit an employment and its person
- check_nik(): what the system knows about a NIK before hiring it

Every check is re-evaluated inside the write transaction after taking the
NIK lock, in this order:
1. blacklist gate (non-owner)
2. status flag reasons
3. citizenship / national ID format
4. identity conflicts
5. NIK already registered in the company
6. mobility gates (cooling-off, mutation approval)
"""
import logging
import secrets
import string
from dataclasses import dataclass, field
from typing import List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from core.base.exceptions import ConflictError, AuthorizationError
from HR.person.dtos import (
    EmployeeCreateDTO, EmployeeUpdateDTO,
    PERSON_FIELDS, EMPLOYMENT_FIELDS, ORG_FIELDS,
)
from HR.person.models import (
    Person, Education, Employee, EmployeeNumberLock, Placement,
    StatusEvent, EmployeeAuditEntry, StatusType, MobilityClass,
    Vaccination, EmployeeDocument, NikNotice,
)
from HR.person.services.audit_service import (
    AuditService, PERSON_TRACKED_FIELDS, EMPLOYEE_TRACKED_FIELDS,
)
from HR.person.services.identity_service import IdentityService, clean_number
from HR.person.services.mobility_service import MobilityService
from HR.person.services.mutation_service import MutationService
from HR.person.services.status_service import StatusService
from HR.work_structures.services import OrganizationService

logger = logging.getLogger(__name__)


CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 7
CODE_ATTEMPTS = 20


@dataclass
class EmployeeWriteResult:
    employee: Employee
    mobility_class: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class NikLookupResult:
    employee_number: str
    exists: bool = False
    in_company: bool = False
    blacklisted: bool = False
    mobility_class: Optional[str] = None
    origin_company_id: Optional[int] = None
    companies: List[str] = field(default_factory=list)
    employee: Optional[Employee] = None
    warnings: List[str] = field(default_factory=list)


class EmployeeService:
    """Service layer for employment lifecycle management"""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def generate_employee_code(employee_number):
        """
        Employee code shared by every employment of a NIK.

        Reuses the NIK's existing code, otherwise draws PREFIX + 7 random
        uppercase alphanumerics until unused.
        """
        existing = (
            Employee.objects.for_nik(employee_number)
            .exclude(employee_code='')
            .values_list('employee_code', flat=True)
            .first()
        )
        if existing:
            return existing

        prefix = getattr(settings, 'EMPLOYEE_CODE_PREFIX', 'IC-')
        for _ in range(CODE_ATTEMPTS):
            code = prefix + ''.join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
            if not Employee.objects.filter(employee_code=code).exists():
                return code
        return prefix + timezone.now().strftime('%y%m%d%H')

    @staticmethod
    def build_warnings(employee_number, company_id):
        """Non-blocking notices shown after a hire."""
        warnings = []
        flag = StatusService.latest_flag(employee_number)
        if flag is not None:
            detail = flag.category or flag.reason
            warnings.append(f"NIK detected {flag.status_type}: {detail}" if detail else f"NIK detected {flag.status_type}")

        companies = list(
            Employee.objects.for_nik(employee_number)
            .at_other_companies(company_id)
            .order_by('company__name')
            .values_list('company__name', flat=True)
            .distinct()
        )
        if companies:
            warnings.append(f"NIK previously worked at: {', '.join(companies)}")
        return warnings

    @staticmethod
    def _add_educations(person, educations):
        """Append education entries the person does not have yet."""
        existing = list(person.educations.all())
        for item in educations or []:
            if item.is_empty():
                continue
            if any(e.same_as(item.level, item.school_name, item.faculty, item.major) for e in existing):
                continue
            existing.append(Education.objects.create(
                person=person,
                level=item.level or '',
                school_name=item.school_name or '',
                faculty=item.faculty or '',
                major=item.major or '',
                supporting_file_url=item.supporting_file_url or '',
            ))

    @staticmethod
    def _add_records(actor, employee, vaccinations, documents):
        """Append vaccination and document records to an employment."""
        for item in vaccinations or []:
            if item.is_empty():
                continue
            Vaccination.objects.create(
                employee=employee,
                person_id=employee.person_id,
                employee_number=employee.employee_number,
                vaccine_type=item.vaccine_type or '',
                dose=item.dose or '',
                vaccination_date=item.vaccination_date,
                note=item.note or '',
                file_url=item.file_url or '',
                created_by_id=actor.user_id,
                updated_by_id=actor.user_id,
            )
        for item in documents or []:
            if not (item.file_url or '').strip():
                raise ValidationError({'documents': ["A document needs a file."]})
            EmployeeDocument.objects.create(
                employee=employee,
                name=item.name or '',
                document_type=item.document_type or '',
                file_url=item.file_url.strip(),
                created_by_id=actor.user_id,
                updated_by_id=actor.user_id,
            )

    @staticmethod
    def _require_reasons(dto: EmployeeCreateDTO, deactivate):
        errors = {}
        if deactivate and not (dto.deactivation_reason or '').strip():
            errors['deactivation_reason'] = ["A reason is required for an inactive employee."]
        if dto.blacklist and not (dto.blacklist_reason or '').strip():
            errors['blacklist_reason'] = ["A reason is required for a blacklisted employee."]
        if errors:
            raise ValidationError(errors)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def create(actor, dto: EmployeeCreateDTO) -> EmployeeWriteResult:
        """
        Hire a NIK at a company.

        Args:
            actor: ActorContext
            dto: EmployeeCreateDTO

        Returns:
            EmployeeWriteResult: the new employment, its mobility class and
            warnings about the NIK's past

        Raises:
            ValidationError: invalid input or hierarchy
            ConflictError: blacklist, identity, duplicate or mobility gate
            AuthorizationError: company outside the actor's scope
        """
        employee_number = clean_number(dto.employee_number)
        errors = {}
        if not employee_number:
            errors['employee_number'] = ["NIK is required."]
        if not (dto.full_name or '').strip():
            errors['full_name'] = ["Full name is required."]
        if errors:
            raise ValidationError(errors)

        OrganizationService.validate_hierarchy(
            dto.company_id, dto.department_id, dto.section_id, dto.position_id
        )
        if not actor.can_access_company(dto.company_id):
            raise AuthorizationError("You cannot add employees to this company.")

        EmployeeNumberLock.acquire(employee_number)

        if not actor.is_privileged and StatusService.is_nik_blacklisted(employee_number):
            logger.warning(f"Hire of blacklisted NIK {employee_number} rejected for {actor.username}")
            raise ConflictError({'employee_number': ["NIK detected blacklist."]})

        # An inactive hire is a deactivation and goes through the status ledger
        deactivate = dto.deactivate or not dto.is_active
        EmployeeService._require_reasons(dto, deactivate)

        national_id = IdentityService.validate_national_id(dto.national_id, dto.citizenship)
        family_card_number = clean_number(dto.family_card_number)
        IdentityService.ensure_no_conflicts(national_id, family_card_number, employee_number)

        if Employee.objects.for_nik(employee_number).filter(company_id=dto.company_id).exists():
            raise ConflictError({'employee_number': [f"NIK {employee_number} is already registered in this company."]})

        active_date = dto.active_date or timezone.localdate()
        history, approval = MobilityService.check_eligibility(
            actor, employee_number, dto.company_id, active_date
        )
        warnings = EmployeeService.build_warnings(employee_number, dto.company_id)
        flag = StatusService.latest_flag(employee_number)

        # Person: reuse the matching identity, latest values win
        person = IdentityService.find_person(national_id, family_card_number)
        IdentityService.ensure_numbers_available(
            national_id, family_card_number, person.pk if person else None
        )
        before_person = AuditService.snapshot(person, PERSON_TRACKED_FIELDS)
        is_new_person = person is None
        if is_new_person:
            person = Person(created_by_id=actor.user_id)
        for name in PERSON_FIELDS:
            value = getattr(dto, name)
            if value in (None, '') and not is_new_person:
                continue
            if value is not None:
                setattr(person, name, value)
        person.national_id = national_id
        if family_card_number:
            person.family_card_number = family_card_number
        person.citizenship = dto.citizenship or person.citizenship or getattr(settings, 'DEFAULT_CITIZENSHIP', 'WNI')
        person.full_name = dto.full_name.strip()
        person.updated_by_id = actor.user_id
        person.save()

        employee = Employee(
            person=person,
            company_id=dto.company_id,
            employee_number=employee_number,
            employee_code=EmployeeService.generate_employee_code(employee_number),
            is_active=not deactivate and not dto.blacklist,
            created_by_id=actor.user_id,
            updated_by_id=actor.user_id,
        )
        for name in EMPLOYMENT_FIELDS:
            value = getattr(dto, name)
            if value is not None:
                setattr(employee, name, value)
        employee.active_date = active_date
        if deactivate:
            employee.deactivation_date = dto.deactivation_date or active_date
            employee.deactivation_reason = dto.deactivation_reason.strip()
        employee.save()

        EmployeeService._add_educations(person, dto.educations)
        EmployeeService._add_records(actor, employee, dto.vaccinations, dto.documents)

        Placement.objects.create(
            employee=employee,
            employee_number=employee_number,
            origin_company_id=history.origin_company_id,
            destination_company_id=dto.company_id,
            department_id=dto.department_id,
            section_id=dto.section_id,
            position_id=dto.position_id,
            start_date=active_date,
            mobility_class=history.mobility_class,
            source=dto.source,
            created_by_id=actor.user_id,
        )
        if approval is not None:
            MutationService.consume(approval, employee)

        # Flagged NIK history is kept for HR follow-up
        if flag is not None:
            NikNotice.objects.create(
                employee_number=employee_number,
                employee=employee,
                detected_status=flag.status_type,
                message=f"NIK detected {flag.status_type}. {flag.reason}".strip(),
                created_by_id=actor.user_id,
            )

        # Initial status flags
        if deactivate:
            StatusService.write_event(
                actor, employee, StatusType.INACTIVE,
                reason=dto.deactivation_reason, category=dto.deactivation_category,
                start_date=employee.deactivation_date,
            )
        if dto.blacklist:
            StatusService.write_blacklist(actor, employee, dto.blacklist_reason, start_date=active_date)
        for violation in dto.violations:
            if violation.is_empty():
                continue
            StatusService.write_event(
                actor, employee, StatusType.VIOLATION,
                reason=violation.reason, category=violation.category,
                start_date=violation.start_date, document_url=violation.document_url,
            )

        AuditService.record_snapshots(actor, employee, before_person, {}, dto.source)

        logger.info(
            f"Hired NIK {employee_number} at company {dto.company_id} "
            f"({history.mobility_class}) by {actor.username}"
        )
        return EmployeeWriteResult(employee, history.mobility_class, warnings)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def update(actor, dto: EmployeeUpdateDTO) -> EmployeeWriteResult:
        """
        Edit an employment and its person.

        The company and NIK of an employment never change: hiring the NIK at
        another company, or a new NIK, creates a new employment. Department/section/position changes
        write a 'mutasi' placement.
        """
        employee = StatusService.lock_employee(actor, dto.employee_id)
        person = employee.person

        if dto.company_id and dto.company_id != employee.company_id:
            raise ValidationError({'company_id': [
                "Company cannot be changed; hire the employee at the new company instead."
            ]})

        if not actor.is_privileged and StatusService.is_nik_blacklisted(employee.employee_number):
            logger.warning(f"Edit of blacklisted NIK {employee.employee_number} rejected for {actor.username}")
            raise ConflictError({'employee_number': ["NIK detected blacklist."]})

        employee_number = employee.employee_number
        if dto.employee_number is not None and clean_number(dto.employee_number) != employee_number:
            raise ValidationError({'employee_number': [
                "NIK cannot be changed; hire the new NIK as a separate employment instead."
            ]})

        cleared = set(dto.clear_fields or ())

        def resolve(obj, name):
            if name in cleared:
                return None
            value = getattr(dto, name)
            return getattr(obj, name) if value is None else value

        citizenship = resolve(person, 'citizenship')
        national_id = resolve(person, 'national_id')
        if dto.national_id is not None or dto.citizenship is not None or 'national_id' in cleared:
            national_id = IdentityService.validate_national_id(national_id, citizenship)
        family_card_number = clean_number(resolve(person, 'family_card_number'))

        IdentityService.ensure_no_conflicts(
            national_id, family_card_number, employee_number, ignore_person_id=person.pk
        )
        IdentityService.ensure_numbers_available(national_id, family_card_number, person.pk)

        org = {name: resolve(employee, name) for name in ORG_FIELDS}
        OrganizationService.validate_hierarchy(employee.company_id, **org)

        before_person = AuditService.snapshot(person, PERSON_TRACKED_FIELDS)
        before_employee = AuditService.snapshot(employee, EMPLOYEE_TRACKED_FIELDS)
        org_changed = any(org[name] != getattr(employee, name) for name in ORG_FIELDS)

        # Person
        for name in PERSON_FIELDS:
            value = resolve(person, name)
            if value is None and name not in ('national_id', 'family_card_number', 'date_of_birth'):
                value = ''
            setattr(person, name, value)
        person.national_id = national_id
        person.family_card_number = family_card_number
        if not (person.full_name or '').strip():
            raise ValidationError({'full_name': ["Full name is required."]})
        person.updated_by_id = actor.user_id
        person.save()

        # Employment
        for name in EMPLOYMENT_FIELDS:
            value = resolve(employee, name)
            if value is None and name not in ORG_FIELDS and not name.endswith('_date'):
                value = ''
            setattr(employee, name, value)

        if dto.is_active is not None and dto.is_active != employee.is_active:
            if dto.is_active:
                # Reactivation; blacklisted NIKs were rejected above for non-owners
                employee.is_active = True
                employee.deactivation_date = None
                employee.deactivation_reason = ''
            else:
                reason = (dto.deactivation_reason or '').strip()
                if not reason:
                    raise ValidationError({'deactivation_reason': ["A reason is required to deactivate an employee."]})
                effective_date = dto.deactivation_date or timezone.localdate()
                StatusService.write_event(
                    actor, employee, StatusType.INACTIVE, reason=reason, start_date=effective_date
                )
                StatusService.mark_inactive(employee, effective_date, reason)

        employee.updated_by_id = actor.user_id
        employee.save()

        if dto.educations is not None:
            EmployeeService._add_educations(person, dto.educations)
        EmployeeService._add_records(actor, employee, dto.vaccinations, dto.documents)

        if org_changed:
            Placement.objects.create(
                employee=employee,
                employee_number=employee.employee_number,
                origin_company_id=employee.company_id,
                destination_company_id=employee.company_id,
                department_id=employee.department_id,
                section_id=employee.section_id,
                position_id=employee.position_id,
                start_date=timezone.localdate(),
                mobility_class=MobilityClass.MUTASI,
                source=dto.source,
                created_by_id=actor.user_id,
            )

        AuditService.record_snapshots(actor, employee, before_person, before_employee, dto.source)

        logger.info(f"Updated NIK {employee.employee_number} at company {employee.company_id} by {actor.username}")
        return EmployeeWriteResult(employee, MobilityClass.MUTASI if org_changed else None, [])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def list_employees(actor, filters=None):
        """
        Employments inside the actor's data scope.

        Filters: search (NIK, code, name), company_id, department_id,
        employee_number, is_active ('true'/'false')
        """
        filters = filters or {}
        queryset = Employee.objects.scoped(actor).select_related(
            'person', 'company', 'department', 'section', 'position'
        )

        search = filters.get('search')
        if search:
            queryset = queryset.filter(
                Q(employee_number__icontains=search) |
                Q(employee_code__icontains=search) |
                Q(person__full_name__icontains=search)
            )
        for name in ('company_id', 'department_id', 'employee_number'):
            if filters.get(name):
                queryset = queryset.filter(**{name: filters[name]})
        is_active = filters.get('is_active')
        if is_active in ('true', 'false'):
            queryset = queryset.filter(is_active=is_active == 'true')

        return queryset.order_by('employee_number', 'company__name')

    @staticmethod
    def get_history(actor, employee_id):
        """Status events, placements and audit entries of one employment."""
        employee = Employee.objects.get_for_actor(actor, employee_id)
        return {
            'employee': employee,
            'status_events': StatusEvent.objects.filter(employee=employee),
            'placements': Placement.objects.filter(employee=employee).select_related(
                'origin_company', 'destination_company'
            ),
            'audit_entries': EmployeeAuditEntry.objects.filter(employee=employee),
        }

    @staticmethod
    def check_nik(actor, employee_number, company_id=None) -> NikLookupResult:
        """
        What a hire of employee_number at company_id would run into.

        Returns the employment to prefill from (the one at company_id when it
        exists, otherwise the most recent one), blacklist state, the mobility
        class and the companies the NIK worked for.
        """
        employee_number = clean_number(employee_number)
        if not employee_number:
            raise ValidationError({'nik': ["NIK is required."]})
        company_id = company_id or actor.company_id

        employments = Employee.objects.for_nik(employee_number).select_related('person', 'company')
        result = NikLookupResult(employee_number=employee_number)
        latest = employments.latest_first().first()
        if latest is None:
            result.mobility_class = MobilityClass.REKRUT
            return result

        result.exists = True
        result.blacklisted = StatusService.is_nik_blacklisted(employee_number)
        result.companies = sorted({e.company.name for e in employments})

        own = employments.filter(company_id=company_id).first() if company_id else None
        result.in_company = own is not None
        result.employee = own or latest

        if company_id:
            history = MobilityService.resolve_history(employee_number, company_id)
            result.mobility_class = history.mobility_class
            result.origin_company_id = history.origin_company_id
            result.warnings = EmployeeService.build_warnings(employee_number, company_id)
        return result


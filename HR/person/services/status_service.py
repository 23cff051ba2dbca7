"""
Status Service - employee status state machine.

States of an employment: active, inactive, blacklisted, cited (cited is
orthogonal to the others). Every transition writes a StatusEvent and an
audit entry in the same transaction:

    active            -> inactive     deactivate()       'nonaktif' event
    active / inactive -> blacklisted  blacklist()        open 'blacklist' event
    blacklisted       -> cleared      clear_blacklist()  owner only, closes the event
    any               -> cited        cite()             'pelanggaran' event

A NIK is blacklisted while any of its employments has an open blacklist
event. Non-privileged actors may not create, edit or reactivate an
employment of a blacklisted NIK.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.utils import timezone

from core.base.exceptions import ConflictError, AuthorizationError, NotFoundError
from HR.person.dtos import StatusChangeDTO
from HR.person.models import Employee, EmployeeNumberLock, StatusEvent, StatusType, ChangeSource
from HR.person.services.audit_service import AuditService, EMPLOYEE_TRACKED_FIELDS

logger = logging.getLogger(__name__)


class StatusService:
    """Service layer for employee status transitions"""

    ACTIONS = ('deactivate', 'blacklist', 'cite')

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def is_nik_blacklisted(employee_number) -> bool:
        return StatusEvent.objects.for_nik(employee_number).blacklists().open().exists()

    @staticmethod
    def latest_flag(employee_number):
        """Most recent blacklist or violation event of a NIK (used for warnings)."""
        return (
            StatusEvent.objects.for_nik(employee_number)
            .filter(status_type__in=[StatusType.BLACKLIST, StatusType.VIOLATION])
            .order_by('-start_date', '-id')
            .first()
        )

    @staticmethod
    def lock_employee(actor, employee_id):
        """Lock the NIK, then the employment row (same order as EmployeeService)."""
        employee = Employee.objects.get_for_actor(actor, employee_id)
        EmployeeNumberLock.acquire(employee.employee_number)
        return Employee.objects.select_for_update().get_for_actor(actor, employee_id)

    # ------------------------------------------------------------------
    # Event writers, called inside an open transaction
    # ------------------------------------------------------------------

    @staticmethod
    def write_event(actor, employee, status_type, reason='', category='', start_date=None, document_url=''):
        event = StatusEvent.objects.create(
            employee=employee,
            person_id=employee.person_id,
            employee_number=employee.employee_number,
            status_type=status_type,
            category=category or '',
            reason=reason or '',
            start_date=start_date or timezone.localdate(),
            document_url=document_url or '',
            created_by_id=actor.user_id,
        )
        logger.info(
            f"Status event {status_type} for NIK {employee.employee_number} "
            f"at company {employee.company_id} by {actor.username}"
        )
        return event

    @staticmethod
    def mark_inactive(employee, effective_date, reason):
        """Set the employment inactive (does not save)."""
        if employee.is_active:
            employee.is_active = False
            employee.deactivation_date = effective_date or timezone.localdate()
            employee.deactivation_reason = reason or ''

    @staticmethod
    def write_blacklist(actor, employee, reason, category='', start_date=None, document_url=''):
        """
        Open a blacklist event on the employment and force it inactive.

        Non-privileged actors may not blacklist a NIK that is already
        blacklisted anywhere; nobody may blacklist the same employment twice.
        """
        if not (reason or '').strip():
            raise ValidationError({'reason': ["A reason is required to blacklist an employee."]})

        if employee.status_events.blacklists().open().exists():
            raise ConflictError({'employee_number': ["Employee is already blacklisted."]})
        if not actor.is_privileged and StatusService.is_nik_blacklisted(employee.employee_number):
            raise ConflictError({'employee_number': ["NIK is already blacklisted."]})

        try:
            with transaction.atomic():
                event = StatusService.write_event(
                    actor, employee, StatusType.BLACKLIST,
                    reason=reason, category=category or 'blacklist',
                    start_date=start_date, document_url=document_url,
                )
        except IntegrityError:
            raise ConflictError({'employee_number': ["Employee is already blacklisted."]})

        StatusService.mark_inactive(employee, start_date, reason)
        return event

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def apply(actor, dto: StatusChangeDTO) -> StatusEvent:
        """Dispatch a status action by name."""
        if dto.action == 'deactivate':
            return StatusService.deactivate(actor, dto)
        if dto.action == 'blacklist':
            return StatusService.blacklist(actor, dto)
        if dto.action == 'cite':
            return StatusService.cite(actor, dto)
        raise ValidationError({'action': [f"Unknown status action '{dto.action}'."]})

    @staticmethod
    @transaction.atomic
    def deactivate(actor, dto: StatusChangeDTO) -> StatusEvent:
        """
        active -> inactive.

        Args:
            actor: ActorContext
            dto: StatusChangeDTO (reason required, effective_date defaults to today)
        """
        if not (dto.reason or '').strip():
            raise ValidationError({'reason': ["A reason is required to deactivate an employee."]})

        employee = StatusService.lock_employee(actor, dto.employee_id)
        if not employee.is_active:
            raise ValidationError({'status_aktif': ["Employee is already inactive."]})

        before = AuditService.snapshot(employee, EMPLOYEE_TRACKED_FIELDS)
        effective_date = dto.effective_date or timezone.localdate()
        event = StatusService.write_event(
            actor, employee, StatusType.INACTIVE,
            reason=dto.reason, category=dto.category,
            start_date=effective_date, document_url=dto.document_url,
        )
        StatusService.mark_inactive(employee, effective_date, dto.reason)
        employee.updated_by_id = actor.user_id
        employee.save()

        AuditService.record(
            actor, employee,
            AuditService.diff(before, AuditService.snapshot(employee, EMPLOYEE_TRACKED_FIELDS)),
            dto.source,
        )
        return event

    @staticmethod
    @transaction.atomic
    def blacklist(actor, dto: StatusChangeDTO) -> StatusEvent:
        """active / inactive -> blacklisted."""
        employee = StatusService.lock_employee(actor, dto.employee_id)

        before = AuditService.snapshot(employee, EMPLOYEE_TRACKED_FIELDS)
        event = StatusService.write_blacklist(
            actor, employee, dto.reason,
            category=dto.category, start_date=dto.effective_date, document_url=dto.document_url,
        )
        employee.updated_by_id = actor.user_id
        employee.save()

        changes = AuditService.diff(before, AuditService.snapshot(employee, EMPLOYEE_TRACKED_FIELDS))
        changes.append(('blacklist_status', None, 'blacklist'))
        AuditService.record(actor, employee, changes, dto.source)
        return event

    @staticmethod
    @transaction.atomic
    def clear_blacklist(actor, employee_id) -> StatusEvent:
        """
        blacklisted -> cleared. Owner only; closes the open blacklist event
        without reactivating the employment.
        """
        if not actor.is_privileged:
            raise AuthorizationError("Only the owner can clear a blacklist.")

        employee = StatusService.lock_employee(actor, employee_id)
        event = employee.status_events.blacklists().open().select_for_update().first()
        if event is None:
            raise NotFoundError("No open blacklist found")

        event.end_date = timezone.localdate()
        event.save(update_fields=['end_date'])

        AuditService.record(
            actor, employee,
            [('blacklist_status', 'blacklist', 'cleared')],
            ChangeSource.OWNER_CLEAR,
        )
        logger.info(f"Blacklist cleared for NIK {employee.employee_number} by {actor.username}")
        return event

    @staticmethod
    @transaction.atomic
    def cite(actor, dto: StatusChangeDTO) -> StatusEvent:
        """Record a violation; the employment stays as it is."""
        if not ((dto.reason or '').strip() or (dto.category or '').strip()):
            raise ValidationError({'reason': ["A category or reason is required for a violation."]})

        employee = StatusService.lock_employee(actor, dto.employee_id)
        event = StatusService.write_event(
            actor, employee, StatusType.VIOLATION,
            reason=dto.reason, category=dto.category,
            start_date=dto.effective_date, document_url=dto.document_url,
        )
        AuditService.record(
            actor, employee,
            [('pelanggaran', None, AuditService.normalize(dto.category or dto.reason))],
            dto.source,
        )
        return event

"""
Mutation Service - approval workflow for cross-company moves.

    submit()   destination company asks for a NIK     -> pending
    approve()  origin company (top authority) or owner -> approved
    reject()                                           -> rejected

An approval only unlocks the hire at the destination; the hire itself goes
through EmployeeService.create, which consumes the approval.
"""
import logging
from dataclasses import dataclass
from typing import List

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import Q
from django.utils import timezone

from core.base.exceptions import ConflictError, AuthorizationError, NotFoundError
from HR.person.dtos import MutationRequestCreateDTO, MutationDecisionDTO
from HR.person.models import Employee, MutationRequest, RequestStatus

logger = logging.getLogger(__name__)


@dataclass
class MutationRequestItem:
    request: MutationRequest
    direction: str
    can_decide: bool


class MutationService:
    """Service layer for mutation requests"""

    @staticmethod
    def can_decide(actor, request: MutationRequest) -> bool:
        """Owner, or a top-of-company actor of the origin company."""
        if actor.is_privileged:
            return True
        return actor.company_id == request.origin_company_id and actor.is_company_top

    @staticmethod
    @transaction.atomic
    def submit(actor, dto: MutationRequestCreateDTO) -> MutationRequest:
        """
        Ask to move a NIK into the actor's company.

        Origin is the company of the NIK's most recent employment.
        """
        employee_number = (dto.employee_number or '').strip()
        if not employee_number:
            raise ValidationError({'employee_number': ["NIK is required."]})
        if not actor.company_id:
            raise ValidationError({'company_id': ["You are not assigned to a company."]})

        origin = (
            Employee.objects.for_nik(employee_number)
            .select_related('company')
            .latest_first()
            .first()
        )
        if origin is None:
            raise NotFoundError(f"NIK {employee_number} not found.")

        if Employee.objects.for_nik(employee_number).filter(company_id=actor.company_id).exists():
            raise ConflictError({'employee_number': ["Employee is already registered in your company."]})

        duplicate = MutationRequest.objects.pending().for_route(
            employee_number, origin.company_id, actor.company_id
        )
        if duplicate.exists():
            raise ConflictError({'employee_number': ["A pending mutation request already exists for this employee."]})

        try:
            with transaction.atomic():
                request = MutationRequest.objects.create(
                    employee=origin,
                    person_id=origin.person_id,
                    employee_number=employee_number,
                    origin_company_id=origin.company_id,
                    destination_company_id=actor.company_id,
                    note=dto.note or '',
                    requested_by_id=actor.user_id,
                )
        except IntegrityError:
            raise ConflictError({'employee_number': ["A pending mutation request already exists for this employee."]})

        logger.info(
            f"Mutation request {request.pk}: NIK {employee_number} "
            f"{origin.company_id} -> {actor.company_id} by {actor.username}"
        )
        return request

    @staticmethod
    @transaction.atomic
    def decide(actor, dto: MutationDecisionDTO) -> MutationRequest:
        """Approve or reject a pending request."""
        try:
            request = MutationRequest.objects.select_for_update().get(pk=dto.request_id)
        except MutationRequest.DoesNotExist:
            raise NotFoundError(f"Mutation request {dto.request_id} not found.")

        if not MutationService.can_decide(actor, request):
            raise AuthorizationError("You are not allowed to decide this mutation request.")
        if not request.is_pending:
            raise ConflictError({'status': [f"Mutation request is already {request.status}."]})

        request.status = RequestStatus.APPROVED if dto.approve else RequestStatus.REJECTED
        request.decided_at = timezone.now()
        request.decided_by_id = actor.user_id
        if (dto.note or '').strip():
            request.note = dto.note
        request.save(update_fields=['status', 'decided_at', 'decided_by', 'note'])

        logger.info(f"Mutation request {request.pk} {request.status} by {actor.username}")
        return request

    @staticmethod
    def approve(actor, request_id, note='') -> MutationRequest:
        return MutationService.decide(actor, MutationDecisionDTO(request_id=request_id, approve=True, note=note))

    @staticmethod
    def reject(actor, request_id, note='') -> MutationRequest:
        return MutationService.decide(actor, MutationDecisionDTO(request_id=request_id, approve=False, note=note))

    @staticmethod
    def consume(request: MutationRequest, employee):
        """Mark an approval as used by the hire that relied on it."""
        request.consumed_at = timezone.now()
        request.consumed_by_employee = employee
        request.save(update_fields=['consumed_at', 'consumed_by_employee'])

    @staticmethod
    def list_for_actor(actor, status=None) -> List[MutationRequestItem]:
        """
        Incoming (actor's company is the origin) and outgoing (actor's company
        is the destination) requests. The owner sees all of them.
        """
        queryset = MutationRequest.objects.select_related(
            'origin_company', 'destination_company', 'person'
        )
        if not actor.is_privileged:
            if not actor.company_id:
                return []
            queryset = queryset.filter(
                Q(origin_company_id=actor.company_id) | Q(destination_company_id=actor.company_id)
            )
        if status:
            queryset = queryset.filter(status=status)

        items = []
        for request in queryset:
            if request.origin_company_id == actor.company_id:
                direction = 'incoming'
            elif request.destination_company_id == actor.company_id:
                direction = 'outgoing'
            else:
                direction = 'other'
            items.append(MutationRequestItem(
                request=request,
                direction=direction,
                can_decide=request.is_pending and MutationService.can_decide(actor, request),
            ))
        return items

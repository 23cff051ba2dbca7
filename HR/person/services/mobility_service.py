"""
Mobility Service - classification and eligibility of cross-company hires.

The NIK's history at other companies decides the mobility class of a hire:

    no employment elsewhere                      -> rekrut
    employment elsewhere, never deactivated      -> kontrak  (needs an approved mutation request)
    employment elsewhere, deactivated at least   -> rehire   (needs the cooling-off period
    once at any company                                        to have passed)

The owner bypasses both gates.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db.models import Max
from django.utils import timezone

from core.base.exceptions import ConflictError
from HR.person.models import Employee, StatusEvent, MutationRequest, MobilityClass
from HR.work_structures.models import Company

logger = logging.getLogger(__name__)


@dataclass
class MobilityHistory:
    mobility_class: str
    origin_company_id: Optional[int] = None
    latest_inactive_date: Optional[date] = None


def cooling_off_days():
    return getattr(settings, 'MOBILITY_COOLING_OFF_DAYS', 90)


def eligible_from(latest_inactive_date):
    """First date a deactivated NIK may be hired at another company."""
    return latest_inactive_date + relativedelta(days=cooling_off_days())


class MobilityService:
    """Service layer for cross-company mobility rules"""

    @staticmethod
    def classify(origin_company_id, latest_inactive_date) -> MobilityHistory:
        if origin_company_id is None:
            return MobilityHistory(MobilityClass.REKRUT)
        if latest_inactive_date is None:
            return MobilityHistory(MobilityClass.KONTRAK, origin_company_id)
        return MobilityHistory(MobilityClass.REHIRE, origin_company_id, latest_inactive_date)

    @staticmethod
    def resolve_history(employee_number, destination_company_id) -> MobilityHistory:
        """
        Mobility class of hiring the NIK at destination_company_id.

        The origin is the company of the most recent employment elsewhere.
        Deactivations count at any company.
        """
        latest = (
            Employee.objects.for_nik(employee_number)
            .at_other_companies(destination_company_id)
            .latest_first()
            .values_list('company_id', flat=True)
            .first()
        )
        latest_inactive = None
        if latest is not None:
            latest_inactive = (
                StatusEvent.objects.for_nik(employee_number)
                .inactivations()
                .aggregate(latest=Max('start_date'))['latest']
            )
        return MobilityService.classify(latest, latest_inactive)

    @staticmethod
    def find_approval(employee_number, origin_company_id, destination_company_id):
        """Oldest approved, unconsumed mutation request for the route (or None)."""
        return (
            MutationRequest.objects.approved().unconsumed()
            .for_route(employee_number, origin_company_id, destination_company_id)
            .order_by('decided_at', 'pk')
            .first()
        )

    @staticmethod
    def gate(actor, employee_number, history: MobilityHistory, hire_date, has_approval):
        """
        Raise ConflictError when a non-privileged actor may not perform the hire.

        Args:
            hire_date: active date of the new employment
            has_approval: an approved, unconsumed request exists for the route
        """
        if actor.is_privileged:
            return

        if history.mobility_class == MobilityClass.KONTRAK and not has_approval:
            origin = Company.objects.filter(pk=history.origin_company_id).values_list('name', flat=True).first()
            logger.warning(f"Transfer of NIK {employee_number} from {origin} rejected: not approved")
            raise ConflictError({'employee_number': [
                f"Transfer has not been approved by the origin company ({origin}). "
                f"Submit a mutation request first."
            ]})

        if history.mobility_class == MobilityClass.REHIRE:
            allowed_from = eligible_from(history.latest_inactive_date)
            if hire_date < allowed_from:
                logger.warning(f"Rehire of NIK {employee_number} rejected: cooling-off until {allowed_from}")
                raise ConflictError({'employee_number': [
                    f"NIK {employee_number} was deactivated on {history.latest_inactive_date:%Y-%m-%d}; "
                    f"it can be hired at another company from {allowed_from:%Y-%m-%d} "
                    f"({cooling_off_days()}-day cooling-off period)."
                ]})

    @staticmethod
    def check_eligibility(actor, employee_number, destination_company_id, hire_date=None):
        """
        Resolve the NIK's history and apply the gates.

        Returns:
            (MobilityHistory, MutationRequest or None): the approval the hire
            relies on, to be consumed by the caller.
        """
        hire_date = hire_date or timezone.localdate()
        history = MobilityService.resolve_history(employee_number, destination_company_id)

        approval = None
        if history.mobility_class == MobilityClass.KONTRAK:
            approval = MobilityService.find_approval(
                employee_number, history.origin_company_id, destination_company_id
            )

        MobilityService.gate(actor, employee_number, history, hire_date, approval is not None)
        return history, approval

"""
Person domain querysets.

NIK (employee_number) is the key most decisions are made on: blacklist,
mobility history and mutation approvals are all looked up per NIK across
every company.
"""
from django.db import models

from core.base.exceptions import NotFoundError
from HR.work_structures.managers import ScopedQuerySetMixin
from HR.person.models.choices import StatusType, RequestStatus


class EmployeeQuerySet(ScopedQuerySetMixin, models.QuerySet):

    def for_nik(self, employee_number):
        return self.filter(employee_number=employee_number)

    def at_other_companies(self, company_id):
        return self.exclude(company_id=company_id)

    def latest_first(self):
        return self.order_by('-created_at', '-pk')

    def get_for_actor(self, actor, pk):
        """Fetch one employment inside the actor's data scope or raise NotFoundError."""
        try:
            return self.scoped(actor).select_related('person', 'company').get(pk=pk)
        except self.model.DoesNotExist:
            raise NotFoundError(f"Employee {pk} not found.")


class EmployeeManager(models.Manager.from_queryset(EmployeeQuerySet)):
    pass


class StatusEventQuerySet(models.QuerySet):

    def for_nik(self, employee_number):
        return self.filter(employee_number=employee_number)

    def open(self):
        """Events without an end date."""
        return self.filter(end_date__isnull=True)

    def blacklists(self):
        return self.filter(status_type=StatusType.BLACKLIST)

    def inactivations(self):
        return self.filter(status_type=StatusType.INACTIVE)


class StatusEventManager(models.Manager.from_queryset(StatusEventQuerySet)):
    pass


class MutationRequestQuerySet(models.QuerySet):

    def pending(self):
        return self.filter(status=RequestStatus.PENDING)

    def approved(self):
        return self.filter(status=RequestStatus.APPROVED)

    def unconsumed(self):
        return self.filter(consumed_at__isnull=True)

    def for_route(self, employee_number, origin_company_id, destination_company_id):
        return self.filter(
            employee_number=employee_number,
            origin_company_id=origin_company_id,
            destination_company_id=destination_company_id,
        )


class MutationRequestManager(models.Manager.from_queryset(MutationRequestQuerySet)):
    pass

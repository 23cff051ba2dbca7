from datetime import date
from unittest.mock import patch

from django.test import TestCase
from django.core.exceptions import ValidationError

from core.base.exceptions import ConflictError, AuthorizationError, NotFoundError
from HR.person.dtos import StatusChangeDTO
from HR.person.models import EmployeeNumberLock, StatusEvent, EmployeeAuditEntry, StatusType, ChangeSource
from HR.person.services.status_service import StatusService
from HR.person.services.employee_service import EmployeeService
from HR.person.tests.fixtures import create_company, company_actor, hire, hire_dto, OWNER


class StatusTransitionTests(TestCase):
    """active -> inactive / blacklisted / cited"""

    @classmethod
    def setUpTestData(cls):
        cls.company_a = create_company('PT Alpha')
        cls.company_b = create_company('PT Beta')
        cls.hr_a = company_actor(cls.company_a)
        cls.hr_b = company_actor(cls.company_b)

    def setUp(self):
        self.employee = hire('EMP100', self.company_a, 100)

    def status_dto(self, action, **kwargs):
        return StatusChangeDTO(employee_id=self.employee.pk, action=action, **kwargs)

    def test_deactivate_writes_event_and_audit(self):
        event = StatusService.apply(self.hr_a, self.status_dto(
            'deactivate', reason='Contract ended', effective_date=date(2025, 1, 1)
        ))
        self.employee.refresh_from_db()

        self.assertEqual(event.status_type, StatusType.INACTIVE)
        self.assertEqual(event.start_date, date(2025, 1, 1))
        self.assertFalse(self.employee.is_active)
        self.assertEqual(self.employee.deactivation_date, date(2025, 1, 1))
        self.assertEqual(self.employee.deactivation_reason, 'Contract ended')

        entry = EmployeeAuditEntry.objects.get(employee=self.employee, field_name='status_aktif')
        self.assertEqual((entry.old_value, entry.new_value), ('true', 'false'))
        self.assertEqual(entry.source, ChangeSource.LIST_ACTION)

    def test_deactivate_requires_reason(self):
        with self.assertRaises(ValidationError) as ctx:
            StatusService.apply(self.hr_a, self.status_dto('deactivate', reason='  '))
        self.assertIn('reason', ctx.exception.message_dict)
        self.assertFalse(StatusEvent.objects.filter(employee=self.employee).exists())

    def test_deactivate_twice_rejected(self):
        StatusService.apply(self.hr_a, self.status_dto('deactivate', reason='Resigned'))
        with self.assertRaises(ValidationError):
            StatusService.apply(self.hr_a, self.status_dto('deactivate', reason='Resigned'))

    def test_actor_outside_scope_gets_not_found(self):
        with self.assertRaises(NotFoundError):
            StatusService.apply(self.hr_b, self.status_dto('deactivate', reason='Resigned'))

    def test_unknown_action(self):
        with self.assertRaises(ValidationError):
            StatusService.apply(self.hr_a, self.status_dto('promote', reason='x'))

    def test_blacklist_forces_inactive(self):
        event = StatusService.apply(self.hr_a, self.status_dto(
            'blacklist', reason='Theft', category='fraud'
        ))
        self.employee.refresh_from_db()

        self.assertTrue(event.is_open)
        self.assertEqual(event.category, 'fraud')
        self.assertFalse(self.employee.is_active)
        self.assertTrue(StatusService.is_nik_blacklisted('EMP100'))
        self.assertTrue(EmployeeAuditEntry.objects.filter(
            employee=self.employee, field_name='blacklist_status', new_value='blacklist'
        ).exists())

    def test_blacklist_requires_reason(self):
        with self.assertRaises(ValidationError):
            StatusService.apply(self.hr_a, self.status_dto('blacklist', reason=''))

    def test_blacklist_same_employment_twice(self):
        StatusService.apply(OWNER, self.status_dto('blacklist', reason='Theft'))
        with self.assertRaises(ConflictError):
            StatusService.apply(OWNER, self.status_dto('blacklist', reason='Theft again'))
        self.assertEqual(StatusEvent.objects.blacklists().open().count(), 1)

    def test_non_owner_cannot_blacklist_nik_blacklisted_elsewhere(self):
        other = hire('EMP100', self.company_b, 100)
        StatusService.apply(OWNER, self.status_dto('blacklist', reason='Theft'))

        with self.assertRaises(ConflictError) as ctx:
            StatusService.apply(self.hr_b, StatusChangeDTO(
                employee_id=other.pk, action='blacklist', reason='Also theft'
            ))
        self.assertEqual(ctx.exception.message_dict['employee_number'], ["NIK is already blacklisted."])

        # The owner may
        StatusService.apply(OWNER, StatusChangeDTO(employee_id=other.pk, action='blacklist', reason='Also theft'))
        self.assertEqual(StatusEvent.objects.for_nik('EMP100').blacklists().open().count(), 2)

    def test_cite_keeps_employment_active(self):
        event = StatusService.apply(self.hr_a, self.status_dto('cite', category='SP1', reason='Late'))
        self.employee.refresh_from_db()

        self.assertEqual(event.status_type, StatusType.VIOLATION)
        self.assertTrue(self.employee.is_active)
        entry = EmployeeAuditEntry.objects.get(employee=self.employee, field_name='pelanggaran')
        self.assertEqual(entry.new_value, 'SP1')

    def test_cite_requires_category_or_reason(self):
        with self.assertRaises(ValidationError):
            StatusService.apply(self.hr_a, self.status_dto('cite'))

    def test_latest_flag(self):
        self.assertIsNone(StatusService.latest_flag('EMP100'))
        StatusService.apply(self.hr_a, self.status_dto('cite', category='SP1', effective_date=date(2024, 1, 1)))
        StatusService.apply(self.hr_a, self.status_dto('cite', category='SP2', effective_date=date(2024, 3, 1)))
        self.assertEqual(StatusService.latest_flag('EMP100').category, 'SP2')

    def test_transitions_lock_the_nik(self):
        with patch.object(EmployeeNumberLock, 'acquire', wraps=EmployeeNumberLock.acquire) as acquire:
            StatusService.apply(self.hr_a, self.status_dto('cite', category='SP1'))
            StatusService.apply(self.hr_a, self.status_dto('blacklist', reason='Theft'))
            StatusService.clear_blacklist(OWNER, self.employee.pk)
        self.assertEqual([call.args for call in acquire.call_args_list], [('EMP100',)] * 3)


class ClearBlacklistTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.company = create_company('PT Alpha')
        cls.hr = company_actor(cls.company)

    def setUp(self):
        self.employee = hire('EMP200', self.company, 200)
        StatusService.apply(OWNER, StatusChangeDTO(
            employee_id=self.employee.pk, action='blacklist', reason='Fraud'
        ))

    def test_owner_clears_blacklist(self):
        event = StatusService.clear_blacklist(OWNER, self.employee.pk)
        self.employee.refresh_from_db()

        self.assertFalse(event.is_open)
        self.assertFalse(StatusService.is_nik_blacklisted('EMP200'))
        # Clearing does not reactivate
        self.assertFalse(self.employee.is_active)

        entry = EmployeeAuditEntry.objects.get(
            employee=self.employee, field_name='blacklist_status', new_value='cleared'
        )
        self.assertEqual(entry.old_value, 'blacklist')
        self.assertEqual(entry.source, ChangeSource.OWNER_CLEAR)

    def test_non_owner_cannot_clear(self):
        with self.assertRaises(AuthorizationError):
            StatusService.clear_blacklist(self.hr, self.employee.pk)
        self.assertTrue(StatusService.is_nik_blacklisted('EMP200'))

    def test_nothing_to_clear(self):
        StatusService.clear_blacklist(OWNER, self.employee.pk)
        with self.assertRaises(NotFoundError):
            StatusService.clear_blacklist(OWNER, self.employee.pk)

    def test_blacklisted_nik_cannot_be_hired_by_non_owner(self):
        other = create_company('PT Beta')
        with self.assertRaises(ConflictError) as ctx:
            EmployeeService.create(company_actor(other), hire_dto('EMP200', other, 200))
        self.assertEqual(ctx.exception.message_dict['employee_number'], ["NIK detected blacklist."])

    def test_owner_may_hire_blacklisted_nik(self):
        other = create_company('PT Beta')
        result = EmployeeService.create(OWNER, hire_dto('EMP200', other, 200))
        self.assertIn('NIK detected blacklist: blacklist', result.warnings)

    def test_hire_allowed_after_clearing(self):
        StatusService.clear_blacklist(OWNER, self.employee.pk)
        other = create_company('PT Beta')
        # Only 'nonaktif' events make a rehire; a blacklisted employment counts as kontrak
        result = EmployeeService.create(OWNER, hire_dto('EMP200', other, 200))
        self.assertEqual(result.mobility_class, 'kontrak')

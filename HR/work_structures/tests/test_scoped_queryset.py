from django.test import TestCase

from HR.person.actor import ActorContext
from HR.person.models import Employee
from HR.person.tests.fixtures import create_company, hire


class ScopedQuerySetTests(TestCase):
    """Employee data scope follows the actor's narrowest placement"""

    @classmethod
    def setUpTestData(cls):
        cls.company_a, cls.dept_a, cls.section_a, cls.position_a = create_company('PT Alpha', with_structure=True)
        cls.company_b = create_company('PT Beta')

        cls.placed = hire('EMP001', cls.company_a, 1, department_id=cls.dept_a.pk,
                          section_id=cls.section_a.pk, position_id=cls.position_a.pk)
        cls.unplaced = hire('EMP002', cls.company_a, 2)
        cls.other = hire('EMP003', cls.company_b, 3)

    def scoped_numbers(self, actor):
        return set(Employee.objects.scoped(actor).values_list('employee_number', flat=True))

    def test_privileged_sees_everything(self):
        actor = ActorContext(is_privileged=True)
        self.assertEqual(self.scoped_numbers(actor), {'EMP001', 'EMP002', 'EMP003'})

    def test_full_access_role_level_sees_everything(self):
        actor = ActorContext(company_id=self.company_a.pk, role_level=4)
        self.assertEqual(self.scoped_numbers(actor), {'EMP001', 'EMP002', 'EMP003'})

    def test_company_scope(self):
        actor = ActorContext(company_id=self.company_a.pk)
        self.assertEqual(self.scoped_numbers(actor), {'EMP001', 'EMP002'})

    def test_department_scope(self):
        actor = ActorContext(company_id=self.company_a.pk, department_id=self.dept_a.pk)
        self.assertEqual(self.scoped_numbers(actor), {'EMP001'})

    def test_position_scope_is_narrowest(self):
        actor = ActorContext(
            company_id=self.company_a.pk, department_id=self.dept_a.pk,
            section_id=self.section_a.pk, position_id=self.position_a.pk,
        )
        self.assertEqual(self.scoped_numbers(actor), {'EMP001'})

    def test_no_placement_sees_nothing(self):
        self.assertEqual(self.scoped_numbers(ActorContext()), set())

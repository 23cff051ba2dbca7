from django.test import TestCase, override_settings

from HR.person.actor import ActorContext
from HR.work_structures.models import Company, Department
from core.base.test_utils import setup_job_roles, create_test_user, create_owner


class ActorContextTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.roles = setup_job_roles()
        cls.company = Company.objects.create(name='PT Alpha')
        cls.department = Department.objects.create(company=cls.company, name='Operations')

    def test_from_owner(self):
        actor = ActorContext.from_user(create_owner())
        self.assertTrue(actor.is_privileged)
        self.assertTrue(actor.has_global_scope)
        self.assertTrue(actor.can_access_company(self.company.pk))

    def test_from_placed_user(self):
        user = create_test_user(
            'staff@example.com', company=self.company, department=self.department,
            job_role=self.roles['Staff'],
        )
        actor = ActorContext.from_user(user)

        self.assertEqual(actor.user_id, user.pk)
        self.assertFalse(actor.is_privileged)
        self.assertEqual(actor.company_id, self.company.pk)
        self.assertEqual(actor.department_id, self.department.pk)
        self.assertEqual((actor.role_level, actor.max_role_level), (1, 4))
        self.assertFalse(actor.has_global_scope)
        self.assertFalse(actor.is_company_top)

    def test_user_without_role(self):
        actor = ActorContext.from_user(create_test_user('norole@example.com', company=self.company))
        self.assertEqual(actor.role_level, 0)
        self.assertTrue(actor.is_company_top)

    def test_company_access(self):
        actor = ActorContext(company_id=self.company.pk)
        self.assertTrue(actor.can_access_company(self.company.pk))
        self.assertFalse(actor.can_access_company(self.company.pk + 1))
        self.assertFalse(ActorContext().can_access_company(None))

    def test_top_role_level(self):
        actor = ActorContext(company_id=1, department_id=1, role_level=4, max_role_level=4)
        self.assertTrue(actor.is_company_top)

    @override_settings(FULL_ACCESS_ROLE_LEVEL=3)
    def test_full_access_level_configurable(self):
        self.assertTrue(ActorContext(role_level=3).has_global_scope)
        self.assertFalse(ActorContext(role_level=2).has_global_scope)

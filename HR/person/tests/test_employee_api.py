"""
API tests for employee endpoints.
"""
from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from core.base.test_utils import create_test_user, create_owner, setup_job_roles
from HR.person.models import Employee, StatusEvent, StatusType
from HR.person.tests.fixtures import (
    create_company, hire, national_id_for, family_card_for,
)


class EmployeeAPITestBase(APITestCase):

    @classmethod
    def setUpTestData(cls):
        roles = setup_job_roles()
        cls.company_a, cls.dept_a, cls.section_a, cls.position_a = create_company('PT Alpha', with_structure=True)
        cls.company_b = create_company('PT Beta')
        cls.owner = create_owner()
        cls.hr_a = create_test_user('hr.alpha@example.com', company=cls.company_a, job_role=roles['Manager'])
        cls.hr_b = create_test_user('hr.beta@example.com', company=cls.company_b, job_role=roles['Manager'])

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.hr_a)

    def payload(self, employee_number, number, **extra):
        data = {
            'employee_number': employee_number,
            'full_name': f"Employee {employee_number}",
            'company_id': self.company_a.pk,
            'citizenship': 'WNI',
            'national_id': national_id_for(number),
            'family_card_number': family_card_for(number),
            'active_date': '2024-06-01',
        }
        data.update(extra)
        return data


class EmployeeCreateAPITest(EmployeeAPITestBase):

    def test_create_employee(self):
        response = self.client.post('/hr/person/employees/', self.payload(
            'EMP001', 1,
            department_id=self.dept_a.pk, section_id=self.section_a.pk, position_id=self.position_a.pk,
            educations=[{'level': 'S1', 'school_name': 'ITB'}],
            vaccinations=[{'vaccine_type': 'Sinovac', 'dose': '1', 'vaccination_date': '2021-08-01'}],
            documents=[{'name': 'Contract', 'file_url': 'files/emp001/pkwt.pdf'}],
        ), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Employee created')
        data = response.data['data']
        self.assertEqual(data['mobility_class'], 'rekrut')
        self.assertEqual(data['employee']['employee_number'], 'EMP001')
        self.assertEqual(data['employee']['position_name'], 'Operator')
        self.assertEqual(len(data['employee']['person']['educations']), 1)
        self.assertEqual(data['employee']['vaccinations'][0]['vaccine_type'], 'Sinovac')
        self.assertEqual(data['employee']['documents'][0]['file_url'], 'files/emp001/pkwt.pdf')
        self.assertEqual(data['employee']['nik_notices'], [])

    def test_document_without_file_rejected(self):
        response = self.client.post(
            '/hr/person/employees/', self.payload('EMP001', 1, documents=[{'name': 'Contract'}]), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('documents', response.data['data'])

    def test_invalid_payload(self):
        response = self.client.post('/hr/person/employees/', {'full_name': 'No NIK'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('employee_number', response.data['data'])

    def test_invalid_national_id(self):
        response = self.client.post(
            '/hr/person/employees/', self.payload('EMP001', 1, national_id='123'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('national_id', response.data['data'])

    def test_duplicate_nik_in_company_conflict(self):
        hire('EMP001', self.company_a, 1)
        response = self.client.post('/hr/person/employees/', self.payload('EMP001', 1), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['status'], 'error')
        self.assertIn('employee_number', response.data['data'])

    def test_identity_conflict(self):
        hire('EMP009', self.company_b, 9)
        response = self.client.post('/hr/person/employees/', self.payload('EMP001', 9), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(
            response.data['data']['national_id'],
            ["National ID is already used by another NIK: EMP009 - PT Beta."]
        )

    def test_other_company_forbidden(self):
        response = self.client.post(
            '/hr/person/employees/', self.payload('EMP001', 1, company_id=self.company_b.pk), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Employee.objects.exists())

    def test_transfer_needs_approval(self):
        hire('EMP002', self.company_b, 2)
        response = self.client.post('/hr/person/employees/', self.payload('EMP002', 2), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('mutation request', response.data['message'])

    def test_owner_transfer_returns_warnings(self):
        hire('EMP002', self.company_b, 2)
        self.client.force_authenticate(user=self.owner)
        response = self.client.post('/hr/person/employees/', self.payload('EMP002', 2), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['mobility_class'], 'kontrak')
        self.assertEqual(response.data['data']['warnings'], ['NIK previously worked at: PT Beta'])


class EmployeeReadUpdateAPITest(EmployeeAPITestBase):

    def setUp(self):
        super().setUp()
        self.employee = hire('EMP001', self.company_a, 1, grade='G1')
        self.other = hire('EMP003', self.company_b, 3)

    def test_list_is_scoped_and_paginated(self):
        response = self.client.get('/hr/person/employees/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['count'], 1)
        self.assertEqual(data['results'][0]['employee_number'], 'EMP001')

        self.client.force_authenticate(user=self.owner)
        response = self.client.get('/hr/person/employees/', {'search': 'EMP00'})
        self.assertEqual(response.data['data']['count'], 2)

    def test_retrieve(self):
        response = self.client.get(f'/hr/person/employees/{self.employee.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['person']['national_id'], national_id_for(1))

    def test_retrieve_out_of_scope(self):
        response = self.client.get(f'/hr/person/employees/{self.other.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_patch_updates_fields(self):
        response = self.client.patch(
            f'/hr/person/employees/{self.employee.pk}/', {'grade': 'G2', 'phone_1': '0812'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Employee updated')
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.grade, 'G2')
        self.assertEqual(self.employee.person.phone_1, '0812')

    def test_patch_null_clears_field(self):
        response = self.client.patch(
            f'/hr/person/employees/{self.employee.pk}/', {'grade': None}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.grade, '')

    def test_company_change_rejected(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.patch(
            f'/hr/person/employees/{self.employee.pk}/', {'company_id': self.company_b.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('company_id', response.data['data'])

    def test_department_change_returns_mutasi(self):
        response = self.client.patch(
            f'/hr/person/employees/{self.employee.pk}/', {'department_id': self.dept_a.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['mobility_class'], 'mutasi')

    def test_check_nik(self):
        response = self.client.get('/hr/person/employees/check-nik/', {'nik': 'EMP003'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['exists'])
        self.assertFalse(response.data['in_company'])
        self.assertEqual(response.data['mobility_class'], 'kontrak')
        self.assertEqual(response.data['employee']['employee_number'], 'EMP003')

    def test_check_nik_requires_nik(self):
        response = self.client.get('/hr/person/employees/check-nik/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_history(self):
        response = self.client.get(f'/hr/person/employees/{self.employee.pk}/history/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['employee']['id'], self.employee.pk)
        self.assertEqual(len(response.data['placements']), 1)
        self.assertEqual(response.data['placements'][0]['mobility_class'], 'rekrut')
        self.assertTrue(response.data['audit_entries'])


class EmployeeStatusAPITest(EmployeeAPITestBase):

    def setUp(self):
        super().setUp()
        self.employee = hire('EMP001', self.company_a, 1)
        self.url = f'/hr/person/employees/{self.employee.pk}/status/'

    def test_deactivate(self):
        response = self.client.post(self.url, {
            'action': 'deactivate', 'reason': 'Resigned', 'effective_date': '2025-01-01'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Status nonaktif recorded')
        self.assertEqual(response.data['data']['start_date'], '2025-01-01')
        self.employee.refresh_from_db()
        self.assertFalse(self.employee.is_active)

    def test_deactivate_without_reason(self):
        response = self.client.post(self.url, {'action': 'deactivate'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('reason', response.data['data'])

    def test_unknown_action(self):
        response = self.client.post(self.url, {'action': 'promote'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blacklist_then_owner_clears(self):
        response = self.client.post(self.url, {'action': 'blacklist', 'reason': 'Fraud'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['data']['is_open'])

        clear_url = f'/hr/person/employees/{self.employee.pk}/clear-blacklist/'
        response = self.client.post(clear_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'You do not have permission to perform this action.')

        self.client.force_authenticate(user=self.owner)
        response = self.client.post(clear_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['data']['is_open'])

        response = self.client.post(clear_url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cite(self):
        response = self.client.post(self.url, {'action': 'cite', 'category': 'SP1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(StatusEvent.objects.filter(
            employee=self.employee, status_type=StatusType.VIOLATION
        ).exists())

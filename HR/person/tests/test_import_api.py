"""
API tests for the bulk employee import.
"""
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from core.base.test_utils import create_test_user, setup_job_roles
from HR.person.models import Employee
from HR.person.tests.fixtures import create_company, hire, national_id_for, family_card_for


def upload(rows, name='employees.csv'):
    lines = ["employee_number,full_name,company,national_id,family_card_number,grade"]
    lines += [','.join(row) for row in rows]
    return SimpleUploadedFile(name, ('\n'.join(lines) + '\n').encode('utf-8'), content_type='text/csv')


class EmployeeImportAPITest(APITestCase):

    @classmethod
    def setUpTestData(cls):
        roles = setup_job_roles()
        cls.company = create_company('PT Alpha')
        cls.hr = create_test_user('hr.alpha@example.com', company=cls.company, job_role=roles['Manager'])

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.hr)
        self.existing = hire('EMP001', self.company, 1, grade='G1')

    def rows(self):
        return [
            ['EMP001', 'Employee EMP001', 'PT Alpha', national_id_for(1), family_card_for(1), 'G2'],
            ['EMP002', 'Employee EMP002', 'PT Alpha', national_id_for(2), family_card_for(2), 'G1'],
            ['EMP003', 'Employee EMP003', 'PT Nowhere', national_id_for(3), family_card_for(3), 'G1'],
        ]

    def test_preview_does_not_write(self):
        response = self.client.post(
            '/hr/person/employees/import/preview/', {'file': upload(self.rows())}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['summary'], {'update': 1, 'insert': 1, 'error': 1})
        self.assertEqual([row['action'] for row in data['rows']], ['update', 'insert', 'error'])
        self.assertEqual(data['rows'][2]['errors'], ['Company not found: PT Nowhere'])
        self.assertEqual(Employee.objects.count(), 1)

    def test_confirm_applies_valid_rows(self):
        response = self.client.post(
            '/hr/person/employees/import/', {'file': upload(self.rows())}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], '1 inserted, 1 updated, 1 skipped')
        data = response.data['data']
        self.assertEqual(data['errors'], ['Row 4: Company not found: PT Nowhere'])

        self.existing.refresh_from_db()
        self.assertEqual(self.existing.grade, 'G2')
        self.assertTrue(Employee.objects.filter(employee_number='EMP002', company=self.company).exists())

    def test_unsupported_extension(self):
        response = self.client.post(
            '/hr/person/employees/import/preview/',
            {'file': SimpleUploadedFile('employees.txt', b'x')},
            format='multipart',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_columns(self):
        bad = SimpleUploadedFile('employees.csv', b'employee_number\nEMP001\n', content_type='text/csv')
        response = self.client.post('/hr/person/employees/import/', {'file': bad}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('file', response.data['data'])

    def test_template_download(self):
        response = self.client.get('/hr/person/employees/import/template/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('attachment;', response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'PK'))

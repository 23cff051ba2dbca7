import io
from datetime import date

import pandas as pd
from django.test import SimpleTestCase
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from openpyxl import load_workbook

from HR.person.services.import_io import (
    read_rows, read_dataframe, parse_date, parse_bool, build_template, TEMPLATE_COLUMNS,
)


def csv_upload(text, name='employees.csv'):
    return SimpleUploadedFile(name, text.encode('utf-8'), content_type='text/csv')


class ParseHelpersTests(SimpleTestCase):

    def test_parse_date_formats(self):
        self.assertEqual(parse_date('2025-01-15'), date(2025, 1, 15))
        self.assertEqual(parse_date('15/01/2025'), date(2025, 1, 15))
        self.assertEqual(parse_date('15-01-2025'), date(2025, 1, 15))
        self.assertEqual(parse_date('2025-01-15 00:00:00'), date(2025, 1, 15))
        self.assertEqual(parse_date('15 Jan 2025'), date(2025, 1, 15))
        self.assertIsNone(parse_date(''))
        self.assertIsNone(parse_date(None))

    def test_parse_date_invalid(self):
        with self.assertRaises(ValueError):
            parse_date('next monday')

    def test_parse_bool(self):
        self.assertTrue(parse_bool('Yes'))
        self.assertTrue(parse_bool('aktif'))
        self.assertFalse(parse_bool('nonaktif'))
        self.assertFalse(parse_bool('0'))
        self.assertIsNone(parse_bool(''))
        with self.assertRaises(ValueError):
            parse_bool('maybe')


class ReadRowsTests(SimpleTestCase):

    def test_header_aliases_and_text_cells(self):
        rows = read_rows(csv_upload(
            "NIK,Nama Lengkap,Perusahaan,No KTP,Tanggal Aktif,Status Aktif\n"
            "EMP001,Budi Santoso,PT Alpha,0201000000000001,15/01/2025,yes\n"
        ))
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row['employee_number'], 'EMP001')
        self.assertEqual(row['full_name'], 'Budi Santoso')
        self.assertEqual(row['company'], 'PT Alpha')
        # Leading zero survives
        self.assertEqual(row['national_id'], '0201000000000001')
        self.assertEqual(row['active_date'], date(2025, 1, 15))
        self.assertTrue(row['is_active'])
        self.assertEqual(row['_row'], 2)
        self.assertEqual(row['_errors'], [])
        self.assertEqual(row['grade'], '')

    def test_blank_rows_skipped_and_row_numbers_kept(self):
        rows = read_rows(csv_upload(
            "employee_number,full_name,company\n"
            "EMP001,Budi,PT Alpha\n"
            ",,\n"
            "EMP002,Siti,PT Alpha\n"
        ))
        self.assertEqual([row['_row'] for row in rows], [2, 4])

    def test_citizenship_upper_cased(self):
        rows = read_rows(csv_upload(
            "employee_number,full_name,company,kewarganegaraan\n"
            "EMP001,Budi,PT Alpha,wni\n"
            "EMP002,John,PT Alpha, wna \n"
            "EMP003,Siti,PT Alpha,\n"
        ))
        self.assertEqual([row['citizenship'] for row in rows], ['WNI', 'WNA', ''])

    def test_cell_errors_collected(self):
        rows = read_rows(csv_upload(
            "employee_number,full_name,company,hire_date,is_active\n"
            "EMP001,Budi,PT Alpha,31/31/2025,perhaps\n"
        ))
        self.assertIsNone(rows[0]['hire_date'])
        self.assertEqual(len(rows[0]['_errors']), 2)

    def test_missing_required_columns(self):
        with self.assertRaises(ValidationError) as ctx:
            read_rows(csv_upload("employee_number,grade\nEMP001,G1\n"))
        message = ctx.exception.message_dict['file'][0]
        self.assertIn('full_name', message)
        self.assertIn('company', message)

    def test_company_id_column_accepted(self):
        rows = read_dataframe(pd.DataFrame(
            [['EMP001', 'Budi', '7']], columns=['employee_number', 'full_name', 'company_id']
        ))
        self.assertEqual(rows[0]['company_id'], '7')

    def test_unsupported_format(self):
        with self.assertRaises(ValidationError):
            read_rows(SimpleUploadedFile('employees.txt', b'hello'))

    def test_empty_file(self):
        with self.assertRaises(ValidationError) as ctx:
            read_rows(csv_upload("employee_number,full_name,company\n"))
        self.assertEqual(ctx.exception.message_dict['file'], ["File is empty or has no data rows"])

    def test_template_round_trips_through_reader(self):
        content = build_template()
        sheet = load_workbook(io.BytesIO(content)).active
        header = [cell.value for cell in sheet[1]]
        self.assertEqual(header, TEMPLATE_COLUMNS)
        self.assertTrue(sheet['A1'].font.bold)

        rows = read_rows(SimpleUploadedFile('template.xlsx', content))
        self.assertEqual(rows[0]['employee_number'], 'EMP001')
        self.assertEqual(rows[0]['hire_date'], date(2025, 1, 15))

"""
Spreadsheet I/O for the bulk employee import.

read_rows() parses an uploaded .xlsx/.xls/.csv file into plain row dicts
keyed by field name; build_template() produces the .xlsx template users fill
in. The reconciliation itself lives in import_service.

HOW IT WORKS:
=============

1. FILE UPLOAD:
   - The file is read into memory with pandas, every cell as text so that
     16-digit identity numbers and leading zeros survive

2. COLUMN MAPPING:
   - Headers are matched case-insensitively, ignoring spaces and
     underscores, against a list of accepted names per field
     (e.g. "NIK", "Employee Number", "No Karyawan")

3. VALUE CLEANING:
   - Blank rows are dropped
   - Text is stripped; empty cells become ''
   - Date columns are parsed with several common formats
   - Active flag accepts yes/no, true/false, 1/0, aktif/nonaktif
"""
import io
from datetime import datetime, date
from typing import Dict, List, Optional

import pandas as pd
from django.core.exceptions import ValidationError
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter


# Field name -> accepted header names
COLUMN_MAPPINGS = {
    'employee_number': ['employee_number', 'nik', 'employee_no', 'no_karyawan'],
    'full_name': ['full_name', 'name', 'nama', 'nama_lengkap'],
    'company': ['company', 'company_name', 'perusahaan'],
    'company_id': ['company_id'],
    'department': ['department', 'department_name', 'departemen'],
    'section': ['section', 'section_name', 'seksi'],
    'position': ['position', 'position_name', 'jabatan'],
    'citizenship': ['citizenship', 'kewarganegaraan'],
    'national_id': ['national_id', 'ktp', 'no_ktp', 'passport', 'passport_number'],
    'family_card_number': ['family_card_number', 'family_card', 'kk', 'no_kk'],
    'alias': ['alias', 'nickname'],
    'gender': ['gender', 'jenis_kelamin'],
    'birth_place': ['birth_place', 'place_of_birth', 'tempat_lahir'],
    'date_of_birth': ['date_of_birth', 'birth_date', 'dob', 'tanggal_lahir'],
    'religion': ['religion', 'agama'],
    'marital_status': ['marital_status', 'status_pernikahan'],
    'personal_email': ['personal_email', 'email'],
    'phone_1': ['phone_1', 'phone', 'phone_number'],
    'phone_2': ['phone_2', 'alternate_phone'],
    'mother_name': ['mother_name', 'nama_ibu'],
    'father_name': ['father_name', 'nama_ayah'],
    'tax_number': ['tax_number', 'npwp'],
    'bpjs_employment_number': ['bpjs_employment_number', 'bpjs_ketenagakerjaan'],
    'bpjs_health_number': ['bpjs_health_number', 'bpjs_kesehatan'],
    'bpjs_pension_number': ['bpjs_pension_number', 'bpjs_pensiun'],
    'address': ['address', 'alamat'],
    'province': ['province', 'provinsi'],
    'regency': ['regency', 'city', 'kabupaten'],
    'district': ['district', 'kecamatan'],
    'village': ['village', 'kelurahan'],
    'postal_code': ['postal_code', 'zip', 'kode_pos'],
    'acr_number': ['acr_number', 'acr'],
    'hire_date': ['hire_date', 'tanggal_masuk'],
    'join_date': ['join_date', 'tanggal_bergabung'],
    'active_date': ['active_date', 'effective_date', 'tanggal_aktif'],
    'office_email': ['office_email', 'work_email'],
    'grade': ['grade'],
    'classification': ['classification', 'klasifikasi'],
    'work_roster': ['work_roster', 'roster'],
    'point_of_hire': ['point_of_hire', 'poh'],
    'work_location': ['work_location', 'lokasi_kerja'],
    'agreement_number': ['agreement_number', 'contract_number', 'no_perjanjian'],
    'is_active': ['is_active', 'active', 'status_aktif'],
    'education_level': ['education_level', 'pendidikan'],
    'school_name': ['school_name', 'school', 'sekolah'],
    'faculty': ['faculty', 'fakultas'],
    'major': ['major', 'jurusan'],
}

REQUIRED_COLUMNS = ('employee_number', 'full_name')

DATE_FIELDS = ('date_of_birth', 'hire_date', 'join_date', 'active_date')

DATE_FORMATS = [
    '%Y-%m-%d',           # 2026-01-15
    '%Y-%m-%d %H:%M:%S',  # 2026-01-15 00:00:00 (Excel dates read as text)
    '%d/%m/%Y',           # 15/01/2026
    '%d-%m-%Y',           # 15-01-2026
    '%Y/%m/%d',           # 2026/01/15
    '%d.%m.%Y',           # 15.01.2026
    '%d %b %Y',           # 15 Jan 2026
    '%d %B %Y',           # 15 January 2026
]

TRUE_VALUES = {'1', 'true', 'yes', 'y', 'aktif', 'active'}
FALSE_VALUES = {'0', 'false', 'no', 'n', 'nonaktif', 'inactive'}

# Columns written to the template, in order
TEMPLATE_COLUMNS = [
    'employee_number', 'full_name', 'company', 'department', 'section', 'position',
    'citizenship', 'national_id', 'family_card_number', 'alias', 'gender',
    'birth_place', 'date_of_birth', 'religion', 'marital_status', 'personal_email',
    'phone_1', 'phone_2', 'mother_name', 'father_name', 'tax_number',
    'bpjs_employment_number', 'bpjs_health_number', 'bpjs_pension_number',
    'address', 'province', 'regency', 'district', 'village', 'postal_code',
    'acr_number', 'hire_date', 'join_date', 'active_date', 'office_email',
    'grade', 'classification', 'work_roster', 'point_of_hire', 'work_location',
    'agreement_number', 'is_active', 'education_level', 'school_name', 'faculty', 'major',
]

TEMPLATE_EXAMPLE = {
    'employee_number': 'EMP001',
    'full_name': 'Budi Santoso',
    'company': 'PT Contoh',
    'citizenship': 'WNI',
    'national_id': '3201010101900001',
    'family_card_number': '3201010101900002',
    'hire_date': '2025-01-15',
    'active_date': '2025-01-15',
    'is_active': 'yes',
}


def _normalize_header(value):
    return str(value).strip().lower().replace('_', '').replace(' ', '')


def _find_columns(columns) -> Dict[str, str]:
    """Map field name -> actual column of the file."""
    by_header = {_normalize_header(col): col for col in columns}
    found = {}
    for field_name, aliases in COLUMN_MAPPINGS.items():
        for alias in aliases:
            column = by_header.get(_normalize_header(alias))
            if column is not None:
                found[field_name] = column
                break
    return found


def parse_date(value) -> Optional[date]:
    """Parse a date cell; raises ValueError when it is not a date."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    for date_format in DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date '{text}'")


def parse_bool(value) -> Optional[bool]:
    text = str(value or '').strip().lower()
    if not text:
        return None
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid active flag '{value}'")


def _cell_text(value):
    if value is None or pd.isna(value):
        return ''
    return str(value).strip()


def read_dataframe(df) -> List[dict]:
    """Turn a DataFrame of text cells into row dicts."""
    columns = _find_columns(df.columns)
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if 'company' not in columns and 'company_id' not in columns:
        missing.append('company')
    if missing:
        raise ValidationError({'file': [f"Missing required column(s): {', '.join(missing)}"]})

    rows = []
    for index, record in df.iterrows():
        raw = {name: _cell_text(record[column]) for name, column in columns.items()}
        if not any(raw.values()):
            continue

        row = {name: raw.get(name, '') for name in COLUMN_MAPPINGS}
        row['_row'] = index + 2  # header is row 1
        row['_errors'] = []
        row['citizenship'] = row['citizenship'].upper()

        for name in DATE_FIELDS:
            try:
                row[name] = parse_date(raw.get(name))
            except ValueError as exc:
                row[name] = None
                row['_errors'].append(f"{name}: {exc}")
        try:
            row['is_active'] = parse_bool(raw.get('is_active'))
        except ValueError as exc:
            row['is_active'] = None
            row['_errors'].append(f"is_active: {exc}")

        rows.append(row)
    return rows


def read_rows(file_obj) -> List[dict]:
    """
    Read an uploaded spreadsheet.

    Args:
        file_obj: uploaded file (.csv, .xlsx or .xls)

    Returns:
        list of row dicts; '_row' is the spreadsheet row number and
        '_errors' the cell-level parse errors of the row

    Raises:
        ValidationError: unsupported, unreadable or empty file, or missing
        required columns
    """
    file_name = (getattr(file_obj, 'name', '') or '').lower()
    content = io.BytesIO(file_obj.read())

    try:
        if file_name.endswith('.csv'):
            df = pd.read_csv(content, dtype=str)
        elif file_name.endswith(('.xlsx', '.xls')):
            df = pd.read_excel(content, dtype=str)
        else:
            raise ValidationError({'file': ["Unsupported file format. Please upload .csv, .xlsx, or .xls file"]})
    except ValidationError:
        raise
    except Exception as e:
        raise ValidationError({'file': [f"Error reading file: {str(e)}"]})

    rows = read_dataframe(df)
    if not rows:
        raise ValidationError({'file': ["File is empty or has no data rows"]})
    return rows


def build_template() -> bytes:
    """Import template: header row plus one example row."""
    wb = Workbook()
    ws = wb.active
    ws.title = 'Employees'

    header_fill = PatternFill(start_color='DDEBF7', end_color='DDEBF7', fill_type='solid')
    for col_idx, name in enumerate(TEMPLATE_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=name)
        cell.font = Font(bold=True)
        if name in REQUIRED_COLUMNS or name == 'company':
            cell.fill = header_fill
        ws.cell(row=2, column=col_idx, value=TEMPLATE_EXAMPLE.get(name, ''))
        ws.column_dimensions[get_column_letter(col_idx)].width = 20

    ws.freeze_panes = 'A2'

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()

"""
Data Transfer Objects for Person Domain

DTOs for service layer operations. Serializers build them with to_dto();
the bulk importer builds them from spreadsheet rows.
"""

from dataclasses import dataclass, field
from typing import Optional, List
from datetime import date

from HR.person.models.choices import ChangeSource


# Person attributes settable through create/update/import
PERSON_FIELDS = (
    'national_id', 'family_card_number', 'citizenship',
    'full_name', 'alias', 'gender', 'birth_place', 'date_of_birth',
    'religion', 'marital_status', 'personal_email', 'phone_1', 'phone_2',
    'mother_name', 'father_name', 'tax_number',
    'bpjs_employment_number', 'bpjs_health_number', 'bpjs_pension_number',
    'address', 'province', 'regency', 'district', 'village', 'postal_code',
    'supporting_file_url',
)

# Employment attributes settable through create/update/import
EMPLOYMENT_FIELDS = (
    'acr_number', 'department_id', 'section_id', 'position_id',
    'hire_date', 'join_date', 'active_date',
    'office_email', 'photo_url', 'grade', 'classification', 'work_roster',
    'point_of_hire', 'work_location', 'agreement_number',
)

ORG_FIELDS = ('department_id', 'section_id', 'position_id')


@dataclass
class EducationDTO:
    level: str = ''
    school_name: str = ''
    faculty: str = ''
    major: str = ''
    supporting_file_url: str = ''

    def is_empty(self):
        return not any([self.level, self.school_name, self.faculty, self.major])


@dataclass
class VaccinationDTO:
    vaccine_type: str = ''
    dose: str = ''
    vaccination_date: Optional[date] = None
    note: str = ''
    file_url: str = ''

    def is_empty(self):
        return not (self.vaccine_type or self.note)


@dataclass
class DocumentDTO:
    """Supporting document; file_url is required"""
    file_url: str = ''
    name: str = ''
    document_type: str = ''


@dataclass
class ViolationDTO:
    """One violation citation written together with a new employment"""
    category: str = ''
    reason: str = ''
    start_date: Optional[date] = None
    document_url: str = ''

    def is_empty(self):
        return not (self.category or self.reason)


@dataclass
class EmployeeCreateDTO:
    """DTO for hiring a NIK at a company"""
    employee_number: str
    full_name: str
    company_id: int

    # Person fields
    national_id: Optional[str] = None
    family_card_number: Optional[str] = None
    citizenship: Optional[str] = None
    alias: str = ''
    gender: str = ''
    birth_place: str = ''
    date_of_birth: Optional[date] = None
    religion: str = ''
    marital_status: str = ''
    personal_email: str = ''
    phone_1: str = ''
    phone_2: str = ''
    mother_name: str = ''
    father_name: str = ''
    tax_number: str = ''
    bpjs_employment_number: str = ''
    bpjs_health_number: str = ''
    bpjs_pension_number: str = ''
    address: str = ''
    province: str = ''
    regency: str = ''
    district: str = ''
    village: str = ''
    postal_code: str = ''
    supporting_file_url: str = ''

    # Employment fields
    acr_number: str = ''
    department_id: Optional[int] = None
    section_id: Optional[int] = None
    position_id: Optional[int] = None
    hire_date: Optional[date] = None
    join_date: Optional[date] = None
    active_date: Optional[date] = None
    office_email: str = ''
    photo_url: str = ''
    grade: str = ''
    classification: str = ''
    work_roster: str = ''
    point_of_hire: str = ''
    work_location: str = ''
    agreement_number: str = ''
    is_active: bool = True

    # Initial status flags
    deactivate: bool = False
    deactivation_reason: str = ''
    deactivation_category: str = ''
    deactivation_date: Optional[date] = None
    blacklist: bool = False
    blacklist_reason: str = ''
    violations: List[ViolationDTO] = field(default_factory=list)

    educations: List[EducationDTO] = field(default_factory=list)
    vaccinations: List[VaccinationDTO] = field(default_factory=list)
    documents: List[DocumentDTO] = field(default_factory=list)
    source: str = ChangeSource.CREATE


@dataclass
class EmployeeUpdateDTO:
    """
    DTO for editing an employment and its person.

    None means "leave unchanged"; fields listed in clear_fields are set
    to empty/NULL explicitly.
    """
    employee_id: int
    employee_number: Optional[str] = None
    company_id: Optional[int] = None

    national_id: Optional[str] = None
    family_card_number: Optional[str] = None
    citizenship: Optional[str] = None
    full_name: Optional[str] = None
    alias: Optional[str] = None
    gender: Optional[str] = None
    birth_place: Optional[str] = None
    date_of_birth: Optional[date] = None
    religion: Optional[str] = None
    marital_status: Optional[str] = None
    personal_email: Optional[str] = None
    phone_1: Optional[str] = None
    phone_2: Optional[str] = None
    mother_name: Optional[str] = None
    father_name: Optional[str] = None
    tax_number: Optional[str] = None
    bpjs_employment_number: Optional[str] = None
    bpjs_health_number: Optional[str] = None
    bpjs_pension_number: Optional[str] = None
    address: Optional[str] = None
    province: Optional[str] = None
    regency: Optional[str] = None
    district: Optional[str] = None
    village: Optional[str] = None
    postal_code: Optional[str] = None
    supporting_file_url: Optional[str] = None

    acr_number: Optional[str] = None
    department_id: Optional[int] = None
    section_id: Optional[int] = None
    position_id: Optional[int] = None
    hire_date: Optional[date] = None
    join_date: Optional[date] = None
    active_date: Optional[date] = None
    office_email: Optional[str] = None
    photo_url: Optional[str] = None
    grade: Optional[str] = None
    classification: Optional[str] = None
    work_roster: Optional[str] = None
    point_of_hire: Optional[str] = None
    work_location: Optional[str] = None
    agreement_number: Optional[str] = None

    is_active: Optional[bool] = None
    deactivation_reason: Optional[str] = None
    deactivation_date: Optional[date] = None

    educations: Optional[List[EducationDTO]] = None
    vaccinations: Optional[List[VaccinationDTO]] = None
    documents: Optional[List[DocumentDTO]] = None
    clear_fields: tuple = ()
    source: str = ChangeSource.EDIT


@dataclass
class StatusChangeDTO:
    """DTO for a status action on an employment (deactivate / blacklist / cite)"""
    employee_id: int
    action: str
    reason: str = ''
    category: str = ''
    effective_date: Optional[date] = None
    document_url: str = ''
    source: str = ChangeSource.LIST_ACTION


@dataclass
class MutationRequestCreateDTO:
    employee_number: str
    note: str = ''


@dataclass
class MutationDecisionDTO:
    request_id: int
    approve: bool
    note: str = ''

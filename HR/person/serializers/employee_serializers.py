"""
Serializers for Employee (employment) and its Person
"""
from rest_framework import serializers

from HR.person.models import (
    Employee, Person, Education, Vaccination, EmployeeDocument, NikNotice, Citizenship,
)
from HR.person.dtos import (
    EmployeeCreateDTO, EmployeeUpdateDTO, EducationDTO, VaccinationDTO, DocumentDTO,
    ViolationDTO, StatusChangeDTO,
)
from HR.person.services.status_service import StatusService


class EducationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Education
        fields = ['id', 'level', 'school_name', 'faculty', 'major', 'supporting_file_url']


class VaccinationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vaccination
        fields = ['id', 'vaccine_type', 'dose', 'vaccination_date', 'note', 'file_url']


class EmployeeDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeDocument
        fields = ['id', 'name', 'document_type', 'file_url']


class NikNoticeSerializer(serializers.ModelSerializer):
    class Meta:
        model = NikNotice
        fields = ['id', 'employee_number', 'employee', 'detected_status', 'message', 'created_at']
        read_only_fields = fields


class PersonSerializer(serializers.ModelSerializer):
    """Read serializer for Person model"""
    educations = EducationSerializer(many=True, read_only=True)

    class Meta:
        model = Person
        fields = [
            'id', 'national_id', 'family_card_number', 'citizenship',
            'full_name', 'alias', 'gender', 'birth_place', 'date_of_birth',
            'religion', 'marital_status', 'personal_email', 'phone_1', 'phone_2',
            'mother_name', 'father_name', 'tax_number',
            'bpjs_employment_number', 'bpjs_health_number', 'bpjs_pension_number',
            'address', 'province', 'regency', 'district', 'village', 'postal_code',
            'supporting_file_url', 'educations',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class EmployeeSerializer(serializers.ModelSerializer):
    """Read serializer for Employee model"""
    person = PersonSerializer(read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    section_name = serializers.CharField(source='section.name', read_only=True, default=None)
    position_name = serializers.CharField(source='position.name', read_only=True, default=None)
    vaccinations = VaccinationSerializer(many=True, read_only=True)
    documents = EmployeeDocumentSerializer(many=True, read_only=True)
    nik_notices = NikNoticeSerializer(many=True, read_only=True)

    class Meta:
        model = Employee
        fields = [
            'id', 'person',
            'employee_number', 'employee_code', 'acr_number',
            'company', 'company_name',
            'department', 'department_name',
            'section', 'section_name',
            'position', 'position_name',
            'hire_date', 'join_date', 'active_date',
            'office_email', 'photo_url', 'grade', 'classification', 'work_roster',
            'point_of_hire', 'work_location', 'agreement_number',
            'is_active', 'deactivation_date', 'deactivation_reason',
            'vaccinations', 'documents', 'nik_notices',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class EducationInputSerializer(serializers.Serializer):
    level = serializers.CharField(required=False, allow_blank=True, default='')
    school_name = serializers.CharField(required=False, allow_blank=True, default='')
    faculty = serializers.CharField(required=False, allow_blank=True, default='')
    major = serializers.CharField(required=False, allow_blank=True, default='')
    supporting_file_url = serializers.CharField(required=False, allow_blank=True, default='')


class VaccinationInputSerializer(serializers.Serializer):
    vaccine_type = serializers.CharField(required=False, allow_blank=True, default='')
    dose = serializers.CharField(required=False, allow_blank=True, default='')
    vaccination_date = serializers.DateField(required=False, allow_null=True, default=None)
    note = serializers.CharField(required=False, allow_blank=True, default='')
    file_url = serializers.CharField(required=False, allow_blank=True, default='')


class DocumentInputSerializer(serializers.Serializer):
    file_url = serializers.CharField(max_length=500)
    name = serializers.CharField(required=False, allow_blank=True, default='')
    document_type = serializers.CharField(required=False, allow_blank=True, default='')


class ViolationInputSerializer(serializers.Serializer):
    category = serializers.CharField(required=False, allow_blank=True, default='')
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    start_date = serializers.DateField(required=False, allow_null=True, default=None)
    document_url = serializers.CharField(required=False, allow_blank=True, default='')


def _text(**kwargs):
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, **kwargs)


def _date():
    return serializers.DateField(required=False, allow_null=True)


def _id():
    return serializers.IntegerField(required=False, allow_null=True)


class EmployeeFieldsSerializer(serializers.Serializer):
    """Fields shared by create and update, all optional here"""
    employee_number = _text(max_length=50)
    full_name = _text(max_length=200)
    company_id = _id()

    national_id = _text(max_length=50)
    family_card_number = _text(max_length=50)
    citizenship = serializers.ChoiceField(choices=Citizenship.choices, required=False, allow_null=True)
    alias = _text()
    gender = _text()
    birth_place = _text()
    date_of_birth = _date()
    religion = _text()
    marital_status = _text()
    personal_email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    phone_1 = _text()
    phone_2 = _text()
    mother_name = _text()
    father_name = _text()
    tax_number = _text()
    bpjs_employment_number = _text()
    bpjs_health_number = _text()
    bpjs_pension_number = _text()
    address = _text()
    province = _text()
    regency = _text()
    district = _text()
    village = _text()
    postal_code = _text(max_length=10)
    supporting_file_url = _text()

    acr_number = _text()
    department_id = _id()
    section_id = _id()
    position_id = _id()
    hire_date = _date()
    join_date = _date()
    active_date = _date()
    office_email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    photo_url = _text()
    grade = _text()
    classification = _text()
    work_roster = _text()
    point_of_hire = _text()
    work_location = _text()
    agreement_number = _text()
    is_active = serializers.BooleanField(required=False, allow_null=True)

    educations = EducationInputSerializer(many=True, required=False)
    vaccinations = VaccinationInputSerializer(many=True, required=False)
    documents = DocumentInputSerializer(many=True, required=False)


class EmployeeCreateSerializer(EmployeeFieldsSerializer):
    """Write serializer for hiring a NIK at a company"""
    employee_number = serializers.CharField(max_length=50)
    full_name = serializers.CharField(max_length=200)
    company_id = serializers.IntegerField()

    # Initial status flags
    deactivate = serializers.BooleanField(required=False, default=False)
    deactivation_reason = serializers.CharField(required=False, allow_blank=True, default='')
    deactivation_category = serializers.CharField(required=False, allow_blank=True, default='')
    deactivation_date = serializers.DateField(required=False, allow_null=True, default=None)
    blacklist = serializers.BooleanField(required=False, default=False)
    blacklist_reason = serializers.CharField(required=False, allow_blank=True, default='')
    violations = ViolationInputSerializer(many=True, required=False)

    def to_dto(self):
        data = dict(self.validated_data)
        educations = [EducationDTO(**item) for item in data.pop('educations', [])]
        vaccinations = [VaccinationDTO(**item) for item in data.pop('vaccinations', [])]
        documents = [DocumentDTO(**item) for item in data.pop('documents', [])]
        violations = [ViolationDTO(**item) for item in data.pop('violations', [])]
        if data.get('is_active') is None:
            data.pop('is_active', None)
        # null text is stored as blank
        values = {key: ('' if value is None and key in _TEXT_FIELDS else value) for key, value in data.items()}
        return EmployeeCreateDTO(
            educations=educations,
            vaccinations=vaccinations,
            documents=documents,
            violations=violations,
            **values,
        )


class EmployeeUpdateSerializer(EmployeeFieldsSerializer):
    """Write serializer for editing an employment; absent fields stay unchanged"""
    deactivation_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    deactivation_date = serializers.DateField(required=False, allow_null=True)

    def to_dto(self, employee_id):
        data = dict(self.validated_data)
        educations = data.pop('educations', None)
        vaccinations = data.pop('vaccinations', None)
        documents = data.pop('documents', None)
        cleared = tuple(key for key, value in data.items() if value is None)
        values = {key: value for key, value in data.items() if value is not None}
        return EmployeeUpdateDTO(
            employee_id=employee_id,
            educations=[EducationDTO(**item) for item in educations] if educations is not None else None,
            vaccinations=[VaccinationDTO(**item) for item in vaccinations] if vaccinations is not None else None,
            documents=[DocumentDTO(**item) for item in documents] if documents is not None else None,
            clear_fields=cleared,
            **values,
        )


_TEXT_FIELDS = {
    name for name, field in EmployeeFieldsSerializer._declared_fields.items()
    if isinstance(field, serializers.CharField)
}


class StatusActionSerializer(serializers.Serializer):
    """Deactivate, blacklist or cite an employment"""
    action = serializers.ChoiceField(choices=StatusService.ACTIONS)
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.CharField(required=False, allow_blank=True, default='')
    effective_date = serializers.DateField(required=False, allow_null=True, default=None)
    document_url = serializers.CharField(required=False, allow_blank=True, default='')

    def to_dto(self, employee_id):
        return StatusChangeDTO(employee_id=employee_id, **self.validated_data)


class EmployeeWriteResultSerializer(serializers.Serializer):
    employee = EmployeeSerializer()
    mobility_class = serializers.CharField(allow_null=True)
    warnings = serializers.ListField(child=serializers.CharField())


class NikLookupSerializer(serializers.Serializer):
    employee_number = serializers.CharField()
    exists = serializers.BooleanField()
    in_company = serializers.BooleanField()
    blacklisted = serializers.BooleanField()
    mobility_class = serializers.CharField(allow_null=True)
    origin_company_id = serializers.IntegerField(allow_null=True)
    companies = serializers.ListField(child=serializers.CharField())
    warnings = serializers.ListField(child=serializers.CharField())
    employee = EmployeeSerializer(allow_null=True)

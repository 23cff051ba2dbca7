"""
Shared builders for person domain tests.
"""
from datetime import date

from HR.person.actor import ActorContext
from HR.person.dtos import EmployeeCreateDTO
from HR.person.services.employee_service import EmployeeService
from HR.work_structures.models import Company, Department, Section, Position


OWNER = ActorContext(username='owner', is_privileged=True)


def national_id_for(number):
    """A valid 16-digit WNI national ID"""
    return f"{3201000000000000 + number}"


def family_card_for(number):
    return f"{3301000000000000 + number}"


def create_company(name, with_structure=False):
    """Company, optionally with one department / section / position"""
    company = Company.objects.create(name=name, code=name[:10].upper())
    if not with_structure:
        return company
    department = Department.objects.create(company=company, name='Operations')
    section = Section.objects.create(department=department, name='Mining')
    position = Position.objects.create(section=section, name='Operator')
    return company, department, section, position


def company_actor(company, **kwargs):
    """Non-privileged actor placed at the company level"""
    return ActorContext(username=f"hr-{company.name}", company_id=company.pk, **kwargs)


def hire_dto(employee_number, company, number=1, **overrides):
    values = {
        'employee_number': employee_number,
        'full_name': f"Employee {employee_number}",
        'company_id': company.pk,
        'national_id': national_id_for(number),
        'family_card_number': family_card_for(number),
        'citizenship': 'WNI',
        'active_date': date(2024, 6, 1),
    }
    values.update(overrides)
    return EmployeeCreateDTO(**values)


def hire(employee_number, company, number=1, actor=OWNER, **overrides):
    """Create an employment through the service and return the Employee"""
    return EmployeeService.create(actor, hire_dto(employee_number, company, number, **overrides)).employee

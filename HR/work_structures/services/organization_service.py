"""
Organization directory service.

Read-only helpers used by employee writes:
- validate_hierarchy(): department in company, section in department,
  position in section
- build_lookup(): one-shot name/id tables for bulk reconciliation so a batch
  does not hit the database per row
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from django.core.exceptions import ValidationError

from HR.work_structures.models import Company, Department, Section, Position


@dataclass
class OrganizationLookup:
    """
    In-memory snapshot of the directory.

    Name keys are matched exactly (case-sensitive), the way import files
    reference them.
    """
    companies_by_id: Dict[int, Company] = field(default_factory=dict)
    companies_by_name: Dict[str, Company] = field(default_factory=dict)
    department_ids: Dict[Tuple[int, str], int] = field(default_factory=dict)
    section_ids: Dict[Tuple[int, str], int] = field(default_factory=dict)
    position_ids: Dict[Tuple[int, str], int] = field(default_factory=dict)

    def resolve_company(self, company_id=None, company_name=None) -> Optional[Company]:
        if company_id:
            try:
                return self.companies_by_id.get(int(company_id))
            except (TypeError, ValueError):
                return None
        if company_name:
            return self.companies_by_name.get(str(company_name).strip())
        return None

    def resolve_department(self, company_id, name) -> Optional[int]:
        return self.department_ids.get((company_id, name)) if name else None

    def resolve_section(self, department_id, name) -> Optional[int]:
        return self.section_ids.get((department_id, name)) if name and department_id else None

    def resolve_position(self, section_id, name) -> Optional[int]:
        return self.position_ids.get((section_id, name)) if name and section_id else None


def _hierarchy_errors(company_id, department_id, section_id, position_id,
                      company_of_department, department_of_section, section_of_position):
    errors = {}
    if department_id and company_of_department(department_id) != company_id:
        errors['department_id'] = ["Department does not belong to the selected company."]
    if section_id:
        if not department_id:
            errors['section_id'] = ["Section requires a department."]
        elif department_of_section(section_id) != department_id:
            errors['section_id'] = ["Section does not belong to the selected department."]
    if position_id:
        if not section_id:
            errors['position_id'] = ["Position requires a section."]
        elif section_of_position(position_id) != section_id:
            errors['position_id'] = ["Position does not belong to the selected section."]
    return errors


class OrganizationService:
    """Service for organization directory lookups"""

    @staticmethod
    def validate_hierarchy(company_id, department_id=None, section_id=None, position_id=None):
        """
        Raise ValidationError unless each given level belongs to its parent.

        Args:
            company_id: Company id (required)
            department_id, section_id, position_id: optional ids
        """
        if not company_id or not Company.objects.filter(pk=company_id).exists():
            raise ValidationError({'company_id': ["Company not found."]})

        def company_of_department(pk):
            return Department.objects.filter(pk=pk).values_list('company_id', flat=True).first()

        def department_of_section(pk):
            return Section.objects.filter(pk=pk).values_list('department_id', flat=True).first()

        def section_of_position(pk):
            return Position.objects.filter(pk=pk).values_list('section_id', flat=True).first()

        errors = _hierarchy_errors(
            company_id, department_id, section_id, position_id,
            company_of_department, department_of_section, section_of_position,
        )
        if errors:
            raise ValidationError(errors)

    @staticmethod
    def build_lookup() -> OrganizationLookup:
        """
        Load the active directory into an OrganizationLookup (4 queries).

        Retired companies and units are left out, so rows naming them fail
        to resolve.
        """
        lookup = OrganizationLookup()

        for company in Company.objects.active():
            lookup.companies_by_id[company.pk] = company
            lookup.companies_by_name[company.name] = company

        for pk, company_id, name in Department.objects.active().values_list('pk', 'company_id', 'name'):
            lookup.department_ids[(company_id, name)] = pk

        for pk, department_id, name in Section.objects.active().values_list('pk', 'department_id', 'name'):
            lookup.section_ids[(department_id, name)] = pk

        for pk, section_id, name in Position.objects.active().values_list('pk', 'section_id', 'name'):
            lookup.position_ids[(section_id, name)] = pk

        return lookup

"""
Person Domain Models

Models:
- Person: One individual, deduplicated by national ID / family card number
- Education: Education history of a person
- Employee: One person's employment at one company (NIK unique per company)
- EmployeeNumberLock: Per-NIK row lock serializing hires of the same NIK
- StatusEvent: Status ledger (nonaktif / blacklist / pelanggaran)
- Placement: Organizational placement history with mobility class
- MutationRequest: Cross-company move approval workflow
- EmployeeAuditEntry: Append-only field-level change log
- Vaccination, EmployeeDocument: Records attached to an employment
- NikNotice: Blacklist / violation notice stored when a flagged NIK is hired
"""

from .choices import Citizenship, StatusType, MobilityClass, RequestStatus, ChangeSource
from .person import Person, Education
from .employee import Employee, EmployeeNumberLock
from .status_event import StatusEvent
from .placement import Placement
from .mutation_request import MutationRequest
from .audit_entry import EmployeeAuditEntry
from .employee_records import Vaccination, EmployeeDocument, NikNotice

__all__ = [
    'Citizenship',
    'StatusType',
    'MobilityClass',
    'RequestStatus',
    'ChangeSource',
    'Person',
    'Education',
    'Employee',
    'EmployeeNumberLock',
    'StatusEvent',
    'Placement',
    'MutationRequest',
    'EmployeeAuditEntry',
    'Vaccination',
    'EmployeeDocument',
    'NikNotice',
]

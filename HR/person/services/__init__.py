"""
Person Domain Services

Business logic for the employee record lifecycle.
All state transitions and workflows should go through these services.

Services:
- EmployeeService: Hire (create), edit (update), NIK lookup
- IdentityService: Person de-duplication and identity conflicts
- StatusService: Deactivate, blacklist, clear blacklist, cite
- MobilityService: Mobility class and cross-company gates
- MutationService: Mutation request workflow
- AuditService: Field-level audit trail
- EmployeeImportService: Bulk spreadsheet reconciliation
"""

from .audit_service import AuditService
from .identity_service import IdentityService
from .status_service import StatusService
from .mobility_service import MobilityService
from .mutation_service import MutationService
from .employee_service import EmployeeService
from .import_service import EmployeeImportService

__all__ = [
    'AuditService',
    'IdentityService',
    'StatusService',
    'MobilityService',
    'MutationService',
    'EmployeeService',
    'EmployeeImportService',
]

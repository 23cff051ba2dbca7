"""
Person Domain Serializers
"""
from .employee_serializers import (
    PersonSerializer,
    EducationSerializer,
    VaccinationSerializer,
    EmployeeDocumentSerializer,
    NikNoticeSerializer,
    EmployeeSerializer,
    EmployeeCreateSerializer,
    EmployeeUpdateSerializer,
    StatusActionSerializer,
    EmployeeWriteResultSerializer,
    NikLookupSerializer,
)
from .history_serializers import (
    StatusEventSerializer,
    PlacementSerializer,
    EmployeeAuditEntrySerializer,
)
from .mutation_serializers import (
    MutationRequestSerializer,
    MutationRequestItemSerializer,
    MutationRequestCreateSerializer,
    MutationDecisionSerializer,
)
from .import_serializers import (
    ImportUploadSerializer,
    ImportRowResultSerializer,
    ImportResultSerializer,
)

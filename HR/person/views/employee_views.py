from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from mitra_project.pagination import auto_paginate
from mitra_project.response_formatter import success_response, error_response

from HR.person.actor import ActorContext
from HR.person.models import Employee
from HR.person.services.employee_service import EmployeeService
from HR.person.services.status_service import StatusService
from HR.person.serializers import (
    EmployeeSerializer,
    EmployeeCreateSerializer,
    EmployeeUpdateSerializer,
    EmployeeWriteResultSerializer,
    NikLookupSerializer,
    StatusActionSerializer,
    StatusEventSerializer,
    PlacementSerializer,
    EmployeeAuditEntrySerializer,
)


@api_view(['GET', 'POST'])
@auto_paginate
def employee_list(request):
    """
    List employments or hire a NIK.

    GET /hr/person/employees/
    - Filters: search, company_id, department_id, employee_number, is_active
    - Only employments inside the caller's data scope

    POST /hr/person/employees/
    - Create an employment (new hire, rehire or approved transfer)
    - Response carries the mobility class and warnings about the NIK
    """
    actor = ActorContext.from_user(request.user)

    if request.method == 'GET':
        filters = {
            'search': request.query_params.get('search'),
            'company_id': request.query_params.get('company_id'),
            'department_id': request.query_params.get('department_id'),
            'employee_number': request.query_params.get('employee_number'),
            'is_active': request.query_params.get('is_active'),
        }
        employees = EmployeeService.list_employees(actor, filters)
        serializer = EmployeeSerializer(employees, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = EmployeeCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid employee data.", serializer.errors)

    result = EmployeeService.create(actor, serializer.to_dto())
    return success_response(
        EmployeeWriteResultSerializer(result).data,
        message="Employee created",
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['GET', 'PUT', 'PATCH'])
def employee_detail(request, pk):
    """
    Retrieve or edit an employment.

    PUT/PATCH only change the given fields; the company cannot change.
    """
    actor = ActorContext.from_user(request.user)

    if request.method == 'GET':
        employee = Employee.objects.get_for_actor(actor, pk)
        return Response(EmployeeSerializer(employee).data, status=status.HTTP_200_OK)

    serializer = EmployeeUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid employee data.", serializer.errors)

    result = EmployeeService.update(actor, serializer.to_dto(pk))
    return success_response(EmployeeWriteResultSerializer(result).data, message="Employee updated")


@api_view(['GET'])
def check_nik(request):
    """
    What the system knows about a NIK before hiring it.

    GET /hr/person/employees/check-nik/?nik=EMP001&company_id=2
    - company_id defaults to the caller's company
    """
    actor = ActorContext.from_user(request.user)
    company_id = request.query_params.get('company_id')
    result = EmployeeService.check_nik(
        actor,
        request.query_params.get('nik'),
        int(company_id) if company_id and company_id.isdigit() else None,
    )
    return Response(NikLookupSerializer(result).data, status=status.HTTP_200_OK)


@api_view(['POST'])
def employee_status(request, pk):
    """
    Status action on an employment.

    POST /hr/person/employees/<id>/status/
    {"action": "deactivate" | "blacklist" | "cite", "reason": "...", "category": "...",
     "effective_date": "2025-01-01"}
    """
    actor = ActorContext.from_user(request.user)
    serializer = StatusActionSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid status action.", serializer.errors)

    event = StatusService.apply(actor, serializer.to_dto(pk))
    return success_response(
        StatusEventSerializer(event).data,
        message=f"Status {event.status_type} recorded",
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
def clear_blacklist(request, pk):
    """Owner only: close the open blacklist of an employment."""
    actor = ActorContext.from_user(request.user)
    event = StatusService.clear_blacklist(actor, pk)
    return success_response(StatusEventSerializer(event).data, message="Blacklist cleared")


@api_view(['GET'])
def employee_history(request, pk):
    """Status events, placements and audit entries of an employment."""
    actor = ActorContext.from_user(request.user)
    history = EmployeeService.get_history(actor, pk)
    return Response({
        'employee': EmployeeSerializer(history['employee']).data,
        'status_events': StatusEventSerializer(history['status_events'], many=True).data,
        'placements': PlacementSerializer(history['placements'], many=True).data,
        'audit_entries': EmployeeAuditEntrySerializer(history['audit_entries'], many=True).data,
    }, status=status.HTTP_200_OK)

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from mitra_project.pagination import auto_paginate
from mitra_project.response_formatter import success_response, error_response

from HR.person.actor import ActorContext
from HR.person.services.mutation_service import MutationService
from HR.person.serializers import (
    MutationRequestSerializer,
    MutationRequestItemSerializer,
    MutationRequestCreateSerializer,
    MutationDecisionSerializer,
)


@api_view(['GET', 'POST'])
@auto_paginate
def mutation_list(request):
    """
    Mutation requests.

    GET /hr/person/mutations/?status=pending
    - Incoming (your company is the origin) and outgoing requests,
      each flagged with direction and can_decide

    POST /hr/person/mutations/
    - {"employee_number": "EMP001", "note": "..."}: ask to move the NIK into your company
    """
    actor = ActorContext.from_user(request.user)

    if request.method == 'GET':
        items = MutationService.list_for_actor(actor, request.query_params.get('status'))
        requests = []
        for item in items:
            item.request.direction = item.direction
            item.request.can_decide = item.can_decide
            requests.append(item.request)
        serializer = MutationRequestItemSerializer(requests, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = MutationRequestCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid mutation request.", serializer.errors)

    mutation = MutationService.submit(actor, serializer.to_dto())
    return success_response(
        MutationRequestSerializer(mutation).data,
        message="Mutation request submitted",
        status_code=status.HTTP_201_CREATED,
    )


def _decide(request, pk, approve):
    actor = ActorContext.from_user(request.user)
    serializer = MutationDecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    note = serializer.validated_data['note']
    if approve:
        mutation = MutationService.approve(actor, pk, note)
    else:
        mutation = MutationService.reject(actor, pk, note)
    return success_response(
        MutationRequestSerializer(mutation).data,
        message=f"Mutation request {mutation.status}",
    )


@api_view(['POST'])
def mutation_approve(request, pk):
    return _decide(request, pk, approve=True)


@api_view(['POST'])
def mutation_reject(request, pk):
    return _decide(request, pk, approve=False)

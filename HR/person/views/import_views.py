from django.http import HttpResponse
from rest_framework.decorators import api_view, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework import status

from mitra_project.response_formatter import success_response, error_response

from HR.person.actor import ActorContext
from HR.person.services import import_io
from HR.person.services.import_service import EmployeeImportService, ImportResult
from HR.person.serializers import ImportUploadSerializer, ImportResultSerializer, ImportRowResultSerializer


def _read_upload(request):
    serializer = ImportUploadSerializer(data=request.data)
    if not serializer.is_valid():
        return None, error_response("Invalid upload.", serializer.errors)
    return import_io.read_rows(serializer.validated_data['file']), None


@api_view(['POST'])
@parser_classes([MultiPartParser, FormParser])
def import_preview(request):
    """
    Classify the rows of an uploaded spreadsheet without writing anything.

    POST /hr/person/employees/import/preview/   (multipart, field "file")
    """
    actor = ActorContext.from_user(request.user)
    rows, error = _read_upload(request)
    if error is not None:
        return error

    results = EmployeeImportService.classify(rows, actor)
    summary = {}
    for result in results:
        summary[result.action] = summary.get(result.action, 0) + 1
    return success_response({
        'summary': summary,
        'rows': ImportRowResultSerializer(results, many=True).data,
    })


@api_view(['POST'])
@parser_classes([MultiPartParser, FormParser])
def import_confirm(request):
    """
    Apply an uploaded spreadsheet: valid rows are written, invalid rows skipped.

    POST /hr/person/employees/import/   (multipart, field "file")
    """
    actor = ActorContext.from_user(request.user)
    rows, error = _read_upload(request)
    if error is not None:
        return error

    result: ImportResult = EmployeeImportService.apply(rows, actor)
    return success_response(
        ImportResultSerializer(result).data,
        message=f"{result.inserted} inserted, {result.updated} updated, {result.skipped} skipped",
        status_code=status.HTTP_200_OK,
    )


@api_view(['GET'])
def import_template(request):
    """Download the .xlsx import template."""
    response = HttpResponse(
        import_io.build_template(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    )
    response['Content-Disposition'] = 'attachment; filename="employee_import_template.xlsx"'
    return response

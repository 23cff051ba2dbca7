"""
Read serializers for the status ledger, placement history and audit trail
"""
from rest_framework import serializers

from HR.person.models import StatusEvent, Placement, EmployeeAuditEntry


class StatusEventSerializer(serializers.ModelSerializer):
    is_open = serializers.BooleanField(read_only=True)

    class Meta:
        model = StatusEvent
        fields = [
            'id', 'employee', 'employee_number', 'status_type', 'category', 'reason',
            'start_date', 'end_date', 'is_open', 'document_url', 'created_at', 'created_by'
        ]
        read_only_fields = fields


class PlacementSerializer(serializers.ModelSerializer):
    origin_company_name = serializers.CharField(source='origin_company.name', read_only=True, default=None)
    destination_company_name = serializers.CharField(source='destination_company.name', read_only=True)

    class Meta:
        model = Placement
        fields = [
            'id', 'employee', 'employee_number',
            'origin_company', 'origin_company_name',
            'destination_company', 'destination_company_name',
            'department', 'section', 'position',
            'start_date', 'mobility_class', 'source', 'note', 'created_at'
        ]
        read_only_fields = fields


class EmployeeAuditEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeAuditEntry
        fields = [
            'id', 'employee', 'employee_number', 'field_name', 'old_value', 'new_value',
            'changed_by', 'actor_name', 'changed_at', 'source'
        ]
        read_only_fields = fields

"""
Serializers for MutationRequest
"""
from rest_framework import serializers

from HR.person.models import MutationRequest
from HR.person.dtos import MutationRequestCreateDTO


class MutationRequestSerializer(serializers.ModelSerializer):
    """Read serializer for MutationRequest model"""
    full_name = serializers.CharField(source='person.full_name', read_only=True)
    origin_company_name = serializers.CharField(source='origin_company.name', read_only=True)
    destination_company_name = serializers.CharField(source='destination_company.name', read_only=True)

    class Meta:
        model = MutationRequest
        fields = [
            'id', 'employee', 'employee_number', 'full_name',
            'origin_company', 'origin_company_name',
            'destination_company', 'destination_company_name',
            'status', 'note',
            'requested_at', 'requested_by', 'decided_at', 'decided_by',
            'consumed_at', 'consumed_by_employee'
        ]
        read_only_fields = fields


class MutationRequestItemSerializer(MutationRequestSerializer):
    """Request as seen by one actor"""
    direction = serializers.SerializerMethodField()
    can_decide = serializers.SerializerMethodField()

    class Meta(MutationRequestSerializer.Meta):
        fields = MutationRequestSerializer.Meta.fields + ['direction', 'can_decide']
        read_only_fields = fields

    def get_direction(self, obj):
        return getattr(obj, 'direction', None)

    def get_can_decide(self, obj):
        return getattr(obj, 'can_decide', False)


class MutationRequestCreateSerializer(serializers.Serializer):
    employee_number = serializers.CharField(max_length=50)
    note = serializers.CharField(required=False, allow_blank=True, default='')

    def to_dto(self):
        return MutationRequestCreateDTO(**self.validated_data)


class MutationDecisionSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, default='')

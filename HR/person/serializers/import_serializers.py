"""
Serializers for the bulk employee import
"""
from rest_framework import serializers


class ImportUploadSerializer(serializers.Serializer):
    file = serializers.FileField()

    def validate_file(self, value):
        if not value.name.lower().endswith(('.csv', '.xlsx', '.xls')):
            raise serializers.ValidationError("Unsupported file format. Please upload .csv, .xlsx, or .xls file")
        return value


class ImportRowResultSerializer(serializers.Serializer):
    row = serializers.IntegerField()
    employee_number = serializers.CharField()
    company = serializers.CharField()
    company_id = serializers.IntegerField(allow_null=True)
    action = serializers.CharField()
    mobility_class = serializers.CharField(allow_null=True)
    employee_id = serializers.IntegerField(allow_null=True)
    errors = serializers.ListField(child=serializers.CharField())


class ImportResultSerializer(serializers.Serializer):
    inserted = serializers.IntegerField()
    updated = serializers.IntegerField()
    skipped = serializers.IntegerField()
    errors = serializers.ListField(child=serializers.CharField())
    rows = ImportRowResultSerializer(many=True)

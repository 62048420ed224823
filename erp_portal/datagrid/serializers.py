from rest_framework import serializers

from .models import GridLayout
from .table import PAGE_SIZE_OPTIONS


class GridLayoutSerializer(serializers.ModelSerializer):
    class Meta:
        model = GridLayout
        fields = ['id', 'module_id', 'transaction_id', 'grid_name', 'sort', 'column_visibility',
                  'column_sizing', 'column_order', 'page_size', 'updated_at']
        read_only_fields = ['id', 'module_id', 'transaction_id', 'grid_name', 'updated_at']

    def validate_sort(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Sort must be a list of {id, desc} entries")
        for entry in value:
            if not isinstance(entry, dict) or not isinstance(entry.get('id'), str):
                raise serializers.ValidationError("Each sort entry needs a column id")
            if not isinstance(entry.get('desc', False), bool):
                raise serializers.ValidationError("Sort direction 'desc' must be true or false")
        return [{'id': entry['id'], 'desc': entry.get('desc', False)} for entry in value]

    def validate_column_visibility(self, value):
        if not isinstance(value, dict) or not all(isinstance(v, bool) for v in value.values()):
            raise serializers.ValidationError("Column visibility must map column ids to true/false")
        return value

    def validate_column_sizing(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Column sizing must map column ids to widths")
        for key, width in value.items():
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                raise serializers.ValidationError(f"Width of '{key}' must be a positive integer")
        return value

    def validate_column_order(self, value):
        if not isinstance(value, list) or not all(isinstance(key, str) for key in value):
            raise serializers.ValidationError("Column order must be a list of column ids")
        if len(set(value)) != len(value):
            raise serializers.ValidationError("Column order contains duplicates")
        return value


class TableRequestSerializer(serializers.Serializer):
    """Columns, rows and settings of a table plus an optional saved layout reference"""
    columns = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    rows = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    settings = serializers.DictField(required=False, default=dict)
    accessorId = serializers.CharField(required=False, default='id')
    moduleId = serializers.IntegerField(required=False, min_value=1)
    transactionId = serializers.IntegerField(required=False, min_value=1)
    gridName = serializers.CharField(required=False, max_length=100)

    def validate_columns(self, value):
        for column in value:
            if not (column.get('key') or column.get('accessorKey')):
                raise serializers.ValidationError("Every column needs a key")
        return value

    def validate(self, attrs):
        layout_keys = [key for key in ('moduleId', 'transactionId', 'gridName') if key in attrs]
        if layout_keys and len(layout_keys) != 3:
            raise serializers.ValidationError("moduleId, transactionId and gridName go together")
        return attrs


class TableQuerySerializer(TableRequestSerializer):
    search = serializers.CharField(required=False, allow_blank=True, default='')
    sorting = serializers.ListField(child=serializers.DictField(), required=False)
    filters = serializers.DictField(required=False, default=dict)
    page = serializers.IntegerField(required=False, default=1)
    pageSize = serializers.ChoiceField(choices=PAGE_SIZE_OPTIONS, required=False)
    permissions = serializers.DictField(child=serializers.BooleanField(), required=False)
    customActions = serializers.ListField(child=serializers.DictField(), required=False, default=list)


class CellEditSerializer(TableRequestSerializer):
    rowId = serializers.CharField()
    key = serializers.CharField()
    value = serializers.JSONField(allow_null=True)


class ReorderSerializer(TableRequestSerializer):
    fromIndex = serializers.IntegerField(required=False, min_value=0)
    toIndex = serializers.IntegerField(min_value=0)
    column = serializers.CharField(required=False)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if 'column' not in attrs and 'fromIndex' not in attrs:
            raise serializers.ValidationError("Give fromIndex to move a row or column to move a column")
        return attrs

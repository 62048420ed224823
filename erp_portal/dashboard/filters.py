"""Query-string filters shared by the dashboard routes"""
import hashlib
import json
from dataclasses import asdict, dataclass, field
from typing import List

from rest_framework import serializers

PERIODS = ('mtd', 'qtd', 'ytd', 'last-12-months', 'custom')
COMPARISON_PERIODS = ('prior-period', 'prior-year', 'budget')


class CommaListField(serializers.Field):
    """``a,b,c`` in the query string -> ['a', 'b', 'c']"""

    def to_internal_value(self, data):
        if isinstance(data, (list, tuple)):
            items = data
        else:
            items = str(data).split(',')
        return sorted({item.strip() for item in items if item and item.strip()})

    def to_representation(self, value):
        return ','.join(value)


@dataclass(frozen=True)
class DashboardFilters:
    period: str = 'ytd'
    comparison_period: str = 'prior-year'
    business_units: List[str] = field(default_factory=list)
    product_lines: List[str] = field(default_factory=list)
    geography: List[str] = field(default_factory=list)
    entities: List[str] = field(default_factory=list)
    salesperson: List[str] = field(default_factory=list)
    customer: List[str] = field(default_factory=list)

    def as_dict(self):
        return asdict(self)

    def seed(self):
        """Stable seed so the same filters always produce the same numbers"""
        encoded = json.dumps(self.as_dict(), sort_keys=True).encode()
        return int(hashlib.md5(encoded).hexdigest()[:12], 16)

    def applied(self):
        """camelCase echo of the filters for the response payload"""
        return {
            'period': self.period,
            'comparisonPeriod': self.comparison_period,
            'businessUnits': self.business_units,
            'productLines': self.product_lines,
            'geography': self.geography,
            'entities': self.entities,
            'salesperson': self.salesperson,
            'customer': self.customer,
        }


class DashboardFilterSerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=PERIODS, required=False, default='ytd')
    comparisonPeriod = serializers.ChoiceField(choices=COMPARISON_PERIODS, required=False, default='prior-year')
    businessUnits = CommaListField(required=False, default=list)
    productLines = CommaListField(required=False, default=list)
    geography = CommaListField(required=False, default=list)
    entities = CommaListField(required=False, default=list)
    salesperson = CommaListField(required=False, default=list)
    customer = CommaListField(required=False, default=list)

    def get_filters(self):
        data = self.validated_data
        return DashboardFilters(
            period=data['period'],
            comparison_period=data['comparisonPeriod'],
            business_units=data['businessUnits'],
            product_lines=data['productLines'],
            geography=data['geography'],
            entities=data['entities'],
            salesperson=data['salesperson'],
            customer=data['customer'],
        )

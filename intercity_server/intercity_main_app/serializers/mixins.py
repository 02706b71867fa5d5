from rest_framework import serializers


class StrictFieldsMixin:
    """Reject payload keys the serializer does not declare"""

    def to_internal_value(self, data):
        if isinstance(data, dict):
            unknown = sorted(set(data) - set(self.fields))
            if unknown:
                raise serializers.ValidationError({name: ['Unknown field.'] for name in unknown})
        return super().to_internal_value(data)


class DateRangeMixin:
    """Optional start_date/end_date filters that must not be inverted"""

    def validate(self, data):
        start, end = data.get('start_date'), data.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'end_date': ['Must be on or after start_date.']})
        return super().validate(data)

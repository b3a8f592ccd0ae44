from rest_framework import serializers

from .models import ManagerRequest


class ManagerRequestSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    requester_id = serializers.IntegerField(source='requester.id', read_only=True)
    reviewed_by_email = serializers.EmailField(
        source='reviewed_by.email', read_only=True, allow_null=True, default=None
    )

    class Meta:
        model = ManagerRequest
        fields = [
            'id',
            'requester_id',
            'name',
            'email',
            'status',
            'status_display',
            'reviewed_by_email',
            'reviewed_at',
            'created_at',
        ]
        read_only_fields = fields


class ManagerRequestCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    email = serializers.EmailField(required=False, allow_blank=True, default='')

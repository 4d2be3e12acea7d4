from rest_framework import serializers

from core.partners.models import Partner


class PartnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Partner
        fields = ["id", "name", "is_active", "created_at"]


class PartnerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=120)


class PartnerUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, min_length=2, max_length=120)
    is_active = serializers.BooleanField(required=False)

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from core.iam.models import Role


def user_claims(user) -> dict:
    return {
        "id": str(user.id),
        "role": user.role,
        "partner_id": str(user.partner_id) if user.partner_id else None,
    }


class LoginSerializer(TokenObtainPairSerializer):
    """
    email + password -> access/refresh pair carrying role and partner_id.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["partner_id"] = str(user.partner_id) if user.partner_id else None
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = user_claims(self.user)
        return data


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = ["id", "role", "partner_id", "name", "email", "is_active", "created_at"]


class UserCreateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices)
    partner_id = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField(min_length=2, max_length=120)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    is_active = serializers.BooleanField(required=False, default=True)

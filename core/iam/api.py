from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from core.audit.utils import audit
from core.common.exceptions import BadRequest, Conflict, NotFound
from core.iam.models import Role
from core.iam.permissions import IsMaster
from core.iam.serializers import (
    LoginSerializer,
    RefreshSerializer,
    UserCreateSerializer,
    UserSerializer,
    user_claims,
)
from core.iam.tenancy import Actor, resolve_partner_id
from core.partners.models import Partner

User = get_user_model()


class LoginView(TokenObtainPairView):
    """
    POST /v1/auth/login
    Body: { "email": "...", "password": "..." }
    """
    serializer_class = LoginSerializer


@api_view(["POST"])
@permission_classes([AllowAny])
def refresh_session(request):
    """
    POST /v1/auth/refresh
    Body: { "refresh": "<token>" }

    Re-reads the user so role/partner changes and deactivation take effect.
    """
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)

    try:
        old = RefreshToken(s.validated_data["refresh"])
    except TokenError:
        raise AuthenticationFailed("Invalid or expired refresh token")

    user = User.objects.filter(id=old.get(jwt_settings.USER_ID_CLAIM)).first()
    if not user or not user.is_active:
        raise AuthenticationFailed("User inactive or missing")

    refresh = LoginSerializer.get_token(user)
    return Response({
        "access": str(refresh.access_token),
        "refresh": str(refresh),
        "user": user_claims(user),
    })


@api_view(["POST"])
@permission_classes([AllowAny])
def logout(request):
    # tokens are stateless; the client drops them
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated, IsMaster])
def users(request):
    """
    GET  /v1/users?partner_id=<uuid optional>
    POST /v1/users
    MASTER only.
    """
    if request.method == "GET":
        qs = User.objects.all().order_by("-created_at")
        partner_id = resolve_partner_id(Actor.from_user(request.user), request.query_params.get("partner_id"))
        if partner_id:
            qs = qs.filter(partner_id=partner_id)
        return Response({"items": UserSerializer(qs, many=True).data})

    s = UserCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = s.validated_data

    role = data["role"]
    partner_id = data.get("partner_id")

    if role == Role.PARTNER and not partner_id:
        raise BadRequest("partner_id is required for PARTNER users")
    if role == Role.MASTER and partner_id:
        raise BadRequest("MASTER users cannot have a partner_id")
    if partner_id and not Partner.objects.filter(id=partner_id).exists():
        raise NotFound("Partner not found")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=data["email"],
                password=data["password"],
                name=data["name"],
                role=role,
                partner_id=partner_id if role == Role.PARTNER else None,
                is_active=data.get("is_active", True),
            )
    except IntegrityError:
        raise Conflict("A user with this email already exists")

    audit(
        user.partner_id,
        "user.created",
        "user",
        user.id,
        actor_user_id=request.user.id,
        data={"role": user.role, "email": user.email},
    )
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

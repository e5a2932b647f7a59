from drf_spectacular.utils import extend_schema
from rest_framework import serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.services.identity import presentation_for, seller_identity_for

# ---------------------------
# SERIALIZER
# ---------------------------


class MeSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    username = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField()
    clinic_name = serializers.CharField()
    currency = serializers.CharField()
    logo_url = serializers.CharField(allow_blank=True)
    seller_identity = serializers.CharField()


# ---------------------------
# VIEW
# ---------------------------


class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MeSerializer

    @extend_schema(
        responses={200: MeSerializer},
        description="Current operator profile plus the clinic presentation used on invoices",
    )
    def get(self, request):
        user = request.user
        presentation = presentation_for(user)

        return Response(
            {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "role": user.role,
                "clinic_name": presentation.clinic_name,
                "currency": presentation.currency,
                "logo_url": user.logo_url,
                "seller_identity": seller_identity_for(user),
            }
        )

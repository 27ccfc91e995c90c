from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .serializers import LoginSerializer, LogoutSerializer, StaffSerializer
from .services import (
    sign_in,
    sign_out,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
)


class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class SignInResponseSerializer(serializers.Serializer):
    user = StaffSerializer()
    tokens = TokenPairSerializer()


class DetailSerializer(serializers.Serializer):
    detail = serializers.CharField()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    request=LoginSerializer,
    responses={
        200: SignInResponseSerializer,
        400: ErrorSerializer,
        401: ErrorSerializer,
        403: ErrorSerializer,
    },
    description="Sign a staff member in and return a JWT pair.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        session = sign_in(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'user': StaffSerializer(session['user']).data,
        'tokens': session['tokens'],
    })


@extend_schema(
    request=LogoutSerializer,
    responses={200: DetailSerializer, 400: ErrorSerializer},
    description="Sign out. A refresh token, when sent, must be valid.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    serializer = LogoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        sign_out(user=request.user, refresh_token=serializer.validated_data.get('refresh', ''))
    except InvalidTokenError:
        return Response({'error': 'Invalid refresh token'}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'detail': 'Signed out'})


@extend_schema(
    responses={200: StaffSerializer},
    description="Profile of the signed-in staff member.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    return Response(StaffSerializer(request.user).data)

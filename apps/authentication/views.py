"""
Authentication views
"""
from datetime import datetime

from django.core.cache import cache
from django.db import connection, DatabaseError
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response

from .serializers import (
    UserSerializer,
    RegisterSerializer,
    LoginSerializer,
    AuthTokenSerializer,
    HealthCheckSerializer,
)
from .services.account_service import account_service


@extend_schema(
    summary="Register",
    description="Create a customer or barber account and return an access token",
    request=RegisterSerializer,
    responses={
        201: AuthTokenSerializer,
        400: OpenApiResponse(description="Invalid input"),
        409: OpenApiResponse(description="Email already registered")
    },
    tags=['Authentication']
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register(request):
    """
    Register a new account
    """
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = account_service.register(**serializer.validated_data)
    return Response(
        {'token': result['token'], 'user': UserSerializer(result['user']).data},
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    summary="Login",
    description="Exchange email and password for an access token",
    request=LoginSerializer,
    responses={
        200: AuthTokenSerializer,
        401: OpenApiResponse(description="Invalid credentials")
    },
    tags=['Authentication']
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    """
    Log in with email and password
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = account_service.login(**serializer.validated_data)
    return Response({'token': result['token'], 'user': UserSerializer(result['user']).data})


@extend_schema(
    summary="Get current user",
    description="Retrieve the currently authenticated user with their profile",
    responses={
        200: UserSerializer,
        401: OpenApiResponse(description="Unauthorized")
    },
    tags=['Authentication']
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """
    Get current authenticated user
    """
    serializer = UserSerializer(request.user)
    return Response(serializer.data)


@extend_schema(
    summary="Health check",
    description="Check API health status including database and cache connectivity",
    responses={200: HealthCheckSerializer},
    tags=['System']
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """
    Health check endpoint
    """
    # Check database
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        db_status = "healthy"
    except DatabaseError as e:
        db_status = f"unhealthy: {str(e)}"

    # Check cache
    try:
        cache.set('health_check', 'ok', 10)
        cache_status = "healthy" if cache.get('health_check') == 'ok' else "unhealthy"
    except Exception as e:
        cache_status = f"unhealthy: {str(e)}"

    return Response({
        'status': 'healthy',
        'timestamp': datetime.now().isoformat(),
        'database': db_status,
        'cache': cache_status
    })

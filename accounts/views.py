import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import CustomTokenObtainPairSerializer, RegisterSerializer, get_tokens_for_user

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    Registers a donor or requester and returns JWT tokens
    """
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()

    logger.info(f"Registered {user.user_type} account {user.username}")
    return Response({
        'user_id': user.id,
        'username': user.username,
        'user_type': user.user_type,
        'tokens': get_tokens_for_user(user),
    }, status=status.HTTP_201_CREATED)


class LoginView(TokenObtainPairView):
    """Username or email + password -> JWT pair"""
    serializer_class = CustomTokenObtainPairSerializer

# booking/auth_views.py
#
# Session login for clients. The booking endpoints read request.user from the
# session cookie set here; there is no token auth.
#
import logging

from django.contrib.auth import authenticate, login, logout
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import LoginSerializer, SignupSerializer

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class ClientSignupView(APIView):
    """
    POST /api/auth/signup
    {"username": "joao", "password": "...", "name": "João Silva", "email": "joao@example.com"}
    Creates the account and opens a session for it.
    """
    authentication_classes = []

    def post(self, request):
        payload = SignupSerializer(data=request.data)
        if not payload.is_valid():
            return Response(payload.errors, status=status.HTTP_400_BAD_REQUEST)

        user = payload.save()
        login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        logger.info("Client account %s created", user.username)
        return Response({"detail": "Signup successful.", "id": user.pk}, status=status.HTTP_201_CREATED)


@method_decorator(csrf_exempt, name="dispatch")
class ClientLoginView(APIView):
    """
    POST /api/auth/login  {"username": "joao", "password": "..."}
    """
    authentication_classes = []

    def post(self, request):
        payload = LoginSerializer(data=request.data)
        if not payload.is_valid():
            return Response(payload.errors, status=status.HTTP_400_BAD_REQUEST)

        user = authenticate(request, **payload.validated_data)
        if user is None:
            logger.info("Failed login for %s", payload.validated_data["username"])
            return Response({"detail": "Invalid credentials."}, status=status.HTTP_400_BAD_REQUEST)

        login(request, user)
        return Response({"detail": "Logged in."})


class ClientLogoutView(APIView):
    """POST /api/auth/logout"""

    def post(self, request):
        logout(request)
        return Response({"detail": "Logged out."})

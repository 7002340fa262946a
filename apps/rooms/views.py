"""Room API views."""

from __future__ import annotations

from django.db.models import ProtectedError, Q  # type: ignore
from rest_framework import status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsAdminRoleOrReadOnly

from .models import Room
from .serializers import RoomSerializer


class RoomViewSet(viewsets.ModelViewSet):
    """Public room catalogue; administrators manage it."""

    queryset = Room.objects.all()
    serializer_class = RoomSerializer
    permission_classes = [IsAdminRoleOrReadOnly]
    filterset_fields = ["status", "building"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        search = self.request.query_params.get("search")
        if search:
            qs = qs.filter(
                Q(name__icontains=search) | Q(code__icontains=search) | Q(building__icontains=search)
            )
        return qs

    def destroy(self, request, *args, **kwargs):  # type: ignore
        room: Room = self.get_object()
        try:
            room.delete()
        except ProtectedError:
            return Response(
                {"detail": "Room has bookings and cannot be deleted. Set it to maintenance instead."},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

"""API views for the booking domain."""

from __future__ import annotations

from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.identity import CallerIdentity
from apps.users.permissions import IsAdminRole
from shared.application.message_bus import message_bus

from .application.command_handlers import (
    CancelBookingCommand,
    CheckInBookingCommand,
    CreateBookingCommand,
    ProcessBookingCommand,
)
from .application.queries import SCOPE_ALL, SCOPE_OWN, list_bookings
from .filters import BookingFilter
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    CheckInSerializer,
    ProcessBookingSerializer,
    ScheduleEntrySerializer,
    ScheduleQuerySerializer,
    SlotQuerySerializer,
    SlotSerializer,
)
from .services import generate_slots, room_schedule


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Room booking requests and their lifecycle.

    Bookings are never updated or deleted through the API; every status
    change goes through a lifecycle command.
    """

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = BookingFilter

    @property
    def caller(self) -> CallerIdentity:
        return CallerIdentity.from_user(self.request.user)

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "process":
            return ProcessBookingSerializer
        if self.action == "check_in":
            return CheckInSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        if getattr(self, "swagger_fake_view", False):
            return Booking.objects.none()
        # Admins may open any booking; lists stay scoped to the caller
        if self.action in ("manage", "retrieve", "process", "cancel") and self.caller.is_admin:
            return list_bookings(self.caller, scope=SCOPE_ALL)
        return list_bookings(self.caller, scope=SCOPE_OWN)

    def _render(self, booking, code=status.HTTP_200_OK) -> Response:
        scope = SCOPE_ALL if self.caller.is_admin else SCOPE_OWN
        booking = list_bookings(self.caller, scope=scope).get(pk=booking.pk)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data, status=code)

    @extend_schema(request=BookingCreateSerializer, responses={201: BookingSerializer})
    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            CreateBookingCommand(
                caller=self.caller,
                room_id=data["room"].id,
                start_time=data["start_time"],
                end_time=data["end_time"],
                purpose=data["purpose"],
                audience_count=data["audience_count"],
            )
        )
        return self._render(booking, code=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: BookingSerializer})
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        booking = message_bus.handle_command(CancelBookingCommand(caller=self.caller, booking_id=booking.id))
        return self._render(booking)

    @extend_schema(responses={200: BookingSerializer(many=True)})
    @action(detail=False, methods=["get"], permission_classes=[IsAdminRole])
    def manage(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(BookingSerializer(page, many=True).data)
        return Response(BookingSerializer(queryset, many=True).data)

    @extend_schema(request=ProcessBookingSerializer, responses={200: BookingSerializer})
    @action(detail=True, methods=["post"], permission_classes=[IsAdminRole])
    def process(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            ProcessBookingCommand(
                caller=self.caller,
                booking_id=booking.id,
                decision=serializer.validated_data["status"],
                rejection_reason=serializer.validated_data["rejection_reason"],
            )
        )
        return self._render(booking)

    @extend_schema(request=CheckInSerializer, responses={200: BookingSerializer})
    @action(detail=False, methods=["post"], url_path="check-in")
    def check_in(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = message_bus.handle_command(
            CheckInBookingCommand(caller=self.caller, token=serializer.validated_data["qr_token"])
        )
        return Response(
            {
                "booking": BookingSerializer(result.booking, context=self.get_serializer_context()).data,
                "checked_in_at": result.checkin.checked_in_at,
            }
        )


class PublicScheduleView(APIView):
    """Approved and checked-in bookings of a room, without private details."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(parameters=[ScheduleQuerySerializer], responses={200: ScheduleEntrySerializer(many=True)})
    def get(self, request, room_id):  # type: ignore
        query = ScheduleQuerySerializer(data=request.query_params.dict())
        query.is_valid(raise_exception=True)
        entries = room_schedule(room_id, query.validated_data["start"], query.validated_data["end"])
        return Response(ScheduleEntrySerializer(entries, many=True).data)


class AvailableSlotsView(APIView):
    """Bookable start times of a room for one day."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(parameters=[SlotQuerySerializer], responses={200: SlotSerializer(many=True)})
    def get(self, request, room_id):  # type: ignore
        query = SlotQuerySerializer(data=request.query_params.dict())
        query.is_valid(raise_exception=True)
        slots = generate_slots(
            room_id,
            query.validated_data["date"],
            query.validated_data["duration"],
            include_blocked=query.validated_data["include_blocked"],
        )
        return Response(SlotSerializer(slots, many=True).data)

# ============================= PARKING VIEWS =============================
from rest_framework import viewsets, mixins, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from utils.permissions import IsAdminRole
from .models import ParkingRequest, ControlItem
from .serializers import (
    ParkingRequestCreateSerializer,
    ParkingRequestSerializer,
    ParkingDecisionSerializer,
    ControlItemSerializer,
    ControlItemValueSerializer,
)
from .filters import ParkingRequestFilter
from .services import AllocationService


class ParkingRequestViewSet(mixins.CreateModelMixin,
                            mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            viewsets.GenericViewSet):
    """Parking slot requests and admin allocation"""

    queryset = ParkingRequest.objects.select_related('user')
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter
    ]
    filterset_class = ParkingRequestFilter
    search_fields = ['user__name', 'user__email', 'slot_number']
    ordering_fields = ['created_at', 'status', 'slot_number']
    ordering = ['-created_at']

    def get_serializer_class(self):
        if self.action == 'create':
            return ParkingRequestCreateSerializer
        if self.action == 'decide':
            return ParkingDecisionSerializer
        return ParkingRequestSerializer

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'allocations', 'decide']:
            permission_classes = [IsAdminRole]
        else:
            permission_classes = [permissions.IsAuthenticated]
        return [permission() for permission in permission_classes]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        parking_request = AllocationService.submit(request.user, serializer)
        return Response(
            {
                'success': True,
                'message': 'Parking slot requested successfully!',
                'request': ParkingRequestSerializer(parking_request).data,
            },
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'])
    def my_status(self, request):
        """Allocation status of the current user's request"""
        return Response(AllocationService.user_status(request.user))

    @action(detail=False, methods=['get'])
    def allocations(self, request):
        """Approved requests, searchable by user name or email

        Example: /api/v1/parking-requests/allocations/?search=john
        """
        queryset = self.filter_queryset(self.get_queryset().filter(status='approved'))
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ParkingRequestSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(ParkingRequestSerializer(queryset, many=True).data)

    @action(detail=True, methods=['post'])
    def decide(self, request, pk=None):
        """Approve or reject a pending request

        Body: { "status": "approved|rejected", "slot_number": "A-12" }
        """
        parking_request = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        parking_request = AllocationService.decide(
            parking_request,
            serializer.validated_data['status'],
            serializer.validated_data.get('slot_number', ''),
        )
        return Response(ParkingRequestSerializer(parking_request).data)


class ControlItemViewSet(mixins.CreateModelMixin,
                         mixins.UpdateModelMixin,
                         viewsets.GenericViewSet):
    """Admin control panel: general settings and parking slots"""

    queryset = ControlItem.objects.all()
    permission_classes = [IsAdminRole]

    def get_serializer_class(self):
        if self.action in ['update', 'partial_update']:
            return ControlItemValueSerializer
        return ControlItemSerializer

    def list(self, request):
        items = self.get_queryset()
        return Response({
            'general_items': ControlItemSerializer(items.filter(type='general'), many=True).data,
            'parking_slots': ControlItemSerializer(items.filter(type='parking-slot'), many=True).data,
        })

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        if ControlItem.objects.filter(key=data['key'], type=data['type']).exists():
            return Response({'error': 'Key already exists'}, status=status.HTTP_400_BAD_REQUEST)

        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        # Only the value can change; PATCH behaves like PUT
        item = self.get_object()
        serializer = self.get_serializer(item, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

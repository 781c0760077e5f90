# ============================= CARPOOL VIEWS =============================
from rest_framework import viewsets, mixins, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from parking.serializers import ParkingRequestSerializer
from utils.distance_calculator import Location
from utils.permissions import IsSeekerOrProvider
from .models import RideRequest
from .serializers import (
    ProviderSerializer,
    RideRequestCreateSerializer,
    RideRequestSerializer,
    RideDecisionSerializer,
    RouteSerializer,
    RoutePlanSerializer,
)
from .services import CarpoolService, RideRequestService


class CarpoolViewSet(viewsets.ViewSet):
    """Carpool providers, the caller's carpool status and provider routes"""
    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=['get'])
    def providers(self, request):
        """Available providers, nearest first when lat/lng are given

        Example: /api/v1/carpool/providers/?lat=12.9716&lng=77.5946
        """
        reference = None
        lat = request.query_params.get('lat')
        lng = request.query_params.get('lng')
        if lat is not None or lng is not None:
            try:
                reference = Location(float(lat), float(lng))
            except (TypeError, ValueError):
                return Response(
                    {'error': 'Invalid latitude or longitude'},
                    status=status.HTTP_400_BAD_REQUEST
                )
            if not (-90 <= reference.lat <= 90 and -180 <= reference.lng <= 180):
                return Response(
                    {'error': 'Invalid latitude or longitude'},
                    status=status.HTTP_400_BAD_REQUEST
                )

        providers = CarpoolService.available_providers(reference, exclude_user=request.user)
        serializer = ProviderSerializer(providers, many=True, context={'reference': reference})
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def status(self, request):
        """Status of the caller's latest parking request"""
        result, parking_request = CarpoolService.carpool_status(request.user)
        if parking_request is not None:
            result['data'] = ParkingRequestSerializer(parking_request).data
        return Response(result)

    @action(detail=False, methods=['put'])
    def route(self, request):
        """Set the provider's start, end and optional waypoints"""
        serializer = RouteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        provider = CarpoolService.set_route(request.user, **serializer.validated_data)
        return Response({
            'success': True,
            'message': 'Route updated successfully',
            'provider': ProviderSerializer(provider).data,
        })

    @action(detail=False, methods=['get'], url_path='route/plan')
    def plan(self, request):
        """Pickup order and road route through the accepted riders' pickup points"""
        provider, plan = CarpoolService.plan_provider_route(request.user)
        data = RoutePlanSerializer(plan).data
        data['provider_id'] = provider.id
        return Response(data)


class RideRequestViewSet(mixins.CreateModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """Ride request creation and the accept/reject lifecycle"""

    permission_classes = [permissions.IsAuthenticated, IsSeekerOrProvider]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status']
    ordering_fields = ['created_at']
    ordering = ['-created_at']

    def get_queryset(self):
        return RideRequest.objects.select_related('seeker', 'provider__user')

    def get_serializer_class(self):
        if self.action == 'create':
            return RideRequestCreateSerializer
        if self.action == 'update_status':
            return RideDecisionSerializer
        return RideRequestSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        ride = RideRequestService.create_request(
            request.user, data['provider_id'], data['location'], data.get('message', '')
        )
        return Response(
            {
                'success': True,
                'message': 'Ride request sent successfully',
                'request_id': ride.id,
                'request': RideRequestSerializer(ride).data,
            },
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Ride requests made by the current user"""
        rides = self.filter_queryset(RideRequestService.seeker_requests(request.user))
        return Response({'requests': RideRequestSerializer(rides, many=True).data})

    @action(detail=False, methods=['get'])
    def incoming(self, request):
        """Ride requests for the current user's carpool, with their route"""
        provider, rides = RideRequestService.provider_requests(request.user)
        rides = self.filter_queryset(rides)
        provider_data = ProviderSerializer(provider).data
        return Response({
            'requests': RideRequestSerializer(rides, many=True).data,
            'provider_data': {
                'start_location': provider_data['start_location'],
                'end_location': provider_data['end_location'],
                'route': provider_data['route'],
                'seats_available': provider_data['seats_available'],
            },
        })

    @action(detail=True, methods=['post'])
    def accept(self, request, pk=None):
        ride = RideRequestService.accept(request.user, pk)
        return Response({
            'success': True,
            'message': 'Ride request accepted successfully',
            'request': RideRequestSerializer(ride).data,
        })

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        ride = RideRequestService.reject(request.user, pk)
        return Response({
            'success': True,
            'message': 'Ride request rejected successfully',
            'request': RideRequestSerializer(ride).data,
        })

    @action(detail=True, methods=['post'])
    def update_status(self, request, pk=None):
        """Body: { "status": "accepted|rejected" }"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']

        ride = RideRequestService.update_status(request.user, pk, new_status)
        return Response({
            'success': True,
            'message': f'Ride request {new_status} successfully',
            'request': RideRequestSerializer(ride).data,
        })

# ==================== CARPOOL/ROUTING.PY ====================
import logging
from collections import namedtuple

import requests
from django.conf import settings
from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from utils.distance_calculator import DistanceCalculator
from .matching import sequence_pickups

logger = logging.getLogger(__name__)

RoutePlan = namedtuple('RoutePlan', ['stops', 'polyline', 'distance_km', 'eta_minutes', 'fallback'])


class RoutingError(Exception):
    """The routing service could not produce a route"""


class RoutingService:
    """OSRM client resolving ordered points into a road-following polyline"""

    def __init__(self, base_url=None, timeout=None, session=None):
        self.base_url = (base_url or settings.OSRM_BASE_URL).rstrip('/')
        self.timeout = timeout or settings.ROUTING_TIMEOUT
        self.session = session or requests.Session()

    def fetch_polyline(self, points):
        """Road polyline through ``points`` in order, as (lat, lng) pairs"""
        coordinates = ';'.join(f"{point.lng},{point.lat}" for point in points)
        url = f"{self.base_url}/route/v1/driving/{coordinates}"

        try:
            response = self.session.get(
                url, params={'overview': 'full', 'geometries': 'geojson'}, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise RoutingError(f"Routing request failed: {str(e)}") from e

        if not isinstance(payload, dict):
            raise RoutingError(f"Malformed routing response: {type(payload).__name__}")

        if payload.get('code') != 'Ok' or not payload.get('routes'):
            raise RoutingError(f"Routing service returned {payload.get('code')}")

        try:
            geometry = payload['routes'][0]['geometry']['coordinates']
            polyline = [(float(lat), float(lng)) for lng, lat in geometry]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RoutingError(f"Malformed routing response: {str(e)}") from e

        if len(polyline) < 2:
            raise RoutingError(f"Routing service returned {len(polyline)} route points")
        return polyline

    def resolve(self, points):
        """Road polyline, or straight segments between the points if routing fails.

        Returns ``(polyline, fallback)``.
        """
        if len(points) < 2:
            return [point.point for point in points], False

        try:
            return self.fetch_polyline(points), False
        except RoutingError as e:
            logger.warning(f"{str(e)}; using straight-line route through {len(points)} points")
            return [point.point for point in points], True


class GeocodingService:
    """Best-effort reverse geocoding for display addresses"""

    def __init__(self, geocoder=None):
        self._geocoder = geocoder

    @property
    def geocoder(self):
        if self._geocoder is None:
            self._geocoder = Nominatim(
                user_agent=settings.GEOCODER_USER_AGENT, timeout=settings.GEOCODING_TIMEOUT
            )
        return self._geocoder

    @staticmethod
    def coordinate_label(lat, lng):
        return f"Location at {lat:.5f}, {lng:.5f}"

    def describe(self, lat, lng):
        if not settings.GEOCODING_ENABLED:
            return self.coordinate_label(lat, lng)

        try:
            result = self.geocoder.reverse((lat, lng), exactly_one=True)
        except (GeopyError, ValueError) as e:
            logger.warning(f"Reverse geocoding failed for ({lat}, {lng}): {str(e)}")
            return self.coordinate_label(lat, lng)

        if result is None or not result.address:
            return self.coordinate_label(lat, lng)
        return result.address

    def with_address(self, location):
        """Fill in a missing address on a Location"""
        if location.address:
            return location
        return type(location)(location.lat, location.lng, self.describe(location.lat, location.lng))


def plan_route(start, end, pickups, routing=None):
    """Sequence pickups between start and end and resolve the road route"""
    routing = routing or RoutingService()
    stops = sequence_pickups(start, end, pickups)
    polyline, fallback = routing.resolve(stops)
    distance_km = DistanceCalculator.path_length_km(polyline)
    eta_minutes = DistanceCalculator.calculate_eta(distance_km, settings.CARPOOL_AVG_SPEED_KMH)
    return RoutePlan(stops, polyline, round(distance_km, 2), eta_minutes, fallback)

# ==================== UTILS/DISTANCE_CALCULATOR.PY ====================
from dataclasses import dataclass
from typing import Optional

from geopy.distance import great_circle

EARTH_RADIUS_KM = 6371


@dataclass(frozen=True)
class Location:
    """A lat/lng point; address is only a display label"""
    lat: float
    lng: float
    address: Optional[str] = None

    @property
    def point(self):
        return (self.lat, self.lng)

    def to_dict(self):
        return {'lat': self.lat, 'lng': self.lng, 'address': self.address}

    @classmethod
    def from_dict(cls, data):
        return cls(lat=float(data['lat']), lng=float(data['lng']), address=data.get('address') or None)


class DistanceCalculator:
    """Calculate distance and ETA between two points"""

    @staticmethod
    def get_distance_km(lat1, lng1, lat2, lng2):
        """Great-circle (haversine) distance in kilometers"""
        return great_circle((lat1, lng1), (lat2, lng2), radius=EARTH_RADIUS_KM).km

    @staticmethod
    def between(a, b):
        """Distance in kilometers between two Locations"""
        return DistanceCalculator.get_distance_km(a.lat, a.lng, b.lat, b.lng)

    @staticmethod
    def path_length_km(points):
        """Sum of distances between consecutive (lat, lng) pairs"""
        return sum(
            DistanceCalculator.get_distance_km(lat1, lng1, lat2, lng2)
            for (lat1, lng1), (lat2, lng2) in zip(points, points[1:])
        )

    @staticmethod
    def calculate_eta(distance_km, avg_speed_kmh=40):
        """Calculate estimated time of arrival in minutes"""
        if distance_km == 0:
            return 0
        hours = distance_km / avg_speed_kmh
        return int(hours * 60)

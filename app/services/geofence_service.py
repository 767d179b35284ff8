"""
Geofence Service - Distance checks against a user's assigned location
"""
import math
from dataclasses import dataclass
from datetime import time
from typing import Optional, Tuple

from app.core.config import settings
from app.models.department import Department
from app.models.group import Group

EARTH_RADIUS_M = 6371000


@dataclass
class WorkSchedule:
    """Location and working hours resolved from group, then department"""
    location: Optional[str] = None
    radius_m: int = 500
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    source: Optional[str] = None  # 'group', 'department' or None


@dataclass
class GeofenceResult:
    allowed: bool
    distance_m: Optional[float] = None
    radius_m: Optional[int] = None


class GeofenceService:
    def __init__(self, default_radius_m: Optional[int] = None) -> None:
        self.default_radius_m = default_radius_m or settings.DEFAULT_GEOFENCE_RADIUS_M

    def calculate_distance(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """
        Calculate distance between two coordinates using Haversine formula

        Returns:
            float: Distance in meters
        """
        lat1_rad = math.radians(lat1)
        lat2_rad = math.radians(lat2)
        delta_lat = math.radians(lat2 - lat1)
        delta_lon = math.radians(lon2 - lon1)

        a = (math.sin(delta_lat / 2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) *
             math.sin(delta_lon / 2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_M * c

    def parse_location(self, location: str) -> Tuple[float, float]:
        """
        Parse a stored "lat,lng" string

        Raises:
            ValueError: If the text is not two comma separated numbers
        """
        parts = [p.strip() for p in location.split(",")]
        if len(parts) != 2:
            raise ValueError(f"Invalid location format: {location!r}")
        return float(parts[0]), float(parts[1])

    def resolve_schedule(
        self,
        group: Optional[Group],
        department: Optional[Department]
    ) -> WorkSchedule:
        """
        Resolve location and working hours, group first then department

        The radius always belongs to whichever entity supplied the location.
        """
        schedule = WorkSchedule(radius_m=self.default_radius_m)

        if group is not None and group.group_location:
            schedule.location = group.group_location
            schedule.radius_m = group.geofence_radius or self.default_radius_m
            schedule.source = "group"
        elif department is not None and department.department_location:
            schedule.location = department.department_location
            schedule.radius_m = department.geofence_radius or self.default_radius_m
            schedule.source = "department"

        schedule.start_time = (group.start_time if group is not None else None) or \
            (department.start_time if department is not None else None)
        schedule.end_time = (group.end_time if group is not None else None) or \
            (department.end_time if department is not None else None)

        return schedule

    def check(self, schedule: WorkSchedule, latitude: float, longitude: float) -> GeofenceResult:
        """
        Check coordinates against the resolved target

        With no target location configured the check always passes.
        """
        if not schedule.location:
            return GeofenceResult(allowed=True)

        target_lat, target_lon = self.parse_location(schedule.location)
        distance = self.calculate_distance(latitude, longitude, target_lat, target_lon)

        return GeofenceResult(
            allowed=distance <= schedule.radius_m,
            distance_m=distance,
            radius_m=schedule.radius_m
        )

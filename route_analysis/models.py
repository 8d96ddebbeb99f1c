"""Dataclasses describing GPS trip inputs and analysis results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


LatLng = Tuple[float, float]


class SegmentKind(str, Enum):
    MOVING = "moving"
    STOPPED = "stopped"


class DeviationSeverity(str, Enum):
    MINOR = "minor"
    MAJOR = "major"


class StopIntensity(str, Enum):
    """Visual weight of a stop, bucketed by its rounded duration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    SEVERE = "severe"

    @classmethod
    def for_minutes(cls, duration_min: int) -> "StopIntensity":
        if duration_min >= 60:
            return cls.SEVERE
        if duration_min >= 30:
            return cls.HIGH
        if duration_min >= 10:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single GPS sample of a vehicle trip.

    Attributes:
        sequence_index: Position in the original stream.
        lat: Latitude in decimal degrees.
        lng: Longitude in decimal degrees.
        timestamp_ms: Unix epoch milliseconds, non-decreasing along the trip.
        speed_kmh: Instantaneous speed reported by the device.
        distance_from_start_km: Cumulative odometer distance.
        is_stopped: Precomputed stop flag supplied by ingestion.
        altitude_m: Altitude in metres, ``None`` when the device had no fix.
    """

    sequence_index: int
    lat: float
    lng: float
    timestamp_ms: int
    speed_kmh: float
    distance_from_start_km: float
    is_stopped: bool
    altitude_m: Optional[float] = None

    @property
    def coord(self) -> LatLng:
        return (self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class PlannedWaypoint:
    lat: float
    lng: float
    name: str = ""


@dataclass(frozen=True, slots=True)
class TripSegment:
    """A maximal run of consecutive points sharing the same movement state."""

    kind: SegmentKind
    start_index: int
    end_index: int
    start_coord: LatLng
    end_coord: LatLng
    duration_sec: float
    distance_km: float
    avg_speed_kmh: float
    max_speed_kmh: float
    label: str

    @property
    def point_count(self) -> int:
        return self.end_index - self.start_index + 1


@dataclass(frozen=True, slots=True)
class DetectedStop:
    """A low-speed run that lasted long enough to count as a stop."""

    avg_lat: float
    avg_lng: float
    start_timestamp_ms: int
    end_timestamp_ms: int
    duration_min: int
    point_count: int

    @property
    def duration_sec(self) -> float:
        return (self.end_timestamp_ms - self.start_timestamp_ms) / 1000.0

    @property
    def intensity(self) -> StopIntensity:
        return StopIntensity.for_minutes(self.duration_min)


@dataclass(frozen=True, slots=True)
class RouteDeviation:
    source_index: int
    point: LatLng
    distance_from_planned_km: float
    timestamp_ms: int
    severity: DeviationSeverity


@dataclass(frozen=True, slots=True)
class RouteStatsBundle:
    """Aggregate figures for one trip, as compared side by side."""

    distance_km: float = 0.0
    duration_min: float = 0.0
    avg_speed_kmh: float = 0.0
    max_speed_kmh: float = 0.0
    stop_count: int = 0
    point_count: int = 0


@dataclass(frozen=True, slots=True)
class MetricDiff:
    label: str
    value_a: float
    value_b: float
    absolute_delta: float
    percent_delta: float
    is_better: bool


@dataclass(frozen=True, slots=True)
class TripSummary:
    """Totals shown in a trip statistics panel."""

    total_distance_km: float
    max_speed_kmh: float
    avg_speed_kmh: float
    moving_time_sec: float
    stopped_time_sec: float
    total_time_sec: float
    total_points: int
    total_stops: int
    start_coord: Optional[LatLng]
    end_coord: Optional[LatLng]


@dataclass(slots=True)
class TripAnalysis:
    """Every artefact derived from a single trip in one call."""

    segments: List[TripSegment] = field(default_factory=list)
    stops: List[DetectedStop] = field(default_factory=list)
    deviations: List[RouteDeviation] = field(default_factory=list)
    stats: RouteStatsBundle = field(default_factory=RouteStatsBundle)


__all__ = [
    "DetectedStop",
    "DeviationSeverity",
    "LatLng",
    "MetricDiff",
    "PlannedWaypoint",
    "RouteDeviation",
    "RouteStatsBundle",
    "SegmentKind",
    "StopIntensity",
    "TrackPoint",
    "TripAnalysis",
    "TripSegment",
    "TripSummary",
]

"""Central configuration for the route analysis library.

All values are constants imported by the rest of the package. Each can be
overridden through an environment variable of the same name (optionally via a
local `.env`). Functions accept explicit arguments, so these only supply
defaults.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Stop detection
# ---------------------------------------------------------------------------
# Samples at or below this speed belong to a candidate stop.
STOP_SPEED_THRESHOLD_KMH = _env_float("STOP_SPEED_THRESHOLD_KMH", 3.0)

# Candidate stops shorter than this are discarded.
MIN_STOP_DURATION_SEC = _env_float("MIN_STOP_DURATION_SEC", 120.0)


# ---------------------------------------------------------------------------
# Trip statistics
# ---------------------------------------------------------------------------
# Speed below which the edge-triggered stop counter considers the vehicle stopped.
STATS_STOP_SPEED_KMH = _env_float("STATS_STOP_SPEED_KMH", 3.0)


# ---------------------------------------------------------------------------
# Corridor deviation
# ---------------------------------------------------------------------------
# Distance (km) from the planned corridor tolerated before flagging a sample.
DEVIATION_TOLERANCE_KM = _env_float("DEVIATION_TOLERANCE_KM", 0.5)

# Upper bound on the number of samples inspected per trip.
DEVIATION_MAX_SAMPLES = _env_int("DEVIATION_MAX_SAMPLES", 100)


# ---------------------------------------------------------------------------
# Movement classification
# ---------------------------------------------------------------------------
# Single threshold shared by callers that recompute per-point stop flags.
MOVEMENT_SPEED_THRESHOLD_KMH = _env_float("MOVEMENT_SPEED_THRESHOLD_KMH", 3.0)

# Minimum dwell (seconds) before a slow run is flagged as stopped. 0 disables.
MOVEMENT_MIN_DWELL_SEC = _env_float("MOVEMENT_MIN_DWELL_SEC", 0.0)


# ---------------------------------------------------------------------------
# Performance hints
# ---------------------------------------------------------------------------
# Trips above this many points are worth running off a UI/event-loop thread.
LARGE_TRIP_POINT_THRESHOLD = _env_int("LARGE_TRIP_POINT_THRESHOLD", 5000)

"""Bridge between pandas tables and the analysis dataclasses.

Reading builds validated :class:`TrackPoint` tuples from a DataFrame or CSV
file; writing flattens result dataclasses into DataFrames ready for a
rendering or export layer.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
import logging
from os import PathLike
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .classification import MovementClassifier
from .errors import TrackFormatError
from .geo import haversine_km_array
from .models import PlannedWaypoint, TrackPoint
from .validation import validate_track

_LOG = logging.getLogger(__name__)

LAT_COL = "lat"
LNG_COL = "lng"
TIMESTAMP_COL = "timestamp"
SPEED_COL = "speed_kmh"
SEQUENCE_COL = "sequence_index"
DISTANCE_COL = "distance_from_start_km"
STOPPED_COL = "is_stopped"
ALTITUDE_COL = "altitude_m"
NAME_COL = "name"

_REQUIRED_TRACK_COLS = {LAT_COL, LNG_COL, TIMESTAMP_COL, SPEED_COL}
_REQUIRED_WAYPOINT_COLS = {LAT_COL, LNG_COL}

_TRUE_STRINGS = {"1", "true", "yes", "y", "t"}
_FALSE_STRINGS = {"0", "false", "no", "n", "f", ""}


def _check_columns(df: pd.DataFrame, required: set[str], what: str) -> None:
    missing = required - set(df.columns)
    if missing:
        raise TrackFormatError(
            f"{what} table missing required columns: {', '.join(sorted(missing))}"
        )


def _is_blank(value: object) -> bool:
    return pd.isna(value) or str(value).strip() == ""


def _float_column(df: pd.DataFrame, column: str) -> np.ndarray:
    try:
        values = pd.to_numeric(df[column], errors="raise")
    except (TypeError, ValueError) as exc:
        raise TrackFormatError(f"Column '{column}' contains non-numeric values") from exc
    return values.to_numpy(dtype=float)


def _sequence_column(df: pd.DataFrame) -> np.ndarray:
    values = _float_column(df, SEQUENCE_COL)
    bad = ~np.isfinite(values) | (values != np.floor(values))
    if bad.any():
        row = int(np.flatnonzero(bad)[0]) + 1
        raise TrackFormatError(
            f"Invalid '{SEQUENCE_COL}' value '{df[SEQUENCE_COL].iloc[row - 1]}' in row {row}"
        )
    return values.astype(np.int64)


def _altitude_column(df: pd.DataFrame) -> List[Optional[float]]:
    raw = df[ALTITUDE_COL]
    try:
        values = pd.to_numeric(raw.mask(raw.map(_is_blank)), errors="raise")
    except (TypeError, ValueError) as exc:
        raise TrackFormatError(
            f"Column '{ALTITUDE_COL}' contains non-numeric values"
        ) from exc
    return [None if pd.isna(v) else float(v) for v in values]


def _timestamps_ms(series: pd.Series) -> np.ndarray:
    """Return epoch milliseconds from numeric epoch-ms or ISO-8601 values."""

    if pd.api.types.is_numeric_dtype(series):
        if series.isna().any():
            raise TrackFormatError(f"Column '{TIMESTAMP_COL}' has blank values")
        return series.to_numpy(dtype="int64")
    try:
        parsed = pd.to_datetime(series, utc=True, format="ISO8601")
    except (TypeError, ValueError) as exc:
        raise TrackFormatError(
            f"Column '{TIMESTAMP_COL}' contains unparseable timestamps"
        ) from exc
    if parsed.isna().any():
        raise TrackFormatError(f"Column '{TIMESTAMP_COL}' has blank values")
    elapsed = (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(milliseconds=1)
    return elapsed.to_numpy(dtype="int64")


def _parse_flag(value: object, row_label: str) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if _is_blank(value):
        return False
    # A 0/1 column with blanks arrives as float64.
    if isinstance(value, (int, float, np.number)) and value in (0, 1):
        return bool(value)
    normalized = str(value).strip().lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    raise TrackFormatError(f"Invalid '{STOPPED_COL}' value '{value}' in {row_label}")


def _cumulative_km(lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
    if lats.size == 0:
        return lats.astype(float, copy=True)
    steps = haversine_km_array(lats[:-1], lngs[:-1], lats[1:], lngs[1:])
    return np.concatenate(([0.0], np.cumsum(steps)))


def track_points_from_frame(
    df: pd.DataFrame,
    *,
    classifier: Optional[MovementClassifier] = None,
) -> Tuple[TrackPoint, ...]:
    """Build validated track points from a DataFrame.

    Required columns are ``lat``, ``lng``, ``timestamp`` and ``speed_kmh``.
    ``timestamp`` holds epoch milliseconds or ISO-8601 strings. Optional
    columns fill the remaining fields: ``sequence_index`` (defaults to row
    order), ``distance_from_start_km`` (defaults to cumulative haversine),
    ``is_stopped`` (defaults to ``classifier``) and ``altitude_m``.

    Raises:
        TrackFormatError: when columns are missing or values do not parse.
        TrackValidationError: when the resulting stream breaks an invariant.
    """

    _check_columns(df, _REQUIRED_TRACK_COLS, "Track")
    df = df.reset_index(drop=True)
    lats = _float_column(df, LAT_COL)
    lngs = _float_column(df, LNG_COL)
    speeds = _float_column(df, SPEED_COL)
    timestamps = _timestamps_ms(df[TIMESTAMP_COL])
    if SEQUENCE_COL in df.columns:
        sequence = _sequence_column(df)
    else:
        sequence = np.arange(len(df))
    if DISTANCE_COL in df.columns:
        distances = _float_column(df, DISTANCE_COL)
    else:
        distances = _cumulative_km(lats, lngs)
    altitudes: List[Optional[float]] = [None] * len(df)
    if ALTITUDE_COL in df.columns:
        altitudes = _altitude_column(df)
    has_flags = STOPPED_COL in df.columns
    flags = (
        [_parse_flag(v, f"row {i + 1}") for i, v in enumerate(df[STOPPED_COL])]
        if has_flags
        else [False] * len(df)
    )

    points = [
        TrackPoint(
            sequence_index=int(sequence[i]),
            lat=float(lats[i]),
            lng=float(lngs[i]),
            timestamp_ms=int(timestamps[i]),
            speed_kmh=float(speeds[i]),
            distance_from_start_km=float(distances[i]),
            is_stopped=flags[i],
            altitude_m=altitudes[i],
        )
        for i in range(len(df))
    ]
    if not has_flags:
        points = (classifier or MovementClassifier()).with_stopped_flags(points)
    track = validate_track(points)
    _LOG.debug(
        "Loaded %d track points (stop flags %s)",
        len(track),
        "given" if has_flags else "derived",
    )
    return track


def read_track_csv(
    path: str | PathLike[str],
    *,
    classifier: Optional[MovementClassifier] = None,
) -> Tuple[TrackPoint, ...]:
    """Read a CSV track export and return validated points."""

    df = pd.read_csv(path)
    return track_points_from_frame(df, classifier=classifier)


def waypoints_from_frame(df: pd.DataFrame) -> List[PlannedWaypoint]:
    """Build planned waypoints from ``lat``/``lng`` (and optional ``name``) columns."""

    _check_columns(df, _REQUIRED_WAYPOINT_COLS, "Waypoint")
    lats = _float_column(df, LAT_COL)
    lngs = _float_column(df, LNG_COL)
    names = (
        ["" if _is_blank(v) else str(v).strip() for v in df[NAME_COL]]
        if NAME_COL in df.columns
        else [""] * len(df)
    )
    return [
        PlannedWaypoint(lat=float(lat), lng=float(lng), name=name)
        for lat, lng, name in zip(lats, lngs, names)
    ]


def _flatten(record: Any) -> Dict[str, Any]:
    row: Dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, Enum):
            row[f.name] = value.value
        elif isinstance(value, tuple) and len(value) == 2:
            # (lat, lng) pairs become two columns.
            prefix = f.name[: -len("_coord")] if f.name.endswith("_coord") else f.name
            row[f"{prefix}_lat"], row[f"{prefix}_lng"] = value
        else:
            row[f.name] = value
    return row


def to_frame(records: Sequence[Any]) -> pd.DataFrame:
    """Flatten a sequence of result dataclasses into a DataFrame.

    Enum values render as their string value and coordinate pairs split
    into ``*_lat``/``*_lng`` columns. An empty sequence yields an empty frame.
    """

    rows = []
    for record in records:
        if not is_dataclass(record) or isinstance(record, type):
            raise TypeError(f"Expected dataclass instances, got {type(record).__name__}")
        rows.append(_flatten(record))
    return pd.DataFrame(rows)


__all__ = [
    "read_track_csv",
    "to_frame",
    "track_points_from_frame",
    "waypoints_from_frame",
]

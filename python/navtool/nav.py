"""Navigation state interface and text row formatting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from .units import deg2rad, rad2deg


class NavigationState(Protocol):
    """Read-only view of a navigation solution at the current epoch.

    Angles are in radians, height in meters, velocities in m/s.
    """

    @property
    def longitude(self) -> float: ...
    @property
    def latitude(self) -> float: ...
    @property
    def height(self) -> float: ...
    @property
    def v_north(self) -> float: ...
    @property
    def v_east(self) -> float: ...
    @property
    def v_down(self) -> float: ...
    @property
    def heading(self) -> float: ...
    @property
    def pitch(self) -> float: ...
    @property
    def roll(self) -> float: ...
    @property
    def azimuth(self) -> float: ...


@dataclass(frozen=True)
class NavSolution:
    longitude: float = 0.0
    latitude: float = 0.0
    height: float = 0.0
    v_north: float = 0.0
    v_east: float = 0.0
    v_down: float = 0.0
    heading: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    azimuth: float = 0.0


NAV_LABELS = [
    "longitude", "latitude", "height",
    "v_north", "v_east", "v_down",
    "Yaw(psi)", "Pitch(theta)", "Roll(phi)", "Azimuth(alpha)",
]


def format_nav(nav: NavigationState, itow: float | None = None,
               azimuth: bool = True) -> str:
    """Render *nav* as a comma-separated row, angles in degrees."""
    values = [
        rad2deg(nav.longitude), rad2deg(nav.latitude), nav.height,
        nav.v_north, nav.v_east, nav.v_down,
        rad2deg(nav.heading), rad2deg(nav.pitch), rad2deg(nav.roll),
    ]
    if azimuth:
        values.append(rad2deg(nav.azimuth))
    if itow is not None:
        values.insert(0, itow)
    return ", ".join(f"{v:.10g}" for v in values)


def parse_nav(fields: Sequence[str]) -> tuple[float, NavSolution]:
    """Parse ``itow, lon, lat, h, vn, ve, vd, yaw, pitch, roll[, azimuth]``.

    Angles are read in degrees.  Raises ValueError on short or non-numeric
    rows.
    """
    values = [float(f) for f in fields if f.strip()]
    if len(values) < 10:
        raise ValueError(f"expected at least 10 columns, got {len(values)}")
    itow, lng, lat, h, vn, ve, vd, yaw, pitch, roll = values[:10]
    azimuth = values[10] if len(values) > 10 else 0.0
    return itow, NavSolution(
        longitude=deg2rad(lng), latitude=deg2rad(lat), height=h,
        v_north=vn, v_east=ve, v_down=vd,
        heading=deg2rad(yaw), pitch=deg2rad(pitch), roll=deg2rad(roll),
        azimuth=deg2rad(azimuth),
    )

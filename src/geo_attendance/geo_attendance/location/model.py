from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """Where an entry was submitted from."""

    latitude: float
    longitude: float
    address: str = ""

    def coordinates_label(self) -> str:
        return format_coordinates(self.latitude, self.longitude)


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude:.6f}, {longitude:.6f}"

from __future__ import annotations

from crosswalk.data_layer.base.frozen import BaseFrozenData


class GeoLocationPoint(BaseFrozenData):
    latitude: str
    longitude: str


class GeoLocationBox(BaseFrozenData):
    west: str
    east: str
    south: str
    north: str


class GeoLocationData(BaseFrozenData):
    # Coordinates are kept as the source wrote them, e.g. "69.000000".
    place: str | None = None
    point: GeoLocationPoint | None = None
    box: GeoLocationBox | None = None

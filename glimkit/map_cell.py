"""Voxel cells that index map points by packed submap and point ids."""

from __future__ import annotations

from typing import Iterable, Sequence

_POINT_BITS = 32
_POINT_MASK = (1 << _POINT_BITS) - 1


def pack_point_id(submap_id: int, point_id: int) -> int:
    """Pack a submap id and a point index into one 64-bit id."""
    if submap_id < 0 or submap_id > _POINT_MASK:
        raise ValueError(f"submap id {submap_id} out of range")
    if point_id < 0 or point_id > _POINT_MASK:
        raise ValueError(f"point id {point_id} out of range")
    return (submap_id << _POINT_BITS) | point_id


def unpack_point_id(packed_id: int) -> tuple[int, int]:
    """Split a packed id into ``(submap_id, point_id)``."""
    packed = int(packed_id)
    if packed < 0:
        raise ValueError(f"packed id {packed} is negative")
    return packed >> _POINT_BITS, packed & _POINT_MASK


class MapCell:
    """A cubic cell of the map holding the packed ids of the points inside it."""

    def __init__(self, resolution: float, coord: Sequence[int]) -> None:
        coord_tuple = tuple(int(c) for c in coord)
        if len(coord_tuple) != 3:
            raise ValueError(f"a cell coordinate needs 3 values, got {len(coord_tuple)}")
        self.resolution = float(resolution)
        self.coord: tuple[int, int, int] = coord_tuple  # type: ignore[assignment]
        self.point_ids: list[int] = []

    def name(self) -> str:
        """Drawable name of the cell."""
        x, y, z = self.coord
        return f"cell_{x}_{y}_{z}"

    def clear(self) -> None:
        self.point_ids.clear()

    def add_point(self, submap_id: int, point_id: int) -> None:
        self.point_ids.append(pack_point_id(submap_id, point_id))

    def add_points(self, submap_id: int, point_ids: Iterable[int]) -> None:
        self.point_ids.extend(pack_point_id(submap_id, int(point_id)) for point_id in point_ids)

    def remove_submap(self, submap_id: int) -> None:
        """Drop every point that belongs to the given submap."""
        self.point_ids = [pid for pid in self.point_ids if pid >> _POINT_BITS != submap_id]

    def remove_submaps(self, submap_ids: Iterable[int]) -> None:
        """Drop every point that belongs to any of the given submaps."""
        removed = set(submap_ids)
        self.point_ids = [pid for pid in self.point_ids if pid >> _POINT_BITS not in removed]
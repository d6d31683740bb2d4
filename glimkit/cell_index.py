"""A voxel-grid index over submap points for rough neighbourhood queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Sequence

import numpy as np

from glimkit.map_cell import MapCell, unpack_point_id

logger = logging.getLogger(__name__)

Coord = tuple[int, int, int]


def _homogeneous(points: np.ndarray) -> np.ndarray:
    array = np.asarray(points, dtype=float)
    if array.ndim == 1 and array.size == 0:
        array = array.reshape(0, 4)
    if array.ndim != 2 or array.shape[1] not in (3, 4):
        raise ValueError(f"points must have 3 or 4 columns, got shape {array.shape}")
    if array.shape[1] == 3:
        array = np.hstack([array, np.ones((len(array), 1))])
    return array


@dataclass
class SubmapPoints:
    """Points of one submap in its origin frame, with the pose of that frame in the world."""

    id: int
    points: np.ndarray
    T_world_origin: np.ndarray = field(default_factory=lambda: np.eye(4))
    normals: Optional[np.ndarray] = None
    covs: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        self.points = _homogeneous(self.points)
        pose = np.asarray(self.T_world_origin, dtype=float)
        if pose.shape != (4, 4):
            raise ValueError(f"pose must be 4x4, got shape {pose.shape}")
        self.T_world_origin = pose
        count = len(self.points)
        if self.normals is not None:
            normals = np.asarray(self.normals, dtype=float)
            if normals.shape == (count, 3):
                normals = np.hstack([normals, np.zeros((count, 1))])
            if normals.shape != (count, 4):
                raise ValueError(f"normals must have shape ({count}, 4), got {normals.shape}")
            self.normals = normals
        if self.covs is not None:
            covs = np.asarray(self.covs, dtype=float)
            if covs.shape != (count, 4, 4):
                raise ValueError(f"covs must have shape ({count}, 4, 4), got {covs.shape}")
            self.covs = covs

    def __len__(self) -> int:
        return len(self.points)

    def world_points(self) -> np.ndarray:
        """Points transformed into the world frame, one homogeneous row each."""
        return self.points @ self.T_world_origin.T


def _group_by_cell(coords: np.ndarray) -> Iterator[tuple[Coord, list[int]]]:
    """Yield each distinct cell coordinate with the ascending indices of its points."""
    if len(coords) == 0:
        return
    unique, inverse = np.unique(coords, axis=0, return_inverse=True)
    inverse = np.asarray(inverse).reshape(-1)
    order = np.argsort(inverse, kind="stable")
    bounds = np.searchsorted(inverse[order], np.arange(len(unique) + 1))
    for group, coord in enumerate(unique):
        indices = order[bounds[group]:bounds[group + 1]]
        yield (int(coord[0]), int(coord[1]), int(coord[2])), [int(i) for i in indices]


class CellIndex:
    """Assigns every world point of a set of submaps to a cubic cell."""

    def __init__(self, resolution: float = 2.0, window: int = 5) -> None:
        if resolution <= 0.0:
            raise ValueError("cell resolution must be positive")
        if window < 0:
            raise ValueError("selection window must not be negative")
        self.resolution = float(resolution)
        self.window = int(window)
        self.cells: dict[Coord, MapCell] = {}
        self.submap_cells: dict[int, set[Coord]] = {}

    def clear(self) -> None:
        self.cells.clear()
        self.submap_cells.clear()

    def _coords(self, world_points: np.ndarray) -> np.ndarray:
        return np.floor(world_points[:, :3] / self.resolution).astype(np.int64)

    def cell_coord(self, point: Sequence[float]) -> Coord:
        """Coordinate of the cell that contains a point."""
        p = np.asarray(point, dtype=float).reshape(-1)
        if p.size < 3:
            raise ValueError("a point needs at least 3 values")
        x, y, z = np.floor(p[:3] / self.resolution).astype(np.int64)
        return int(x), int(y), int(z)

    def build(self, submaps: Iterable[SubmapPoints]) -> None:
        """Rebuild the index from scratch."""
        self.clear()
        for submap in submaps:
            touched = self.submap_cells.setdefault(submap.id, set())
            for coord, indices in _group_by_cell(self._coords(submap.world_points())):
                cell = self.cells.get(coord)
                if cell is None:
                    cell = MapCell(self.resolution, coord)
                    self.cells[coord] = cell
                cell.add_points(submap.id, indices)
                touched.add(coord)
        logger.info("|cells|=%d", len(self.cells))

    def collect_neighbor_point_ids(self, point: Sequence[float]) -> list[int]:
        """Packed ids of all points in the cells of the search window around ``point``."""
        cx, cy, cz = self.cell_coord(point)
        w = self.window
        selected_cells = []
        for i in range(-w, w + 1):
            for j in range(-w, w + 1):
                for k in range(-w, w + 1):
                    cell = self.cells.get((cx + i, cy + j, cz + k))
                    if cell is not None:
                        selected_cells.append(cell)
        ids = [pid for cell in selected_cells for pid in cell.point_ids]
        logger.info("|selected_cells|=%d |selected_points|=%d", len(selected_cells), len(ids))
        return ids

    def reindex_submap(self, submap: SubmapPoints) -> None:
        """Re-insert the points of a submap whose points have changed into the existing cells."""
        for coord in self.submap_cells.get(submap.id, set()):
            cell = self.cells.get(coord)
            if cell is not None:
                cell.remove_submap(submap.id)

        touched: set[Coord] = set()
        for coord, indices in _group_by_cell(self._coords(submap.world_points())):
            cell = self.cells.get(coord)
            if cell is None:
                logger.warning("cell not found: %s", coord)
                continue
            cell.add_points(submap.id, indices)
            touched.add(coord)
        self.submap_cells[submap.id] = touched


def collect_submap_points(submaps, point_ids: Sequence[int]) -> SubmapPoints:
    """Gather the world-frame points (and normals and covariances) named by packed ids.

    ``submaps`` is indexed by submap id. Normals and covariances are included
    only when every submap involved has them.
    """
    ids = [unpack_point_id(pid) for pid in point_ids]
    count = len(ids)
    if count == 0:
        return SubmapPoints(id=-1, points=np.zeros((0, 4)))

    submap_ids = np.array([sid for sid, _ in ids], dtype=np.int64)
    indices = np.array([idx for _, idx in ids], dtype=np.int64)
    involved = {int(sid): submaps[int(sid)] for sid in np.unique(submap_ids)}
    has_normals = all(s.normals is not None for s in involved.values())
    has_covs = all(s.covs is not None for s in involved.values())

    points = np.zeros((count, 4))
    normals = np.zeros((count, 4)) if has_normals else None
    covs = np.zeros((count, 4, 4)) if has_covs else None

    for sid, submap in involved.items():
        mask = submap_ids == sid
        local = indices[mask]
        if local.size and local.max() >= len(submap):
            raise IndexError(f"point id {int(local.max())} out of range in submap {sid}")
        pose = submap.T_world_origin
        points[mask] = submap.points[local] @ pose.T
        if normals is not None:
            normals[mask] = submap.normals[local] @ pose.T
        if covs is not None:
            covs[mask] = pose @ submap.covs[local] @ pose.T

    return SubmapPoints(id=-1, points=points, normals=normals, covs=covs)
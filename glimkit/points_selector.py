"""Selection and removal of map points by box, sphere, radius and outlier tools."""

from __future__ import annotations

import logging
from enum import Enum
from itertools import groupby
from typing import Iterable, Sequence, Union

import numpy as np

from glimkit.cell_index import CellIndex, SubmapPoints, collect_submap_points
from glimkit.map_cell import pack_point_id, unpack_point_id

logger = logging.getLogger(__name__)

_BOX_LOWER = np.array([-0.5, -0.5, -0.5, 0.0])
_BOX_UPPER = np.array([0.5, 0.5, 0.5, 2.0])
_KNN_BLOCK = 512


class SelectionTool(Enum):
    """Shape of the gizmo used to select points."""

    BOX = 0
    SPHERE = 1


def _mean_neighbor_distances(points: np.ndarray, k: int) -> np.ndarray:
    """Mean distance of every point to its ``k`` nearest points (itself included)."""
    xyz = points[:, :3]
    means = np.empty(len(xyz))
    for start in range(0, len(xyz), _KNN_BLOCK):
        block = xyz[start:start + _KNN_BLOCK]
        sq_dists = ((block[:, None, :] - xyz[None, :, :]) ** 2).sum(axis=-1)
        nearest = np.partition(sq_dists, k - 1, axis=1)[:, :k]
        means[start:start + len(block)] = np.sqrt(nearest).mean(axis=1)
    return means


def _find_inlier_points(points: np.ndarray, k: int, stddev_thresh: float) -> np.ndarray:
    """Indices of points whose mean neighbour distance is within the statistical bound."""
    distances = _mean_neighbor_distances(points, k)
    bound = distances.mean() + stddev_thresh * distances.std()
    return np.flatnonzero(distances <= bound)


class PointsSelector:
    """Keeps a set of submaps, an index over their points and the current selection."""

    def __init__(self, map_cell_resolution: float = 2.0, cell_selection_window: int = 5) -> None:
        self.map_cell_resolution = float(map_cell_resolution)
        self.cell_selection_window = int(cell_selection_window)
        self.index = CellIndex(self.map_cell_resolution, self.cell_selection_window)
        self.submaps: dict[int, SubmapPoints] = {}
        self.selected_point_ids: list[int] = []

    def clear(self) -> None:
        """Forget all submaps, cells and the selection."""
        self.submaps.clear()
        self.index.clear()
        self.selected_point_ids.clear()

    def set_submaps(self, submaps: Iterable[SubmapPoints]) -> None:
        """Replace the submaps and rebuild the cell index."""
        self.submaps = {submap.id: submap for submap in submaps}
        self.update_cells()

    def update_cells(self) -> None:
        """Rebuild the cell index with the current resolution and window."""
        logger.info("Update cells")
        self.index = CellIndex(self.map_cell_resolution, self.cell_selection_window)
        self.index.build(self.submaps.values())

    def _neighbors_within(self, center: np.ndarray, radius: float) -> tuple[list[int], np.ndarray, np.ndarray]:
        ids = self.index.collect_neighbor_point_ids(center)
        points = collect_submap_points(self.submaps, ids).points
        if not ids:
            return ids, points, np.zeros(0)
        target = np.append(center[:3], 1.0)
        sq_dists = ((points - target) ** 2).sum(axis=1)
        return ids, points, sq_dists

    def select_points_tool(
        self,
        model_matrix: Sequence[Sequence[float]],
        tool: Union[SelectionTool, int] = SelectionTool.BOX,
    ) -> list[int]:
        """Select points inside a unit box or unit sphere placed by ``model_matrix``."""
        tool = SelectionTool(tool)
        matrix = np.asarray(model_matrix, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError(f"model matrix must be 4x4, got shape {matrix.shape}")
        inv_model = np.linalg.inv(matrix)

        selected: list[int] = []
        for submap in self.submaps.values():
            local = submap.points @ (inv_model @ submap.T_world_origin).T
            if tool is SelectionTool.BOX:
                mask = np.all(local > _BOX_LOWER, axis=1) & np.all(local < _BOX_UPPER, axis=1)
            else:
                mask = (local[:, :3] ** 2).sum(axis=1) < 1.0
            selected.extend(pack_point_id(submap.id, int(i)) for i in np.flatnonzero(mask))

        self.selected_point_ids = selected
        if not selected:
            logger.warning("No points selected")
        return list(selected)

    def select_points_radius(self, center: Sequence[float], radius: float) -> list[int]:
        """Select points closer than ``radius`` to ``center``."""
        c = np.asarray(center, dtype=float).reshape(-1)
        ids, _, sq_dists = self._neighbors_within(c, radius)
        if not ids:
            logger.warning("No points selected")
            return []

        self.selected_point_ids = [pid for pid, d in zip(ids, sq_dists) if d < radius * radius]
        logger.info("Select points in radius: %d points selected", len(self.selected_point_ids))
        return list(self.selected_point_ids)

    def select_outlier_points_radius(
        self,
        center: Sequence[float],
        radius: float,
        radius_offset: float = 1.0,
        num_neighbors: int = 10,
        stddev_thresh: float = 2.0,
    ) -> list[int]:
        """Select statistical outliers among the points closer than ``radius`` to ``center``.

        Statistics are computed over the points within ``radius + radius_offset``.
        """
        if num_neighbors < 1:
            raise ValueError("num_neighbors must be at least 1")
        c = np.asarray(center, dtype=float).reshape(-1)
        ids, points, sq_dists = self._neighbors_within(c, radius)
        if not ids:
            logger.warning("No points selected")
            return []

        offset_sq = (radius + radius_offset) ** 2
        in_offset = sq_dists < offset_sq
        candidate_ids = [
            pid if d < radius * radius else None
            for pid, d, keep in zip(ids, sq_dists, in_offset)
            if keep
        ]
        region = points[in_offset]

        if len(region) < num_neighbors:
            logger.warning("Not enough points in radius")
            return list(self.selected_point_ids)

        for idx in _find_inlier_points(region, num_neighbors, stddev_thresh):
            candidate_ids[int(idx)] = None

        self.selected_point_ids = [pid for pid in candidate_ids if pid is not None]
        logger.info("Select points in radius: %d points selected", len(self.selected_point_ids))
        return list(self.selected_point_ids)

    def remove_selected_points(self) -> int:
        """Remove the selected points from their submaps and return how many were removed."""
        ids = sorted(self.selected_point_ids)
        removed = 0
        for submap_id, group in groupby(ids, key=lambda pid: unpack_point_id(pid)[0]):
            submap = self.submaps[submap_id]
            keep = np.ones(len(submap), dtype=bool)
            for pid in group:
                point_id = unpack_point_id(pid)[1]
                if point_id >= len(submap):
                    logger.warning("Invalid point id %d in submap %d", point_id, submap.id)
                    continue
                keep[point_id] = False

            removed += int(np.count_nonzero(~keep))
            submap.points = submap.points[keep]
            if submap.normals is not None:
                submap.normals = submap.normals[keep]
            if submap.covs is not None:
                submap.covs = submap.covs[keep]
            self.index.reindex_submap(submap)

        self.selected_point_ids = []
        return removed
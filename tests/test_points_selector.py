import numpy as np
import pytest

from glimkit.cell_index import SubmapPoints
from glimkit.map_cell import pack_point_id, unpack_point_id
from glimkit.points_selector import PointsSelector, SelectionTool


def _translation(x, y, z):
    pose = np.eye(4)
    pose[:3, 3] = [x, y, z]
    return pose


@pytest.fixture
def selector():
    sub0 = SubmapPoints(id=0, points=[[0, 0, 0], [0.4, 0, 0], [1.0, 0, 0]])
    sub1 = SubmapPoints(id=1, points=[[0, 0, 0], [5, 5, 5]], T_world_origin=_translation(0.2, 0, 0))
    s = PointsSelector()
    s.set_submaps([sub0, sub1])
    return s


NEAR_ORIGIN = {pack_point_id(0, 0), pack_point_id(0, 1), pack_point_id(1, 0)}


def test_box_tool_selects_points_inside_unit_box(selector):
    result = selector.select_points_tool(np.eye(4), SelectionTool.BOX)
    assert set(result) == NEAR_ORIGIN
    assert set(selector.selected_point_ids) == NEAR_ORIGIN


def test_sphere_tool_respects_model_scale(selector):
    scale = np.diag([2.0, 2.0, 2.0, 1.0])
    result = selector.select_points_tool(scale, SelectionTool.SPHERE)
    assert set(result) == NEAR_ORIGIN | {pack_point_id(0, 2)}


def test_tool_away_from_points_selects_nothing(selector):
    result = selector.select_points_tool(_translation(-50, -50, -50), SelectionTool.BOX)
    assert result == []


def test_radius_selection(selector):
    result = selector.select_points_radius([0, 0, 0], 0.5)
    assert set(result) == NEAR_ORIGIN


def test_radius_selection_without_neighbors_keeps_nothing(selector):
    assert selector.select_points_radius([500, 500, 500], 1.0) == []


def test_remove_selected_points_updates_submaps_and_cells(selector):
    selector.select_points_radius([0, 0, 0], 0.5)
    removed = selector.remove_selected_points()
    assert removed == 3
    assert selector.selected_point_ids == []
    assert len(selector.submaps[0]) == 1
    assert len(selector.submaps[1]) == 1
    np.testing.assert_allclose(selector.submaps[0].points[0], [1.0, 0, 0, 1.0])
    np.testing.assert_allclose(selector.submaps[1].points[0], [5, 5, 5, 1.0])

    ids = selector.index.collect_neighbor_point_ids([0, 0, 0])
    assert sorted(ids) == sorted([pack_point_id(0, 0), pack_point_id(1, 0)])
    for pid in ids:
        submap_id, point_id = unpack_point_id(pid)
        assert point_id < len(selector.submaps[submap_id])


def test_outlier_selection_finds_isolated_point():
    grid = [[0.1 * i, 0.1 * j, 0.0] for i in range(5) for j in range(5)]
    grid.append([1.5, 0.0, 0.0])
    s = PointsSelector()
    s.set_submaps([SubmapPoints(id=0, points=grid)])
    result = s.select_outlier_points_radius([0, 0, 0], 3.0, 1.0, 3, 2.0)
    assert result == [pack_point_id(0, 25)]


def test_outlier_selection_needs_enough_points(selector):
    result = selector.select_outlier_points_radius([0, 0, 0], 1.0, 0.5, 50, 2.0)
    assert result == []
    assert selector.selected_point_ids == []


def test_outlier_selection_rejects_zero_neighbors(selector):
    with pytest.raises(ValueError):
        selector.select_outlier_points_radius([0, 0, 0], 1.0, 0.5, 0, 2.0)


def test_clear_forgets_everything(selector):
    selector.select_points_radius([0, 0, 0], 0.5)
    selector.clear()
    assert selector.submaps == {}
    assert selector.selected_point_ids == []
    assert selector.index.cells == {}


def test_update_cells_uses_current_resolution(selector):
    selector.map_cell_resolution = 100.0
    selector.update_cells()
    assert len(selector.index.cells) == 1
    cell = next(iter(selector.index.cells.values()))
    assert len(cell.point_ids) == 5
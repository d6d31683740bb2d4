import pytest

from glimkit.map_cell import MapCell, pack_point_id, unpack_point_id


def test_pack_layout_puts_submap_in_high_bits():
    assert pack_point_id(1, 5) == 4294967301
    assert pack_point_id(0, 7) == 7


@pytest.mark.parametrize("submap_id,point_id", [(0, 0), (3, 12345), (2**32 - 1, 2**32 - 1)])
def test_pack_unpack_round_trip(submap_id, point_id):
    assert unpack_point_id(pack_point_id(submap_id, point_id)) == (submap_id, point_id)


@pytest.mark.parametrize("submap_id,point_id", [(-1, 0), (0, -1), (0, 2**32), (2**32, 0)])
def test_pack_rejects_out_of_range(submap_id, point_id):
    with pytest.raises(ValueError):
        pack_point_id(submap_id, point_id)


def test_unpack_rejects_negative():
    with pytest.raises(ValueError):
        unpack_point_id(-5)


def test_name_uses_coordinates():
    cell = MapCell(2.0, (1, -2, 3))
    assert cell.name() == "cell_1_-2_3"


def test_bad_coordinate_length():
    with pytest.raises(ValueError):
        MapCell(1.0, (1, 2))


def test_add_and_clear():
    cell = MapCell(1.0, (0, 0, 0))
    cell.add_point(2, 4)
    cell.add_points(3, [1, 2])
    assert [unpack_point_id(pid) for pid in cell.point_ids] == [(2, 4), (3, 1), (3, 2)]
    cell.clear()
    assert cell.point_ids == []


def test_remove_submap_keeps_others_in_order():
    cell = MapCell(1.0, (0, 0, 0))
    cell.add_points(1, [0, 1])
    cell.add_points(2, [5])
    cell.add_points(1, [9])
    cell.remove_submap(1)
    assert [unpack_point_id(pid) for pid in cell.point_ids] == [(2, 5)]


def test_remove_submaps():
    cell = MapCell(1.0, (0, 0, 0))
    for submap_id in range(4):
        cell.add_points(submap_id, [0, 1])
    cell.remove_submaps([0, 2])
    remaining = {unpack_point_id(pid)[0] for pid in cell.point_ids}
    assert remaining == {1, 3}
    assert len(cell.point_ids) == 4
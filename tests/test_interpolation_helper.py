import pytest

from glimkit.interpolation_helper import (
    InterpolationHelper,
    InterpolationResult,
    SearchMode,
)

STAMPS = [1.0, 2.0, 3.0, 4.0, 5.0]


def make_helper(mode):
    helper = InterpolationHelper(mode)
    for stamp in STAMPS:
        helper.add(stamp, f"v{stamp}")
    return helper


def test_empty_helper():
    helper = InterpolationHelper()
    assert helper.empty()
    assert helper.leftmost_time() == 0.0
    assert helper.rightmost_time() == 0.0
    assert helper.find(1.0).result is InterpolationResult.WAITING


def test_leftmost_and_rightmost():
    helper = make_helper(SearchMode.LINEAR)
    assert helper.leftmost_time() == STAMPS[0]
    assert helper.rightmost_time() == STAMPS[-1]
    assert len(helper) == len(STAMPS)


@pytest.mark.parametrize("mode", list(SearchMode))
def test_find_before_all_values_fails(mode):
    helper = make_helper(mode)
    assert helper.find(STAMPS[0] - 0.5).result is InterpolationResult.FAILURE


@pytest.mark.parametrize("mode", list(SearchMode))
def test_find_after_all_values_waits(mode):
    helper = make_helper(mode)
    match = helper.find(STAMPS[-1] + 0.5)
    assert match.result is InterpolationResult.WAITING
    assert match.left is None


@pytest.mark.parametrize("mode", list(SearchMode))
@pytest.mark.parametrize("target", [1.5, 2.0, 2.7, 4.9, 5.0])
def test_find_brackets_target(mode, target):
    helper = make_helper(mode)
    match = helper.find(target)
    assert match.result is InterpolationResult.SUCCESS
    left_stamp, left_value = match.left
    right_stamp, right_value = match.right
    assert left_stamp <= target <= right_stamp
    left_index = STAMPS.index(left_stamp)
    assert STAMPS[left_index + 1] == right_stamp
    assert left_value == f"v{left_stamp}"
    assert right_value == f"v{right_stamp}"
    assert match.remove_cursor == left_index - 1


@pytest.mark.parametrize("target", [1.5, 2.0, 3.3, 5.0])
def test_search_modes_agree(target):
    linear = make_helper(SearchMode.LINEAR).find(target)
    binary = make_helper(SearchMode.BINARY).find(target)
    assert linear == binary


def test_erase_with_cursor():
    helper = make_helper(SearchMode.LINEAR)
    match = helper.find(4.5)
    helper.erase(match.remove_cursor)
    assert len(helper) == len(STAMPS) - match.remove_cursor
    assert helper.leftmost_time() == STAMPS[match.remove_cursor]
    after = helper.find(4.5)
    assert after.left == match.left
    assert after.remove_cursor == 0


def test_erase_non_positive_is_noop():
    helper = make_helper(SearchMode.LINEAR)
    helper.erase(0)
    helper.erase(-1)
    assert len(helper) == len(STAMPS)


def test_non_ordered_add_is_ignored():
    helper = make_helper(SearchMode.LINEAR)
    helper.add(STAMPS[0] - 1.0, "old")
    assert len(helper) == len(STAMPS)
    assert helper.leftmost_time() == STAMPS[0]


def test_linear_target_at_first_stamp_succeeds():
    helper = make_helper(SearchMode.LINEAR)
    match = helper.find(STAMPS[0])
    assert match.left[0] == STAMPS[0]
    assert match.right[0] == STAMPS[1]


def test_binary_target_at_first_stamp_is_invalid():
    helper = make_helper(SearchMode.BINARY)
    with pytest.raises(RuntimeError):
        helper.find(STAMPS[0])


def test_single_value_exact_match_is_invalid():
    helper = InterpolationHelper()
    helper.add(STAMPS[0], "only")
    with pytest.raises(RuntimeError):
        helper.find(STAMPS[0])
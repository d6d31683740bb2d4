import numpy as np
import pytest

from glimkit.formatting import convert_to_string, format_pose, format_quaternion, format_vector


def _numbers(text, prefix):
    assert text.startswith(prefix + "(") and text.endswith(")")
    return [float(part) for part in text[len(prefix) + 1 : -1].split(",")]


def test_scalars():
    assert convert_to_string(42) == "42"
    assert convert_to_string(1.5) == "1.5"
    assert convert_to_string("abc") == "abc"


def test_booleans():
    assert convert_to_string(True) == "true"
    assert convert_to_string(False) == "false"


def test_whole_float_has_no_fraction():
    assert convert_to_string(2.0) == "2"


def test_list_is_bracketed_and_recursive():
    assert convert_to_string([1, 2, 3]) == "[1,2,3]"
    assert convert_to_string(["a", [True]]) == "[a,[true]]"
    assert convert_to_string([]) == "[]"


def test_vector_six_decimals():
    text = format_vector([1.0, -2.25])
    assert text == "vec(1.000000,-2.250000)"


def test_ndarray_dispatches_to_vector():
    values = np.array([0.5, 1.5, 2.5])
    assert convert_to_string(values) == format_vector(values)
    assert _numbers(convert_to_string(values), "vec") == [0.5, 1.5, 2.5]


def test_quaternion_format():
    text = format_quaternion([0.0, 0.0, 0.0, 1.0])
    assert _numbers(text, "quat") == [0.0, 0.0, 0.0, 1.0]
    assert all(len(part.split(".")[1]) == 6 for part in text[5:-1].split(","))


def test_quaternion_wrong_size_raises():
    with pytest.raises(ValueError):
        format_quaternion([1.0, 2.0])


def test_pose_format_translation_and_rotation():
    pose = np.eye(4)
    pose[:3, 3] = [1.0, 2.0, 3.0]
    numbers = _numbers(format_pose(pose), "se3")
    assert numbers == [1.0, 2.0, 3.0, 0.0, 0.0, 0.0, 1.0]
    assert convert_to_string(pose) == format_pose(pose)


def test_pose_wrong_shape_raises():
    with pytest.raises(ValueError):
        format_pose(np.eye(3))


def test_unformattable_array_raises():
    with pytest.raises(ValueError):
        convert_to_string(np.zeros((2, 3)))
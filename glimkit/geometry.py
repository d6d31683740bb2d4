"""Conversions between flat parameter lists, quaternions and rigid poses.

Quaternions are stored as ``(x, y, z, w)``. Poses are 4x4 homogeneous
matrices, and their flat form is ``[tx, ty, tz, qx, qy, qz, qw]``.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

POSE_LENGTH = 7


def _normalized(quat: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(quat))
    return quat / norm if norm > 0.0 else quat


def quaternion_to_rotation(quat: Sequence[float]) -> np.ndarray:
    """Return the 3x3 rotation matrix of a quaternion ``(x, y, z, w)``, normalised first."""
    q = np.asarray(quat, dtype=float).reshape(-1)
    if q.size != 4:
        raise ValueError(f"a quaternion needs 4 values, got {q.size}")
    x, y, z, w = _normalized(q)
    return np.array(
        [
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)],
            [2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)],
            [2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)],
        ]
    )


def rotation_to_quaternion(rotation: Sequence[Sequence[float]]) -> np.ndarray:
    """Return the quaternion ``(x, y, z, w)`` of a 3x3 rotation matrix."""
    m = np.asarray(rotation, dtype=float)
    if m.shape != (3, 3):
        raise ValueError(f"a rotation matrix must be 3x3, got shape {m.shape}")

    trace = m[0, 0] + m[1, 1] + m[2, 2]
    q = np.zeros(4)  # x, y, z, w
    if trace > 0.0:
        t = np.sqrt(trace + 1.0)
        q[3] = 0.5 * t
        t = 0.5 / t
        q[0] = (m[2, 1] - m[1, 2]) * t
        q[1] = (m[0, 2] - m[2, 0]) * t
        q[2] = (m[1, 0] - m[0, 1]) * t
    else:
        i = 0
        if m[1, 1] > m[0, 0]:
            i = 1
        if m[2, 2] > m[i, i]:
            i = 2
        j = (i + 1) % 3
        k = (j + 1) % 3
        t = np.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
        q[i] = 0.5 * t
        t = 0.5 / t
        q[3] = (m[k, j] - m[j, k]) * t
        q[j] = (m[j, i] + m[i, j]) * t
        q[k] = (m[k, i] + m[i, k]) * t
    return q


def pose_from_list(values: Sequence[float]) -> np.ndarray:
    """Build a 4x4 pose from ``[tx, ty, tz, qx, qy, qz, qw]``."""
    v = np.asarray(values, dtype=float).reshape(-1)
    if v.size != POSE_LENGTH:
        raise ValueError(f"a pose needs {POSE_LENGTH} values, got {v.size}")
    pose = np.eye(4)
    pose[:3, 3] = v[:3]
    pose[:3, :3] = quaternion_to_rotation(v[3:])
    return pose


def pose_to_list(pose: Sequence[Sequence[float]]) -> list[float]:
    """Flatten a 4x4 pose into ``[tx, ty, tz, qx, qy, qz, qw]``."""
    p = np.asarray(pose, dtype=float)
    if p.shape != (4, 4):
        raise ValueError(f"a pose must be 4x4, got shape {p.shape}")
    quat = rotation_to_quaternion(p[:3, :3])
    return [float(value) for value in (*p[:3, 3], *quat)]


def poses_from_list(values: Sequence[float]) -> list[np.ndarray]:
    """Build consecutive poses from a flat list whose length is a multiple of 7."""
    v = np.asarray(values, dtype=float).reshape(-1)
    if v.size % POSE_LENGTH:
        raise ValueError(f"pose list length {v.size} is not a multiple of {POSE_LENGTH}")
    return [pose_from_list(chunk) for chunk in v.reshape(-1, POSE_LENGTH)]


def poses_to_list(poses: Iterable[Sequence[Sequence[float]]]) -> list[float]:
    """Flatten poses into one list of 7 values per pose."""
    return [value for pose in poses for value in pose_to_list(pose)]
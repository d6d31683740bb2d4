"""Human-readable string forms of parameter values, used in log messages."""

from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np

from glimkit.geometry import rotation_to_quaternion


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_vector(values: Sequence[float]) -> str:
    """Format a numeric vector as ``vec(a,b,...)`` with six decimals."""
    flat = np.asarray(values, dtype=float).reshape(-1)
    return "vec(" + ",".join(f"{value:.6f}" for value in flat) + ")"


def format_quaternion(quat: Sequence[float]) -> str:
    """Format a quaternion ``(x, y, z, w)`` as ``quat(x,y,z,w)``."""
    q = np.asarray(quat, dtype=float).reshape(-1)
    if q.size != 4:
        raise ValueError(f"a quaternion needs 4 values, got {q.size}")
    return "quat(" + ",".join(f"{value:.6f}" for value in q) + ")"


def format_pose(pose: Sequence[Sequence[float]]) -> str:
    """Format a 4x4 pose as ``se3(tx,ty,tz,qx,qy,qz,qw)``."""
    p = np.asarray(pose, dtype=float)
    if p.shape != (4, 4):
        raise ValueError(f"a pose must be 4x4, got shape {p.shape}")
    values = (*p[:3, 3], *rotation_to_quaternion(p[:3, :3]))
    return "se3(" + ",".join(f"{value:.6f}" for value in values) + ")"


def convert_to_string(value: Any) -> str:
    """Format a parameter value: scalars plainly, lists as ``[a,b]``, arrays as vectors or poses."""
    if isinstance(value, np.ndarray):
        if value.ndim == 1:
            return format_vector(value)
        if value.shape == (4, 4):
            return format_pose(value)
        if value.ndim == 2 and 1 in value.shape:
            return format_vector(value)
        raise ValueError(f"cannot format an array of shape {value.shape}")
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        return _format_float(float(value))
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(convert_to_string(item) for item in value) + "]"
    return str(value)
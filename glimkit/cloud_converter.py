"""Conversion between packed point cloud messages and in-memory point clouds."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

import numpy as np

from glimkit.raw_points import RawPoints

logger = logging.getLogger(__name__)


class CloudConversionError(Exception):
    """Raised when a point cloud message cannot be decoded."""


class PointFieldType(IntEnum):
    """Data type codes of point fields."""

    INT8 = 1
    UINT8 = 2
    INT16 = 3
    UINT16 = 4
    INT32 = 5
    UINT32 = 6
    FLOAT32 = 7
    FLOAT64 = 8


_NUMPY_CODES = {
    PointFieldType.INT8: "i1",
    PointFieldType.UINT8: "u1",
    PointFieldType.INT16: "i2",
    PointFieldType.UINT16: "u2",
    PointFieldType.INT32: "i4",
    PointFieldType.UINT32: "u4",
    PointFieldType.FLOAT32: "f4",
    PointFieldType.FLOAT64: "f8",
}


def to_sec(sec: int, nanosec: int) -> float:
    """Combine whole seconds and nanoseconds into seconds."""
    return sec + nanosec / 1e9


def from_sec(time: float) -> tuple[int, int]:
    """Split seconds into ``(sec, nanosec)``."""
    sec = math.floor(time)
    nanosec = int((time - sec) * 1e9)
    return sec, nanosec


@dataclass
class PointField:
    """Name, byte offset and data type of one per-point field."""

    name: str
    offset: int
    datatype: int
    count: int = 1


@dataclass
class PointCloud2:
    """A packed point cloud: ``width * height`` records of ``point_step`` bytes."""

    width: int = 0
    height: int = 1
    fields: list[PointField] = field(default_factory=list)
    point_step: int = 0
    row_step: int = 0
    data: bytes = b""
    is_bigendian: bool = False
    frame_id: str = ""
    sec: int = 0
    nanosec: int = 0

    @property
    def stamp(self) -> float:
        return to_sec(self.sec, self.nanosec)


@dataclass
class PointCloudFrame:
    """A point cloud with optional per-point times, intensities and RGBA colours in [0, 1]."""

    points: np.ndarray
    times: Optional[np.ndarray] = None
    intensities: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        points = np.asarray(self.points, dtype=float)
        if points.ndim == 1 and points.size == 0:
            points = points.reshape(0, 3)
        if points.ndim != 2 or points.shape[1] not in (3, 4):
            raise ValueError(f"points must have 3 or 4 columns, got shape {points.shape}")
        self.points = points
        count = len(points)
        for name in ("times", "intensities"):
            values = getattr(self, name)
            if values is not None:
                values = np.asarray(values, dtype=float).reshape(-1)
                if len(values) != count:
                    raise ValueError(f"{name} has {len(values)} entries for {count} points")
                setattr(self, name, values)
        if self.colors is not None:
            colors = np.asarray(self.colors, dtype=float)
            if colors.shape != (count, 4):
                raise ValueError(f"colors must have shape ({count}, 4), got {colors.shape}")
            self.colors = colors

    def __len__(self) -> int:
        return len(self.points)


class _FieldReader:
    """Reads strided per-point values out of a message's data buffer."""

    def __init__(self, msg: PointCloud2, num_points: int) -> None:
        self._data = bytes(msg.data)
        self._step = msg.point_step
        self._count = num_points
        self._endian = ">" if msg.is_bigendian else "<"

    def _check(self, offset: int, size: int) -> None:
        if self._count == 0:
            return
        end = offset + (self._count - 1) * self._step + size
        if offset < 0 or end > len(self._data):
            raise CloudConversionError("point data is shorter than the field layout requires")

    def read(self, offset: int, datatype: int) -> np.ndarray:
        dtype = np.dtype(self._endian + _NUMPY_CODES[PointFieldType(datatype)])
        if self._count == 0:
            return np.zeros(0, dtype=dtype)
        self._check(offset, dtype.itemsize)
        view = np.ndarray(
            (self._count,), dtype=dtype, buffer=self._data, offset=offset, strides=(self._step,)
        )
        return np.array(view)

    def read_bytes(self, offset: int, size: int) -> np.ndarray:
        if self._count == 0:
            return np.zeros((0, size), dtype=np.uint8)
        self._check(offset, size)
        view = np.ndarray(
            (self._count, size),
            dtype=np.uint8,
            buffer=self._data,
            offset=offset,
            strides=(self._step, 1),
        )
        return np.array(view)


_FLOAT_TYPES = (PointFieldType.FLOAT32, PointFieldType.FLOAT64)


def extract_raw_points(
    msg: PointCloud2, intensity_channel: str = "intensity", ring_channel: str = ""
) -> RawPoints:
    """Decode a packed point cloud into RawPoints; raise CloudConversionError if it cannot."""
    num_points = msg.width * msg.height

    slots = {
        "x": "x",
        "y": "y",
        "z": "z",
        "t": "time",
        "time": "time",
        "time_stamp": "time",
        "timestamp": "time",
    }
    slots[intensity_channel] = "intensity"
    slots["rgba"] = "color"
    slots[ring_channel] = "ring"

    found: dict[str, PointField] = {}
    for point_field in msg.fields:
        slot = slots.get(point_field.name)
        if slot is not None:
            found[slot] = point_field

    if any(axis not in found for axis in ("x", "y", "z")):
        raise CloudConversionError("missing point coordinate fields")

    x_type = found["x"].datatype
    if x_type not in _FLOAT_TYPES or x_type != found["y"].datatype:
        raise CloudConversionError("unsupported points type")

    reader = _FieldReader(msg, num_points)
    raw = RawPoints()

    points = np.ones((num_points, 4), dtype=float)
    for column, axis in enumerate(("x", "y", "z")):
        points[:, column] = reader.read(found[axis].offset, x_type)
    raw.points = points

    time_field = found.get("time")
    if time_field is not None:
        if time_field.datatype == PointFieldType.UINT32:
            raw.times = reader.read(time_field.offset, time_field.datatype).astype(float) / 1e9
        elif time_field.datatype in _FLOAT_TYPES:
            raw.times = reader.read(time_field.offset, time_field.datatype).astype(float)
        else:
            raise CloudConversionError(f"unsupported time type {time_field.datatype}")

    intensity_field = found.get("intensity")
    if intensity_field is not None:
        if intensity_field.datatype not in (
            PointFieldType.UINT8,
            PointFieldType.UINT16,
            PointFieldType.UINT32,
            PointFieldType.FLOAT32,
            PointFieldType.FLOAT64,
        ):
            raise CloudConversionError(f"unsupported intensity type {intensity_field.datatype}")
        raw.intensities = reader.read(intensity_field.offset, intensity_field.datatype).astype(float)

    color_field = found.get("color")
    if color_field is not None:
        if color_field.datatype != PointFieldType.UINT32:
            logger.warning("unsupported color type %s", color_field.datatype)
        else:
            raw.colors = reader.read_bytes(color_field.offset, 4).astype(float) / 255.0

    ring_field = found.get("ring")
    if ring_field is not None:
        if ring_field.datatype not in (
            PointFieldType.UINT8,
            PointFieldType.UINT16,
            PointFieldType.UINT32,
        ):
            raise CloudConversionError(f"unsupported ring type {ring_field.datatype}")
        raw.rings = reader.read(ring_field.offset, ring_field.datatype).astype(np.uint32)

    raw.stamp = msg.stamp
    return raw


def frame_to_pointcloud2(frame_id: str, stamp: float, frame: PointCloudFrame) -> PointCloud2:
    """Pack a point cloud into a little-endian message with float32 fields."""
    count = len(frame)
    f32 = PointFieldType.FLOAT32
    float_size = 4

    fields = [
        PointField("x", 0, f32),
        PointField("y", float_size, f32),
        PointField("z", 2 * float_size, f32),
    ]
    layout: list[tuple[str, object]] = [("x", "<f4"), ("y", "<f4"), ("z", "<f4")]
    point_step = 3 * float_size

    if frame.times is not None:
        fields.append(PointField("t", point_step, f32))
        layout.append(("t", "<f4"))
        point_step += float_size

    if frame.intensities is not None:
        fields.append(PointField("intensity", point_step, f32))
        layout.append(("intensity", "<f4"))
        point_step += float_size

    if frame.colors is not None:
        fields.append(PointField("rgba", point_step, PointFieldType.UINT32))
        layout.append(("rgba", ("u1", (4,))))
        point_step += 4

    offsets = [point_field.offset for point_field in fields]
    dtype = np.dtype(
        {
            "names": [name for name, _ in layout],
            "formats": [fmt for _, fmt in layout],
            "offsets": offsets,
            "itemsize": point_step,
        }
    )
    records = np.zeros(count, dtype=dtype)
    records["x"] = frame.points[:, 0]
    records["y"] = frame.points[:, 1]
    records["z"] = frame.points[:, 2]
    if frame.times is not None:
        records["t"] = frame.times
    if frame.intensities is not None:
        records["intensity"] = frame.intensities
    if frame.colors is not None:
        scaled = frame.colors.astype(np.float32) * np.float32(255.0)
        records["rgba"] = np.clip(scaled, 0.0, 255.0).astype(np.uint8)

    sec, nanosec = from_sec(stamp)
    return PointCloud2(
        width=count,
        height=1,
        fields=fields,
        point_step=point_step,
        row_step=point_step * count,
        data=records.tobytes(),
        is_bigendian=False,
        frame_id=frame_id,
        sec=sec,
        nanosec=nanosec,
    )
"""Utilities for LiDAR point cloud mapping: queues, interpolation, pose helpers, cloud conversion, cell indexing and point selection."""

__version__ = "1.1.0"
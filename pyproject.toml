[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glimkit"
version = "1.1.0"
description = "Point cloud mapping utilities: callback slots, thread-safe queues, timestamp interpolation, pose helpers, packed cloud conversion, map cell indexing and point selection"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["lidar", "point cloud", "slam", "mapping", "pointcloud2", "voxel"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["glimkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true

# glimkit

Building blocks for LiDAR mapping pipelines, based on numpy.

## Installation

```
pip install glimkit
```

To run the test suite, install the test extra and run pytest:

```
pip install "glimkit[test]"
pytest
```

## What is inside

- `glimkit.callback_slot.CallbackSlot`: holds a list of callbacks. `add` returns an id, `remove` unregisters by id, and calling the slot calls every callback that is still registered, in order. The slot is true when at least one callback is registered.
- `glimkit.concurrent_vector.ConcurrentVector`: a thread-safe FIFO queue with an optional size policy (`DataStorePolicy.unlimited()` or `DataStorePolicy.upto(max_size, pop_front)`). `pop_wait` and `get_all_and_clear_wait` block until data arrives, and return `None` or an empty list once `submit_end_of_data` has been called and the queue is empty.
- `glimkit.interpolation_helper.InterpolationHelper`: a time-ordered stream of values. `find(stamp)` returns an `InterpolationMatch` whose `result` is `SUCCESS`, `FAILURE` (all values are newer) or `WAITING` (all values are older). It searches linearly or by bisection (`SearchMode`).
- `glimkit.geometry`: conversions between quaternions `(x, y, z, w)`, 3x3 rotations, 4x4 poses and flat `[tx, ty, tz, qx, qy, qz, qw]` lists.
- `glimkit.formatting`: string forms of values for log messages, such as `vec(...)`, `quat(...)` and `se3(...)`.
- `glimkit.raw_points.RawPoints`: one scan, with homogeneous points and optional per-point times, intensities, colours and ring numbers.
- `glimkit.cloud_converter`: `extract_raw_points` decodes a packed `PointCloud2` message into `RawPoints`, and raises `CloudConversionError` when it cannot. `frame_to_pointcloud2` packs a `PointCloudFrame` into a little-endian message with float32 fields. It adds optional `t`, `intensity` and `rgba` fields when the frame has that data.
- `glimkit.map_cell`: `pack_point_id` / `unpack_point_id` combine a submap id and a point index into one 64-bit id. `MapCell` is a voxel cell that holds such ids.
- `glimkit.cell_index`: `SubmapPoints` holds the points of one submap and their world pose. `CellIndex` assigns world points to cubic cells and collects the ids of points in a window of cells around a location. `collect_submap_points` gathers world-frame points for a list of ids.
- `glimkit.points_selector.PointsSelector`: selects points inside a unit box or sphere placed by a 4x4 matrix (`SelectionTool`), within a radius, or as statistical outliers within a radius. It then removes the selected points from their submaps.

## Examples

```python
from glimkit.interpolation_helper import InterpolationHelper, InterpolationResult

helper = InterpolationHelper()
for stamp in (0.0, 1.0, 2.0):
    helper.add(stamp, f"value@{stamp}")

match = helper.find(1.5)
if match.result is InterpolationResult.SUCCESS:
    print(match.left, match.right)  # (1.0, 'value@1.0') (2.0, 'value@2.0')
```

```python
import numpy as np
from glimkit.cloud_converter import PointCloudFrame, extract_raw_points, frame_to_pointcloud2

frame = PointCloudFrame(points=np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]]))
msg = frame_to_pointcloud2("map", 1.5, frame)
raw = extract_raw_points(msg)
print(len(raw), raw.stamp)  # 2 1.5
```

```python
import numpy as np
from glimkit.cell_index import SubmapPoints
from glimkit.points_selector import PointsSelector

selector = PointsSelector(map_cell_resolution=2.0, cell_selection_window=5)
selector.set_submaps([SubmapPoints(id=0, points=np.array([[0.0, 0.0, 0.0], [5.0, 0.0, 0.0]]))])
selector.select_points_radius([0.0, 0.0, 0.0], 1.0)
print(selector.remove_selected_points())  # 1
```

## What it does not do

glimkit has no command-line program and no viewer or editing screen. The selection tools are plain function calls. It does not read or write configuration files, and it does not load or save maps. It does not estimate odometry, optimise pose graphs, or watch memory use.
import pytest

from orbittrails.camera import Camera3D


def test_target_projects_to_viewport_center():
    cam = Camera3D(distance=100.0)
    cam.set_viewport_size(800, 600)
    sx, sy, depth = cam.project((0.0, 0.0, 0.0))
    assert (sx, sy) == pytest.approx((400.0, 300.0))
    assert depth == pytest.approx(100.0)


def test_default_view_maps_x_right_and_y_up():
    cam = Camera3D(distance=100.0, pitch=0.0)
    cam.set_viewport_size(800, 600)
    right = cam.project((10.0, 0.0, 0.0))
    up = cam.project((0.0, 10.0, 0.0))
    assert right[0] > 400.0
    assert right[1] == pytest.approx(300.0)
    assert up[1] < 300.0


def test_points_behind_camera_are_culled():
    cam = Camera3D(distance=100.0)
    behind = tuple(c * 2 for c in cam.position())
    assert cam.project(behind) is None


def test_nearer_objects_look_bigger():
    cam = Camera3D(distance=100.0)
    assert cam.projected_radius(1.0, 50.0) == pytest.approx(2 * cam.projected_radius(1.0, 100.0))


def test_rotate_and_zoom_are_clamped():
    cam = Camera3D(distance=100.0, yaw=350.0, pitch=80.0)
    cam.rotate(20.0, 30.0)
    assert cam.yaw == pytest.approx(10.0)
    assert cam.pitch == 89.0
    cam.zoom(2.0)
    assert cam.distance == pytest.approx(50.0)
    cam.zoom(1e-9)
    assert cam.distance == pytest.approx(100.0 / 0.05 * 0.5)

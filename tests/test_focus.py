import logging

import numpy as np

from tapfocus.config import FocusConfig
from tapfocus.core.camera import PerspectiveCamera, ray_from_tap
from tapfocus.core.half_float import encode_float16_array
from tapfocus.core.ray_match import Ray
from tapfocus.core.sampling import AxisSigns
from tapfocus.focus import evaluate_focus, pick_focus_point


def test_end_to_end_three_points():
    encoded = encode_float16_array(np.array([[1, 2, 3], [-4, 0.5, -2], [6, -1, 7]], dtype=np.float64))
    # Engine coordinates of the second point are (4, -0.5, -2).
    ray = Ray.through((0.0, 0.0, 10.0), (4.0, -0.5, -2.0))
    pick = pick_focus_point(encoded, 3, ray, FocusConfig(target_sample_count=9))

    assert pick is not None
    assert pick.stride == 1
    assert pick.sampled_point_count == 3
    assert pick.point_index == 1
    assert np.allclose(pick.point, [4.0, -0.5, -2.0])
    assert pick.match.distance_sq < 1e-12


def test_point_index_maps_back_through_stride():
    pts = np.zeros((100, 3), dtype=np.float64)
    pts[:, 2] = np.arange(100, dtype=np.float64) * 0.25
    pts[40] = [-2.0, -2.0, 3.0]
    encoded = encode_float16_array(pts)

    cfg = FocusConfig(target_sample_count=10, axis_signs=AxisSigns(1, 1, 1))
    outcome = evaluate_focus(encoded, 100, Ray(origin=(0.0, 0.0, 0.0), direction=(-1.0, -1.0, 1.5)), cfg)
    assert outcome.ok
    assert outcome.pick.stride == 10
    assert outcome.pick.point_index == 40
    assert np.allclose(outcome.pick.point, [-2.0, -2.0, 3.0])


def test_rejection_reasons(caplog):
    encoded = encode_float16_array(np.array([[0.0, 0.0, 5.0]]))
    cfg = FocusConfig(axis_signs=AxisSigns(1, 1, 1), max_distance_sq=0.5)

    with caplog.at_level(logging.DEBUG, logger="tapfocus.focus"):
        degenerate = evaluate_focus(encoded, 1, Ray(origin=(0.0, 0.0, 0.0), direction=(0.0, 0.0, 0.0)), cfg)
        behind = evaluate_focus(encoded, 1, Ray(origin=(0.0, 0.0, 0.0), direction=(0.0, 0.0, -1.0)), cfg)
        far = evaluate_focus(encoded, 1, Ray(origin=(3.0, 0.0, 0.0), direction=(0.0, 0.0, 1.0)), cfg)

    assert degenerate.pick is None and degenerate.rejected_reason == "degenerate-ray"
    assert behind.pick is None and behind.rejected_reason == "no-candidate"
    assert far.pick is None and far.rejected_reason == "no-candidate"
    assert any("degenerate" in r.getMessage() for r in caplog.records)


def test_tap_to_focus_through_camera():
    rng = np.random.default_rng(3)
    cloud = rng.uniform(-5, 5, size=(5000, 3))
    target_point = np.array([1.25, -0.75, 0.5])
    cloud[0] = target_point
    encoded = encode_float16_array(cloud)

    cam = PerspectiveCamera(position=(0.0, 0.0, 20.0), target=(0.0, 0.0, 0.0), aspect=1.0)
    ndc_x, ndc_y, _ = cam.project_to_ndc(target_point)
    tap_x = (ndc_x + 1.0) / 2.0 * 800
    tap_y = (1.0 - ndc_y) / 2.0 * 800
    ray = ray_from_tap(cam, tap_x, tap_y, 800, 800)

    cfg = FocusConfig(target_sample_count=10000, axis_signs=AxisSigns(1, 1, 1), max_distance_sq=0.01)
    pick = pick_focus_point(encoded, 5000, ray, cfg)
    assert pick is not None
    assert pick.point_index == 0
    assert np.allclose(pick.point, target_point, atol=1e-3)


def test_degenerate_ray_skips_sampling(monkeypatch):
    import tapfocus.focus as focus_mod

    def _fail(*args, **kwargs):
        raise AssertionError("sampler called for a degenerate ray")

    monkeypatch.setattr(focus_mod, "sample_points_for_focus", _fail)
    encoded = encode_float16_array(np.array([[0.0, 0.0, 5.0]]))
    outcome = evaluate_focus(encoded, 1, Ray(origin=(0.0, 0.0, 0.0), direction=(0.0, 0.0, 0.0)))
    assert outcome.rejected_reason == "degenerate-ray"

import logging

import numpy as np
import pytest
from PIL import Image

from coloring.filters import InvertFilter
from coloring.policy import ColoringPolicy
from fractals.base import RenderSettings
from navigation.viewport import ViewportSettings
from navigation.zoom_stack import ZoomStack
from rendering.controller import FractalController
from utils.coords import ComplexRect, ScreenPoint
from utils.enums import PanDirection

from conftest import DiskEngine


@pytest.fixture
def controller(engine):
    ctl = FractalController(engine)
    ctl.refresh()
    return ctl


def test_initial_state_is_default_view(engine):
    ctl = FractalController(engine)
    assert ctl.zoom_stack.level == 1
    assert ctl.zoom_stack.top == engine.default_bounds()
    assert ctl.get_current_image() is None
    assert ctl.recolor() is None


def test_refresh_renders_frame(engine):
    ctl = FractalController(engine)
    frames = []
    ctl.on_frame = frames.append
    assert ctl.refresh()
    image = ctl.get_current_image()
    assert image.shape == (engine.height, engine.width, 3)
    assert len(frames) == 1
    assert frames[0].width == engine.width and frames[0].height == engine.height
    assert frames[0].seq == 1


def test_engine_receives_screen_shaped_bounds(controller, engine):
    controller.zoom_in(complex(-1.0, -1.0), complex(0.0, 0.1))
    bounds = engine.complex_bounds()
    assert bounds.width / bounds.height == pytest.approx(engine.width / engine.height)


def test_zoom_in_and_out(controller, engine):
    assert controller.zoom_in(complex(-1.0, -0.5), complex(0.0, 0.5))
    assert controller.zoom_stack.level == 2
    assert controller.zoom_out()
    assert controller.zoom_stack.level == 1
    assert not controller.zoom_out()
    assert controller.zoom_stack.level == 1


def test_small_selection_leaves_stack_unchanged(controller, engine):
    before = controller.zoom_stack.clone()
    calls = engine.recalc_count
    assert not controller.zoom_to_selection(ScreenPoint(2, 2), ScreenPoint(4, 4))
    assert controller.zoom_stack == before
    assert engine.recalc_count == calls


def test_large_selection_zooms():
    engine = DiskEngine(width=200, height=100)
    ctl = FractalController(engine, settings=ViewportSettings(centred_zooming=False))
    ctl.refresh()
    assert ctl.zoom_to_selection(ScreenPoint(20, 10), ScreenPoint(80, 50))
    assert ctl.zoom_stack.level == 2
    top = ctl.zoom_stack.top.normalized()
    assert top.width < engine.default_bounds().width


def test_pan_modifies_top_only(controller):
    controller.zoom_in(complex(0.0, 0.0), complex(10.0, 10.0))
    assert controller.pan(PanDirection.LEFT, 0.5)
    assert controller.zoom_stack.level == 2
    assert controller.zoom_stack.top == ComplexRect(complex(-5.0, 0.0), complex(5.0, 10.0))


def test_reset_zoom(controller, engine):
    controller.zoom_in(complex(-1.0, -0.5), complex(0.0, 0.5))
    controller.zoom_in(complex(-0.5, -0.2), complex(0.0, 0.2))
    assert controller.reset_zoom()
    assert controller.zoom_stack.level == 1
    assert controller.zoom_stack.top == engine.default_bounds()


def test_zoom_to_level(controller):
    for k in range(1, 4):
        controller.zoom_in(complex(-1.0 / k, -1.0 / k), complex(1.0 / k, 1.0 / k))
    assert controller.zoom_stack.level == 4
    assert controller.zoom_to_level(2)
    assert controller.zoom_stack.level == 2
    assert not controller.zoom_to_level(5)
    assert controller.zoom_stack.level == 2


@pytest.mark.parametrize("level", [0, -1])
def test_zoom_to_level_below_one_is_refused(controller, level):
    controller.zoom_in(complex(-0.5, -0.5), complex(0.5, 0.5))
    top = controller.zoom_stack.top
    assert not controller.zoom_to_level(level)
    assert controller.zoom_stack.level == 2
    assert controller.zoom_stack.top == top
    assert controller.get_current_image() is not None


def test_magnification_grows_when_zooming(controller):
    assert controller.magnification() == 1
    controller.zoom_in(complex(-0.15, -0.15), complex(0.15, 0.15))
    assert controller.magnification() == 10


def test_busy_controller_rejects_nested_navigation(controller):
    nested = []

    def on_viewport(evt):
        nested.append(controller.zoom_in(complex(0.0, 0.0), complex(1.0, 1.0)))

    controller.on_viewport = on_viewport
    assert controller.zoom_in(complex(-1.0, -1.0), complex(1.0, 1.0))
    assert nested == [False]
    assert controller.zoom_stack.level == 2
    assert not controller.is_busy


def test_auto_max_iterations_remaps_policy():
    engine = DiskEngine(settings=RenderSettings(max_iterations=1000), suggested_max=2000)
    policy = ColoringPolicy.for_max_iterations(1000, discrete_color_range=500)
    ctl = FractalController(engine, policy, ViewportSettings(auto_max_iterations=True))
    assert ctl.refresh()
    assert engine.max_iterations == 2000
    assert policy.discrete_color_range == 1000
    assert policy.high_iteration_range == 2000


def test_auto_max_iterations_clamps_high_range():
    engine = DiskEngine(settings=RenderSettings(max_iterations=1000), suggested_max=500)
    policy = ColoringPolicy.for_max_iterations(1000, high_iteration_range=800,
                                               low_iteration_range=600)
    ctl = FractalController(engine, policy, ViewportSettings(auto_max_iterations=True))
    ctl.refresh()
    assert policy.high_iteration_range == 500
    assert policy.low_iteration_range == 500
    assert policy.discrete_color_range == 500


def test_auto_max_iterations_skipped_for_fixed_iterations():
    engine = DiskEngine(settings=RenderSettings(max_iterations=1000, use_fixed_iterations=True),
                        suggested_max=2000)
    ctl = FractalController(engine, settings=ViewportSettings(auto_max_iterations=True))
    ctl.refresh()
    assert engine.max_iterations == 1000


def test_set_max_iterations_keeps_discrete_fraction(controller, engine):
    controller.policy.discrete_color_range = 250
    assert controller.set_max_iterations(400)
    assert engine.max_iterations == 400
    assert controller.policy.discrete_color_range == 100
    assert controller.policy.high_iteration_range == 400


def test_post_processing_filters(controller):
    raw = controller.get_current_image().copy()
    controller.policy.filter_chain.add(InvertFilter())
    controller.policy.use_post_processing_filters = True
    filtered = controller.apply_post_processing_filters()
    np.testing.assert_array_equal(filtered, 255 - raw)


def test_export_image(controller, tmp_path):
    path = tmp_path / "frame.png"
    assert controller.export_image(path)
    with Image.open(path) as img:
        assert img.size == (controller.engine.width, controller.engine.height)
        np.testing.assert_array_equal(np.asarray(img.convert("RGB")),
                                      controller.get_current_image())


def test_export_failure_is_reported(controller, tmp_path):
    logs = []
    controller.on_log = logs.append
    assert not controller.export_image(tmp_path / "missing" / "frame.png")
    assert any(evt.level == logging.ERROR for evt in logs)


def test_export_without_image(engine, tmp_path):
    assert not FractalController(engine).export_image(tmp_path / "frame.png")


def test_zoom_stack_save_and_load(controller, tmp_path):
    controller.zoom_in(complex(-1.0, -0.5), complex(0.0, 0.5))
    path = tmp_path / "session.csv"
    controller.save_zoom_stack(path)

    other = FractalController(DiskEngine())
    assert other.load_zoom_stack(path)
    assert other.zoom_stack == controller.zoom_stack


def test_empty_zoom_stack_is_refused(controller):
    with pytest.raises(ValueError):
        controller.set_zoom_stack(ZoomStack())

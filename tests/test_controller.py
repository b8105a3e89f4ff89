import dataclasses
import logging
import threading

import pytest

from springcurve import (
    ControlPointId,
    CurveController,
    PhysicsConfig,
    ScreenSize,
    Vector2,
)
from springcurve.controller import MAX_ELAPSED_TIME, Layout


def _controller(**config) -> CurveController:
    controller = CurveController(PhysicsConfig(**config))
    controller.setup(ScreenSize(1000, 800))
    return controller


def _assert_close(actual: Vector2, expected: Vector2) -> None:
    assert actual.as_tuple() == pytest.approx(expected.as_tuple())


def test_setup_layout_for_reference_screen() -> None:
    controller = _controller()
    start, end = controller.endpoints
    assert start == Vector2(200.0, 400.0)
    assert end == Vector2(800.0, 400.0)
    assert controller.first.position == Vector2(350.0, 250.0)
    assert controller.first.target == Vector2(350.0, 250.0)
    assert controller.second.position == Vector2(650.0, 550.0)
    assert controller.second.target == Vector2(650.0, 550.0)
    assert len(controller.polyline) == 101


def test_single_tick_keeps_rest_state_and_resamples() -> None:
    controller = _controller()
    controller.tick(0.016)
    assert controller.first.position == Vector2(350.0, 250.0)
    assert controller.second.position == Vector2(650.0, 550.0)
    assert controller.update_count == 1
    polyline = controller.polyline
    assert len(polyline) == 101
    assert polyline[0] == Vector2(200.0, 400.0)
    assert polyline[-1] == Vector2(800.0, 400.0)


def test_setup_on_small_screen_uses_proportional_spread() -> None:
    controller = CurveController()
    controller.setup(ScreenSize(400, 300))
    layout = controller.layout
    assert layout is not None
    assert layout.horizontal_spread == pytest.approx(140.0)
    assert layout.vertical_spread == pytest.approx(75.0)
    start, end = controller.endpoints
    _assert_close(start, Vector2(60.0, 150.0))
    _assert_close(end, Vector2(340.0, 150.0))


def test_setup_is_idempotent() -> None:
    controller = _controller()
    first = controller.snapshot()
    controller.setup(ScreenSize(1000, 800))
    assert controller.snapshot() == first


def test_setup_ignores_empty_screen() -> None:
    controller = _controller()
    layout = controller.layout
    before = controller.snapshot()
    controller.setup(ScreenSize(0, 0))
    controller.setup(ScreenSize(-5, 800))
    assert controller.layout == layout
    assert controller.snapshot() == before
    controller.tick(0.016)
    assert controller.first.position == Vector2(350.0, 250.0)
    assert controller.update_count == 1


def test_setup_with_empty_screen_before_layout_stays_unlaid() -> None:
    controller = CurveController()
    controller.setup(ScreenSize(0, 0))
    assert controller.layout is None


def test_layout_from_empty_screen_is_rejected() -> None:
    with pytest.raises(ValueError):
        Layout.from_screen(ScreenSize(0, 800))


def test_invalid_constructor_config_is_rejected() -> None:
    with pytest.raises(ValueError):
        CurveController(PhysicsConfig(stiffness=-1.0))
    with pytest.raises(ValueError):
        CurveController(PhysicsConfig(resolution=5))


def test_controller_copies_config() -> None:
    config = PhysicsConfig()
    controller = CurveController(config)
    config.stiffness = 0.25
    assert controller.config.stiffness == PhysicsConfig().stiffness


def test_pointer_down_grabs_nearest_handle_in_priority_order() -> None:
    controller = _controller()
    assert controller.pointer_down(Vector2(500.0, 400.0)) is None
    assert controller.pointer_down(Vector2(652.0, 548.0)) is ControlPointId.SECOND
    assert controller.dragging is ControlPointId.SECOND
    # A second press while dragging grabs nothing.
    assert controller.pointer_down(Vector2(350.0, 250.0)) is None
    controller.pointer_up()
    assert controller.dragging is None


def test_first_handle_wins_when_overlapping() -> None:
    controller = _controller()
    assert controller.pointer_down(Vector2(350.0, 250.0)) is ControlPointId.FIRST
    controller.pointer_move(Vector2(650.0, 550.0))
    controller.pointer_up()
    assert controller.pointer_down(Vector2(650.0, 550.0)) is ControlPointId.FIRST


def test_drag_moves_point_and_release_pins_target() -> None:
    controller = _controller()
    controller.pointer_down(Vector2(355.0, 255.0))
    controller.pointer_move(Vector2(405.0, 305.0))
    assert controller.first.position == Vector2(400.0, 300.0)
    assert controller.first.is_dragging

    for _ in range(10):
        controller.tick(0.016)
    assert controller.first.position == Vector2(400.0, 300.0)
    assert controller.first.velocity == Vector2(0.0, 0.0)

    controller.pointer_up()
    assert not controller.first.is_dragging
    assert controller.first.target == Vector2(400.0, 300.0)
    # The other handle never moved.
    assert controller.second.position == Vector2(650.0, 550.0)


def test_pointer_move_without_drag_steers_targets() -> None:
    controller = _controller()
    controller.pointer_move(Vector2(600.0, 500.0))
    _assert_close(controller.first.target, Vector2(400.0, 300.0))
    _assert_close(controller.second.target, Vector2(615.0, 515.0))
    # Targets change immediately, positions only on the next tick.
    assert controller.first.position == Vector2(350.0, 250.0)
    controller.tick(0.1)
    assert controller.first.position != Vector2(350.0, 250.0)


def test_pointer_move_ignored_while_gyroscope_enabled() -> None:
    controller = _controller(gyroscope_enabled=True)
    controller.pointer_move(Vector2(600.0, 500.0))
    assert controller.first.target == Vector2(350.0, 250.0)
    assert controller.second.target == Vector2(650.0, 550.0)


def test_tilt_maps_to_targets() -> None:
    controller = _controller(gyroscope_enabled=True, gyro_influence=0.5)
    controller.set_tilt_input(pitch=0.1, roll=0.2)
    # gain = 0.5 * min(1000, 800) * 0.3 = 120
    _assert_close(controller.first.target, Vector2(374.0, 238.0))
    _assert_close(controller.second.target, Vector2(633.2, 558.4))


def test_tilt_ignored_without_gyroscope_or_layout() -> None:
    controller = _controller()
    controller.set_tilt_input(0.5, 0.5)
    assert controller.first.target == Vector2(350.0, 250.0)

    bare = CurveController(PhysicsConfig(gyroscope_enabled=True))
    bare.set_tilt_input(0.5, 0.5)
    assert bare.first.target == Vector2(0.0, 0.0)


def test_reset_restores_neutral_targets() -> None:
    controller = _controller()
    controller.pointer_move(Vector2(900.0, 700.0))
    moved_target = controller.first.target
    for _ in range(20):
        controller.tick(0.016)
    controller.reset()

    assert controller.update_count == 0
    assert controller.first.position == moved_target
    assert controller.first.velocity == Vector2(0.0, 0.0)
    assert controller.first.target == Vector2(350.0, 250.0)
    assert controller.second.target == Vector2(650.0, 550.0)
    assert controller.polyline[1] == controller.curve.sample(100)[1]


def test_disabling_gyroscope_resets() -> None:
    controller = _controller()
    controller.set_gyroscope_enabled(True)
    controller.set_tilt_input(0.3, -0.4)
    for _ in range(5):
        controller.tick(0.016)
    controller.set_gyroscope_enabled(False)
    assert controller.update_count == 0
    assert controller.first.target == Vector2(350.0, 250.0)
    assert not controller.config.gyroscope_enabled


def test_enabling_gyroscope_keeps_state() -> None:
    controller = _controller()
    controller.tick(0.016)
    controller.set_gyroscope_enabled(True)
    assert controller.update_count == 1


def test_tick_clamps_elapsed_time() -> None:
    stalled = _controller()
    reference = _controller()
    for controller in (stalled, reference):
        controller.pointer_move(Vector2(800.0, 700.0))
    stalled.tick(5.0)
    reference.tick(MAX_ELAPSED_TIME)
    assert stalled.first == reference.first
    assert stalled.second == reference.second


def test_zero_tick_leaves_positions_unchanged() -> None:
    controller = _controller()
    controller.pointer_move(Vector2(800.0, 700.0))
    before = controller.first.position
    controller.tick(0.0)
    assert controller.first.position == before


def test_negative_tick_leaves_positions_unchanged() -> None:
    controller = _controller()
    controller.pointer_move(Vector2(800.0, 700.0))
    first = controller.first.position
    second = controller.second.position
    controller.tick(-1.0)
    assert controller.first.position == first
    assert controller.second.position == second
    assert controller.update_count == 1


def test_stiffness_and_damping_fan_out_with_clamping(caplog) -> None:
    controller = _controller()
    controller.set_stiffness(0.2)
    controller.set_damping(0.75)
    assert controller.config.stiffness == 0.2
    assert controller.config.damping == 0.75
    assert controller._first.stiffness == controller._second.stiffness == 0.2
    assert controller._first.damping == controller._second.damping == 0.75

    with caplog.at_level(logging.WARNING, logger="springcurve"):
        controller.set_stiffness(5.0)
    assert controller.config.stiffness == 0.3
    assert controller._second.stiffness == 0.3
    assert "clamped" in caplog.text


def test_resolution_change_resamples_immediately() -> None:
    controller = _controller()
    controller.set_resolution(50)
    assert len(controller.polyline) == 51
    controller.set_resolution(1000)
    assert controller.config.resolution == 200
    assert len(controller.polyline) == 201
    controller.set_resolution(3)
    assert len(controller.polyline) == 21


def test_gyro_influence_clamped() -> None:
    controller = _controller()
    controller.set_gyro_influence(10.0)
    assert controller.config.gyro_influence == 2.0


def test_snapshot_is_frozen_and_detached() -> None:
    controller = _controller()
    snapshot = controller.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.update_count = 5  # type: ignore[misc]
    controller.pointer_move(Vector2(900.0, 100.0))
    controller.tick(0.1)
    assert snapshot.first.position == Vector2(350.0, 250.0)
    assert snapshot.screen == ScreenSize(1000, 800)
    assert snapshot.curve.p1 == Vector2(350.0, 250.0)


def test_ticks_and_input_from_two_threads() -> None:
    controller = _controller()

    def feed_input() -> None:
        for i in range(200):
            controller.pointer_move(Vector2(400.0 + i, 300.0 + i))

    worker = threading.Thread(target=feed_input)
    worker.start()
    for _ in range(200):
        controller.tick(0.016)
    worker.join()
    assert controller.update_count == 200
    assert len(controller.polyline) == 101

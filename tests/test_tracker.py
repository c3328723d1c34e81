"""Tests for multi-turn angle tracking."""

import math

import pytest

from as5050.constants import (
    ANGULAR_RESOLUTION, ERR_DSPAHI, ERR_WOW, REG_ANGLE, REG_ERROR_STATUS,
    REG_GAIN_CONTROL, REG_SOFTWARE_RESET, DATA_SWRESET_SPI,
)
from as5050.engine import TransactionEngine
from as5050.faults import FaultManager
from as5050.tracker import (
    AngleTracker, max_sample_interval_for, to_degrees, to_radians, wrap_radians,
)

from conftest import FakeAS5050


def make_tracker(samples, **kwargs):
    """Tracker whose warm-up records samples[0]; later reads follow samples[1:]."""
    fake = FakeAS5050(angles=[samples[0]] * 3 + list(samples[1:]))
    engine = TransactionEngine(fake)
    tracker = AngleTracker(engine, FaultManager(engine), **kwargs)
    return tracker, fake


def test_warm_up_discards_two_reads():
    fake = FakeAS5050(angles=[900, 901, 300])
    tracker = AngleTracker(TransactionEngine(fake))
    assert fake.angle_reads == 3
    assert tracker.last_raw_sample == 300
    assert tracker.home_offset == 300
    assert tracker.turn_count == 0


def test_forward_wrap_scenario():
    tracker, _ = make_tracker([1020, 1022, 2, 5])
    turns = []
    for _ in range(3):
        tracker.sample_raw()
        turns.append(tracker.turn_count)
    assert turns == [0, 1, 1]
    assert tracker.continuous_angle() == 1 * 1024 + 5 == 1029


def test_backward_wrap():
    tracker, _ = make_tracker([5, 2, 1022, 1020])
    for _ in range(3):
        tracker.sample_raw()
    assert tracker.turn_count == -1
    assert tracker.continuous_angle() == -1024 + 1020


@pytest.mark.parametrize("step", [200, -200, 37, -255])
def test_turn_count_follows_net_revolutions(step):
    start = 100
    positions = [start + i * step for i in range(60)]
    tracker, _ = make_tracker([p % ANGULAR_RESOLUTION for p in positions])
    for _ in positions[1:]:
        tracker.sample_raw()
    expected_turns = positions[-1] // ANGULAR_RESOLUTION
    assert tracker.turn_count == expected_turns
    assert tracker.continuous_angle() == positions[-1]


def test_back_and_forth_across_zero():
    tracker, _ = make_tracker([1000, 10, 1000, 10, 20, 1010])
    for _ in range(5):
        tracker.sample_raw()
    assert tracker.turn_count == 0
    assert tracker.last_raw_sample == 1010


def test_parity_failed_sample_is_dropped():
    tracker, fake = make_tracker([1000, 1010, 5, 1020])
    fake.corrupt_angle_reads = {4}       # the read that would return 5
    assert tracker.sample_raw() == 1010
    assert tracker.sample_raw() == 1010
    assert tracker.turn_count == 0
    assert tracker.last_raw_sample == 1010
    assert tracker.parity_errors == 1
    assert tracker.sample_raw() == 1020
    assert tracker.turn_count == 0


def test_parity_error_is_signalled_to_fault_manager():
    tracker, fake = make_tracker([100, 110])
    fake.corrupt_angle_reads = {3}
    tracker.sample_raw()
    assert fake.count_reads(REG_ERROR_STATUS) == 1


def test_parity_error_without_auto_handling():
    tracker, fake = make_tracker([100, 110], auto_handle_faults=False)
    fake.corrupt_angle_reads = {3}
    tracker.sample_raw()
    assert fake.count_reads(REG_ERROR_STATUS) == 0


@pytest.mark.parametrize("n", [1, 2, 3, 4, 7, 16])
def test_filtered_constant_stream(n):
    tracker, _ = make_tracker([517])
    assert tracker.sample_filtered(n) == 517


def test_filtered_rounds_to_nearest():
    tracker, _ = make_tracker([0, 10, 11])
    assert tracker.sample_filtered(2) == 11
    tracker, _ = make_tracker([0, 10, 10, 11])
    assert tracker.sample_filtered(3) == 10


def test_filtered_rejects_zero_samples():
    tracker, _ = make_tracker([0])
    with pytest.raises(ValueError):
        tracker.sample_filtered(0)


def test_mirror_reverses_angle():
    tracker, _ = make_tracker([0, 1023, 300], mirror=True)
    assert tracker.last_raw_sample == 1023
    assert tracker.sample_raw() == 0
    assert tracker.sample_raw() == 723


def test_mirror_reverses_wrap_direction():
    tracker, _ = make_tracker([4, 2, 1022], mirror=True)
    tracker.sample_raw()
    tracker.sample_raw()
    assert tracker.turn_count == 1


def test_set_home_zeroes_delta():
    tracker, _ = make_tracker([1000, 1020, 30, 30])
    tracker.sample_raw()
    tracker.sample_raw()
    assert tracker.turn_count == 1
    tracker.set_home()
    assert tracker.turn_count == 0
    assert tracker.last_raw_sample == 30
    assert tracker.delta_angle(tracker.sample_raw()) == 0


def test_delta_from_warm_up_position():
    tracker, _ = make_tracker([1000, 1020, 30])
    tracker.sample_raw()
    tracker.sample_raw()
    assert tracker.delta_angle() == 1024 + 30 - 1000


def test_snapshot_is_detached():
    tracker, _ = make_tracker([100, 200])
    snap = tracker.snapshot()
    tracker.sample_raw()
    assert snap.last_raw_sample == 100
    assert tracker.last_raw_sample == 200
    assert snap.continuous == 100


def test_unit_conversions_keep_precision():
    assert to_degrees(1) == pytest.approx(360 / 1024)
    assert to_degrees(256) == 90.0
    assert to_radians(512) == pytest.approx(math.pi)
    assert to_degrees(1024 + 512) == 540.0


def test_max_sample_interval_for_rpm():
    assert max_sample_interval_for(1500) == pytest.approx(0.01)
    with pytest.raises(ValueError):
        max_sample_interval_for(0)


def test_late_samples_are_counted():
    times = iter([0.0, 0.005, 0.012, 0.050, 0.055])
    tracker, _ = make_tracker([10, 20, 30, 40, 50], max_sample_interval=0.01,
                              clock=lambda: next(times))
    for _ in range(4):
        tracker.sample_raw()
    assert tracker.late_samples == 1


def test_error_flag_triggers_fault_handling():
    tracker, fake = make_tracker([100, 110])
    fake.error_status = ERR_DSPAHI
    assert tracker.sample_raw() == 110
    assert fake.count_reads(REG_GAIN_CONTROL) == 1
    assert fake.writes_to(REG_GAIN_CONTROL) == [31]
    assert fake.error_status == 0


def test_session_fault_forces_warm_up():
    tracker, fake = make_tracker([100, 110, 111, 112, 120, 130])
    fake.error_status = ERR_WOW
    tracker.sample_raw()
    assert fake.writes_to(REG_SOFTWARE_RESET) == [DATA_SWRESET_SPI]
    assert tracker.needs_warm_up
    reads_before = fake.angle_reads
    assert tracker.sample_raw() == 130
    assert fake.angle_reads == reads_before + 4
    assert not tracker.needs_warm_up
    assert tracker.home_offset == 100


def test_no_fault_reads_without_error_flag():
    tracker, fake = make_tracker([100, 110, 120])
    tracker.sample_raw()
    tracker.sample_raw()
    assert fake.reads == [REG_ANGLE] * 5


def test_wrap_crossed_during_reset_warm_up_is_counted():
    tracker, fake = make_tracker([1000, 1020, 1022, 1023, 10, 12])
    fake.error_status = ERR_WOW
    tracker.sample_raw()
    assert tracker.needs_warm_up
    assert tracker.sample_raw() == 12
    assert tracker.turn_count == 1
    assert tracker.home_offset == 1000
    assert tracker.continuous_angle() == 1024 + 12
    assert tracker.delta_angle() == 36


def test_mirror_toggle_keeps_stationary_position():
    tracker, _ = make_tracker([1000, 1020, 30])
    tracker.sample_raw()
    tracker.sample_raw()
    assert tracker.delta_angle() == 54

    tracker.mirror = True
    assert tracker.turn_count == -1
    assert tracker.last_raw_sample == 993
    assert tracker.delta_angle() == -54
    assert tracker.sample_raw() == 993
    assert tracker.turn_count == -1

    tracker.mirror = True
    assert tracker.last_raw_sample == 993


def test_continuous_average_across_wrap():
    tracker, _ = make_tracker([1018, 1020, 1022, 2, 5])
    # unwrapped positions 1020, 1022, 1026, 1029
    assert tracker.sample_continuous(4) == 1024
    assert tracker.turn_count == 1
    with pytest.raises(ValueError):
        tracker.sample_continuous(0)


def test_wrap_radians():
    assert wrap_radians(0.0) == 0.0
    assert wrap_radians(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
    assert wrap_radians(-5 * math.pi / 2) == pytest.approx(-math.pi / 2)
    assert wrap_radians(to_radians(1024 + 256)) == pytest.approx(math.pi / 2)

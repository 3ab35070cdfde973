"""
Property-based tests for FrameThrottle.

These tests verify that accepted frames are always at least one interval
apart using Hypothesis for property-based testing.
"""

import pytest
from hypothesis import given, settings
import hypothesis.strategies as st

from face_emoji.throttle import DEFAULT_THROTTLE_INTERVAL, FrameThrottle


class TestFrameThrottleSpacing:
    """
    **Feature: face-emoji, Property 9: Throttle Spacing**

    *For any* non-decreasing sequence of arrival times, consecutive accepted
    frames SHALL be at least one interval apart, and a frame arriving a full
    interval after the last accepted one SHALL be accepted.
    """

    @settings(max_examples=100)
    @given(
        interval=st.floats(min_value=0.0, max_value=1.0),
        gaps=st.lists(st.floats(min_value=0.0, max_value=0.5), min_size=1, max_size=50),
    )
    def test_accepted_frames_are_spaced(self, interval, gaps):
        throttle = FrameThrottle(interval)
        now = 0.0
        accepted = []

        for gap in gaps:
            now += gap
            last = throttle.last_accepted
            decision = throttle.should_process(now)

            expected = last is None or now - last >= interval
            assert decision == expected
            if decision:
                accepted.append(now)

        for earlier, later in zip(accepted, accepted[1:]):
            assert later - earlier >= interval

    def test_first_frame_always_accepted(self):
        assert FrameThrottle(10.0).should_process(0.0)

    def test_frame_within_interval_dropped(self):
        throttle = FrameThrottle(0.1)
        assert throttle.should_process(1.0)
        assert not throttle.should_process(1.05)
        assert throttle.last_accepted == 1.0

    def test_frame_at_interval_accepted(self):
        throttle = FrameThrottle(0.5)
        assert throttle.should_process(1.0)
        assert throttle.should_process(1.5)

    def test_dropped_frames_do_not_extend_window(self):
        throttle = FrameThrottle(0.5)
        assert throttle.should_process(0.0)
        assert not throttle.should_process(0.3)
        assert not throttle.should_process(0.4)
        assert throttle.should_process(0.5)

    def test_zero_interval_accepts_everything(self):
        throttle = FrameThrottle(0.0)
        assert all(throttle.should_process(1.0) for _ in range(5))


class TestFrameThrottleConfig:

    def test_default_interval(self):
        assert FrameThrottle().interval == DEFAULT_THROTTLE_INTERVAL == 0.1

    def test_negative_interval_raises(self):
        with pytest.raises(ValueError):
            FrameThrottle(-0.1)

    def test_reset(self):
        throttle = FrameThrottle(1.0)
        throttle.should_process(0.0)
        throttle.reset()

        assert throttle.last_accepted is None
        assert throttle.should_process(0.1)

    def test_injected_clock(self):
        times = iter([0.0, 0.05, 0.2])
        throttle = FrameThrottle(0.1, clock=lambda: next(times))

        assert throttle.should_process()
        assert not throttle.should_process()
        assert throttle.should_process()

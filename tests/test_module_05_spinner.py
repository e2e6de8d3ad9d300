"""
Tests for Module 05: Progress Spinner.
Tests the lifecycle, the painted escapes, stop latency and the stream lock.
"""
import gc
import io
import time
import weakref

import pytest

from airq.terminal.ansi import ERASE_LINE, HIDE_CURSOR, MAGENTA, RESET, SHOW_CURSOR, SPINNER_GLYPHS
from airq.terminal import spinner as spinner_module
from airq.terminal.spinner import TICK_INTERVAL, Spinner, SpinnerState, stream_lock


def _wait_for_ticks(spinner: Spinner, count: int, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while spinner.ticks < count and time.monotonic() < deadline:
        time.sleep(0.005)


class TestLifecycle:
    def test_states(self):
        spinner = Spinner(stream=io.StringIO(), interval=0.01)
        assert spinner.state is SpinnerState.IDLE
        spinner.start()
        assert spinner.state is SpinnerState.RUNNING
        assert spinner.active is True
        spinner.stop()
        assert spinner.state is SpinnerState.STOPPED
        assert spinner.active is False

    def test_stop_is_idempotent(self):
        stream = io.StringIO()
        spinner = Spinner(stream=stream, interval=0.01)
        spinner.start()
        spinner.stop()
        written = stream.getvalue()
        spinner.stop()
        assert stream.getvalue() == written

    def test_stop_before_start_writes_nothing(self):
        stream = io.StringIO()
        spinner = Spinner(stream=stream)
        spinner.stop()
        assert spinner.state is SpinnerState.STOPPED
        assert stream.getvalue() == ""

    def test_cannot_start_twice(self):
        spinner = Spinner(stream=io.StringIO(), interval=0.01)
        spinner.start()
        try:
            with pytest.raises(RuntimeError):
                spinner.start()
        finally:
            spinner.stop()

    def test_context_manager(self):
        with Spinner(stream=io.StringIO(), interval=0.01) as spinner:
            assert spinner.state is SpinnerState.RUNNING
        assert spinner.state is SpinnerState.STOPPED

    def test_default_interval(self):
        assert TICK_INTERVAL == pytest.approx(0.150)


class TestOutput:
    def test_hides_then_restores_cursor(self):
        stream = io.StringIO()
        with Spinner(stream=stream, interval=0.01):
            pass
        output = stream.getvalue()
        assert output.startswith(HIDE_CURSOR + "\n\rLoading data ")
        assert output.endswith(ERASE_LINE + SHOW_CURSOR)

    def test_glyphs_cycle_in_magenta(self):
        stream = io.StringIO()
        spinner = Spinner(label="Fetching", stream=stream, interval=0.005)
        spinner.start()
        _wait_for_ticks(spinner, 5)
        spinner.stop()
        output = stream.getvalue()
        frames = [f"\rFetching {MAGENTA}{glyph}{RESET}" for glyph in SPINNER_GLYPHS]
        positions = [output.index(frame) for frame in frames]
        assert positions == sorted(positions)
        assert output.count(frames[0]) >= 2

    def test_glyph_code_points(self):
        assert [ord(g) for g in SPINNER_GLYPHS] == [0x25E2, 0x25E3, 0x25E4, 0x25E5]


class TestConcurrency:
    def test_stop_observed_within_one_tick(self):
        spinner = Spinner(stream=io.StringIO())
        spinner.start()
        _wait_for_ticks(spinner, 1)
        started = time.monotonic()
        spinner.stop()
        assert time.monotonic() - started < TICK_INTERVAL + 0.1

    def test_holds_stream_lock_while_running(self):
        stream = io.StringIO()
        lock = stream_lock(stream)
        spinner = Spinner(stream=stream, interval=0.01)
        spinner.start()
        assert lock.locked()
        assert lock.acquire(blocking=False) is False
        spinner.stop()
        assert not lock.locked()

    def test_same_stream_same_lock(self):
        stream = io.StringIO()
        assert stream_lock(stream) is stream_lock(stream)
        assert stream_lock(stream) is not stream_lock(io.StringIO())

    def test_lock_released_with_stream(self):
        stream = io.StringIO()
        with Spinner(stream=stream, interval=0.005):
            pass
        alive = weakref.ref(stream)
        assert stream in spinner_module._LOCKS
        tracked = len(spinner_module._LOCKS)
        del stream
        gc.collect()
        assert alive() is None
        assert len(spinner_module._LOCKS) < tracked

    def test_foreground_writes_after_stop_are_not_interleaved(self):
        stream = io.StringIO()
        spinner = Spinner(stream=stream, interval=0.005)
        spinner.start()
        _wait_for_ticks(spinner, 3)
        spinner.stop()
        with stream_lock(stream):
            stream.write("REPORT")
        assert stream.getvalue().endswith(ERASE_LINE + SHOW_CURSOR + "REPORT")

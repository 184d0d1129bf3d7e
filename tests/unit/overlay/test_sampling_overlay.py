"""Tests for the full render tick: frame copy, sample, emit, paint."""

from __future__ import annotations

import asyncio
from datetime import datetime
from unittest.mock import MagicMock

import numpy as np
import pytest

from sample_overlay.errors import MissingCollaboratorError
from sample_overlay.overlay.config import OverlayConfig
from sample_overlay.overlay.cursor import Cursor, PointerEvent, SurfaceBounds
from sample_overlay.overlay.events import REFRESH_EVENT
from sample_overlay.overlay.sampling_overlay import SamplingOverlay
from sample_overlay.overlay.surface import RasterSurface
from tests.infrastructure.mocks.video_mocks import MockVideoSource, gradient_frame, solid_frame

FIXED_TIME = datetime(2018, 1, 15, 12, 0, 0)


@pytest.fixture
def surface(small_config) -> RasterSurface:
    return RasterSurface(small_config.surface_width, small_config.surface_height)


@pytest.fixture
def overlay(video_source, surface, small_config, manual_scheduler) -> SamplingOverlay:
    return SamplingOverlay(
        video_source,
        surface,
        config=small_config,
        scheduler=manual_scheduler,
        clock=lambda: FIXED_TIME,
    )


@pytest.fixture
def received(overlay):
    events = []
    overlay.on(REFRESH_EVENT, events.append)
    return events


def pixels_of(data: bytes) -> np.ndarray:
    return np.frombuffer(data, dtype=np.uint8).reshape(-1, 4)


class TestConstruction:
    def test_missing_video_is_fatal(self, surface):
        with pytest.raises(MissingCollaboratorError):
            SamplingOverlay(None, surface)

    def test_missing_surface_is_fatal(self, video_source):
        with pytest.raises(MissingCollaboratorError):
            SamplingOverlay(video_source, None)

    def test_surface_must_match_config(self, video_source):
        with pytest.raises(ValueError):
            SamplingOverlay(video_source, RasterSurface(32, 32), config=OverlayConfig())

    def test_config_defaults_to_surface_size(self, video_source, manual_scheduler):
        overlay = SamplingOverlay(video_source, RasterSurface(100, 80), scheduler=manual_scheduler)
        assert overlay.config.surface_size == (100, 80)
        assert overlay.cursor == Cursor(50.0, 40.0)

    def test_registers_single_play_listener(self, overlay, video_source):
        assert len(video_source._play_listeners) == 1

    def test_loop_idle_until_play(self, overlay, received, manual_scheduler):
        assert not overlay.running
        assert received == []
        assert manual_scheduler.pending == []


class TestTick:
    def test_play_runs_first_tick(self, overlay, received, video_source):
        video_source.play()

        assert len(received) == 1
        event = received[0]
        assert event.type == "refresh"
        assert event.source is overlay
        assert event.time == FIXED_TIME
        assert len(event.data) == 20 * 20 * 4

    def test_sample_carries_frame_pixels(self, overlay, received, video_source):
        video_source.play()
        assert np.all(pixels_of(received[0].data) == (255, 0, 0, 255))

    def test_ticks_repeat_at_interval(self, overlay, received, video_source, manual_scheduler):
        video_source.play()
        manual_scheduler.run(4)

        assert len(received) == 5
        assert set(manual_scheduler.delays) == {20}
        assert video_source.frames_served == 5

    def test_sample_never_contains_indicator(self, overlay, received, video_source, surface, manual_scheduler):
        video_source.play()
        manual_scheduler.run(5)

        accent = np.array(overlay.config.accent_rgba, dtype=np.uint8)
        cursor = overlay.cursor
        assert tuple(surface.pixels[int(cursor.y), int(cursor.x)]) == tuple(accent)
        for event in received:
            assert not np.any(np.all(pixels_of(event.data) == accent, axis=1))

    def test_window_size_independent_of_half_size(self, video_source, surface, manual_scheduler):
        config = OverlayConfig(surface_width=64, surface_height=48, sample_half_size=3)
        overlay = SamplingOverlay(video_source, surface, config=config, scheduler=manual_scheduler)
        events = []
        overlay.on(REFRESH_EVENT, events.append)
        video_source.play()
        assert len(events[0].data) == 1600

    def test_presents_surface_after_painting(self, overlay, video_source, surface):
        display = MagicMock()
        display.bounds.return_value = SurfaceBounds(0, 0, 64, 48)
        display.show.side_effect = lambda pixels: shown.append(pixels.copy())
        shown = []
        surface.attach_display(display)

        video_source.play()
        cursor = overlay.cursor
        assert len(shown) == 1
        assert tuple(shown[0][int(cursor.y), int(cursor.x)]) == overlay.config.accent_rgba


class TestLoopTermination:
    def test_pause_stops_after_in_flight_tick(self, overlay, received, video_source, manual_scheduler):
        video_source.play()
        manual_scheduler.run(2)
        video_source.pause()
        served = video_source.frames_served

        manual_scheduler.run(5)
        assert len(received) == 3
        assert video_source.frames_served == served
        assert not overlay.running
        assert manual_scheduler.pending == []

    def test_ended_stops_loop(self, overlay, received, video_source, manual_scheduler):
        video_source.play()
        video_source.end()
        manual_scheduler.run(5)
        assert len(received) == 1
        assert not overlay.running

    def test_play_restarts_after_pause(self, overlay, received, video_source, manual_scheduler):
        video_source.play()
        video_source.pause()
        manual_scheduler.run(1)

        video_source.play()
        assert overlay.running
        assert len(received) == 2

    def test_repeated_play_does_not_duplicate_loop(self, overlay, received, video_source, manual_scheduler):
        video_source.play()
        video_source.play()
        assert len(received) == 1
        assert len(manual_scheduler.pending) == 1

    def test_tick_failure_propagates(self, overlay, received, video_source, manual_scheduler):
        video_source.fail_with = RuntimeError("video element removed")
        with pytest.raises(RuntimeError, match="video element removed"):
            video_source.play()
        assert received == []
        assert not overlay.running
        assert manual_scheduler.pending == []

    def test_close_detaches_everything(self, overlay, received, video_source, manual_scheduler):
        video_source.play()
        overlay.close()

        assert manual_scheduler.run_next() is False
        video_source.play()
        assert len(received) == 1
        assert video_source._play_listeners == []
        assert overlay.start() is False


class TestCursorAndListeners:
    def test_pointer_event_moves_sample_window(self, overlay, received, video_source, surface, manual_scheduler):
        video_source.frames = [gradient_frame(64, 48)]
        overlay.set_from_pointer_event(PointerEvent(page_x=30, page_y=20))
        video_source.play()

        block = pixels_of(received[0].data).reshape(20, 20, 4)
        assert tuple(block[0, 0]) == (7, 10, 20, 255)

    def test_edge_cursor_sample_is_zero_padded(self, overlay, received, video_source):
        overlay.set_from_pointer_event(PointerEvent(client_x=2, client_y=2))
        video_source.play()

        block = pixels_of(received[0].data).reshape(20, 20, 4)
        assert len(received[0].data) == 1600
        assert not block[:8].any()
        assert tuple(block[8, 8]) == (255, 0, 0, 255)

    def test_cursor_change_visible_on_next_tick(self, overlay, received, video_source, manual_scheduler):
        video_source.frames = [solid_frame(64, 48, (255, 0, 0))]
        video_source.play()
        overlay.cursor_store.set(200, 200)
        manual_scheduler.run_next()

        assert np.all(pixels_of(received[0].data) == (0, 0, 255, 255))
        assert not pixels_of(received[1].data).any()

    def test_mismatched_event_name_receives_nothing(self, overlay, video_source):
        other = []
        overlay.add_event_listener("click", other.append)
        video_source.play()
        assert other == []

    def test_off_removes_listener(self, overlay, video_source, manual_scheduler):
        events = []
        overlay.on(REFRESH_EVENT, events.append)
        video_source.play()
        assert overlay.off(REFRESH_EVENT, events.append) is True
        manual_scheduler.run(2)
        assert len(events) == 1

    def test_failing_listener_does_not_stop_loop(self, overlay, received, video_source, manual_scheduler):
        def broken(_event):
            raise ValueError("consumer bug")

        overlay.on(REFRESH_EVENT, broken)
        video_source.play()
        manual_scheduler.run(2)
        assert len(received) == 3
        assert overlay.running


class TestDefaultScheduler:
    def test_play_outside_event_loop_can_be_retried(self, video_source, surface):
        overlay = SamplingOverlay(video_source, surface)
        events = []
        overlay.on(REFRESH_EVENT, events.append)

        with pytest.raises(RuntimeError):
            video_source.play()
        assert len(events) == 1
        assert not overlay.running

        video_source.pause()
        with pytest.raises(RuntimeError):
            video_source.play()
        assert len(events) == 2

    def test_play_inside_event_loop_keeps_ticking(self, video_source, surface):
        async def scenario():
            overlay = SamplingOverlay(video_source, surface)
            events = []
            overlay.on(REFRESH_EVENT, events.append)
            video_source.play()
            await asyncio.sleep(0.1)
            running = overlay.running
            overlay.close()
            return len(events), running

        count, running = asyncio.run(scenario())
        assert count >= 2
        assert running

"""Playback position state transitions (seek, step, rate).

The player drives render_frame() with the current time; this module keeps
that time inside the media and the rate inside what the player supports.
Every method returns a new PlaybackState.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

FRAME_RATE = 30
DEFAULT_STEP_SECONDS = 5.0
MIN_PLAYBACK_RATE = 0.25
MAX_PLAYBACK_RATE = 4.0


@dataclass(frozen=True)
class PlaybackState:
    current_time: float = 0.0
    duration: float = 0.0
    is_playing: bool = False
    playback_rate: float = 1.0


DEFAULT_PLAYBACK_STATE = PlaybackState()


class PlaybackController:
    """Stateless time management for the preview player."""

    @staticmethod
    def clamp_time(time: float, duration: float) -> float:
        return min(max(0.0, time), max(0.0, duration))

    def seek(self, state: PlaybackState, time: float) -> PlaybackState:
        return replace(state, current_time=self.clamp_time(time, state.duration))

    def step_forward(self, state: PlaybackState, seconds: float = DEFAULT_STEP_SECONDS) -> PlaybackState:
        return self.seek(state, state.current_time + seconds)

    def step_backward(self, state: PlaybackState, seconds: float = DEFAULT_STEP_SECONDS) -> PlaybackState:
        return self.seek(state, state.current_time - seconds)

    def frame_step(self, state: PlaybackState, direction: int) -> PlaybackState:
        """Move one frame forward (direction=1) or back (direction=-1)."""
        step = 1 if direction >= 0 else -1
        return self.seek(state, state.current_time + step / FRAME_RATE)

    @staticmethod
    def toggle_play(state: PlaybackState) -> PlaybackState:
        if state.duration == 0:
            return state
        # Pressing play at the end restarts from the beginning.
        if not state.is_playing and state.current_time >= state.duration:
            return replace(state, current_time=0.0, is_playing=True)
        return replace(state, is_playing=not state.is_playing)

    @staticmethod
    def play(state: PlaybackState) -> PlaybackState:
        if state.duration == 0:
            return state
        return replace(state, is_playing=True)

    @staticmethod
    def pause(state: PlaybackState) -> PlaybackState:
        return replace(state, is_playing=False)

    @staticmethod
    def set_rate(state: PlaybackState, rate: float) -> PlaybackState:
        return replace(state, playback_rate=min(MAX_PLAYBACK_RATE, max(MIN_PLAYBACK_RATE, rate)))

    @staticmethod
    def set_duration(state: PlaybackState, duration: float) -> PlaybackState:
        duration = max(0.0, duration)
        return replace(state, duration=duration, current_time=min(state.current_time, duration))

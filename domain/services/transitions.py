from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from domain.ports.surface import DrawingSurface, GroupHandle

DEFAULT_DURATION_SECONDS = 0.2


@dataclass(frozen=True)
class Frame:
    x: float
    y: float
    opacity: float

    def lerp(self, other: Frame, t: float) -> Frame:
        return Frame(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.opacity + (other.opacity - self.opacity) * t,
        )


FrameListener = Callable[[Frame], None]


@dataclass
class _Track:
    start: Frame
    end: Frame
    started_at: float
    duration: float
    remove_on_end: bool
    listener: FrameListener | None


class TransitionScheduler:
    """Linear position/opacity transitions on surface groups.

    At most one transition runs per group: starting a new one replaces the
    running one, which is expected to be restarted from its current frame.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        duration: float = DEFAULT_DURATION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.surface = surface
        self.duration = duration
        self.clock = clock
        self._tracks: dict[GroupHandle, _Track] = {}

    def start(
        self,
        group: GroupHandle,
        start: Frame,
        end: Frame,
        *,
        remove_on_end: bool = False,
        listener: FrameListener | None = None,
    ) -> None:
        track = _Track(
            start=start,
            end=end,
            started_at=self.clock(),
            duration=self.duration,
            remove_on_end=remove_on_end,
            listener=listener,
        )
        # Re-insert so tracks finish in the order they were started.
        self._tracks.pop(group, None)
        self._tracks[group] = track
        if track.duration <= 0:
            self._finish(group, track)
            return
        self._apply(group, track, start)

    def cancel(self, group: GroupHandle) -> bool:
        return self._tracks.pop(group, None) is not None

    def is_running(self, group: GroupHandle) -> bool:
        return group in self._tracks

    def target_of(self, group: GroupHandle) -> Frame | None:
        track = self._tracks.get(group)
        return track.end if track else None

    @property
    def running(self) -> int:
        return len(self._tracks)

    def tick(self, now: float | None = None) -> int:
        now = self.clock() if now is None else now
        for group, track in list(self._tracks.items()):
            if self._tracks.get(group) is not track:
                continue
            progress = (now - track.started_at) / track.duration
            if progress >= 1:
                self._finish(group, track)
            else:
                self._apply(group, track, track.start.lerp(track.end, max(progress, 0.0)))
        return len(self._tracks)

    def flush(self) -> None:
        while self._tracks:
            group, track = next(iter(self._tracks.items()))
            self._finish(group, track)

    def _finish(self, group: GroupHandle, track: _Track) -> None:
        self._tracks.pop(group, None)
        self._apply(group, track, track.end)
        if track.remove_on_end:
            self.surface.remove(group)

    def _apply(self, group: GroupHandle, track: _Track, frame: Frame) -> None:
        self.surface.set_transform(group, frame.x, frame.y)
        self.surface.set_opacity(group, frame.opacity)
        if track.listener is not None:
            track.listener(frame)

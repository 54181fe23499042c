"""Per-request phase timer.

TraceMiddleware stores a PhaseTimer on ``request.state.phase_timer``; the
inner layers mark phase boundaries on it as the request passes through:

    start ─ middleware ─ GUARD_START ─ guard ─ GUARD_END ─ interceptorPre ─
    HANDLER_START ─ handler ─ HANDLER_END ─ interceptorPost ─ END

A boundary nobody marked collapses onto the previous one, so its phase is
reported as 0.
"""

import time
from collections.abc import Callable

from starlette.requests import Request

from src.domain.value_objects.trace_values import PhaseTiming

GUARD_START = "guard_start"
GUARD_END = "guard_end"
HANDLER_START = "handler_start"
HANDLER_END = "handler_end"
END = "end"

_BOUNDARIES = (GUARD_START, GUARD_END, HANDLER_START, HANDLER_END, END)


class PhaseTimer:
    """Monotonic boundary marks for one request.

    Args:
        clock: Monotonic clock in seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._start = clock()
        self._marks: dict[str, float] = {}

    def mark(self, boundary: str) -> None:
        """Record a boundary; only the first mark of each boundary counts."""
        if boundary not in _BOUNDARIES:
            raise ValueError(f"Unknown phase boundary: {boundary}")
        self._marks.setdefault(boundary, self._clock())

    def elapsed_ms(self) -> float:
        """Milliseconds from start to END (or now when END is unmarked)."""
        end = self._marks.get(END, self._clock())
        return (end - self._start) * 1000

    def timing(self) -> PhaseTiming:
        """Phase breakdown in milliseconds, rounded to 2 decimals."""
        points = [self._start]
        for boundary in _BOUNDARIES:
            points.append(max(self._marks.get(boundary, points[-1]), points[-1]))

        durations = [
            round((later - earlier) * 1000, 2)
            for earlier, later in zip(points, points[1:])
        ]
        return PhaseTiming(
            middleware=durations[0],
            guard=durations[1],
            interceptor_pre=durations[2],
            handler=durations[3],
            interceptor_post=durations[4],
        )


def mark_phase(request: Request, boundary: str) -> None:
    """Mark ``boundary`` on the request's timer, if the request is traced."""
    timer: PhaseTimer | None = getattr(request.state, "phase_timer", None)
    if timer is not None:
        timer.mark(boundary)


async def mark_handler_start(request: Request) -> None:
    """Router dependency: the route handler is about to run."""
    mark_phase(request, HANDLER_START)

"""Server-sent events support.

EventStream fans domain events published on the in-process bus out to
connected streaming clients.
"""

from src.infrastructure.sse.event_stream import EventStream

__all__ = ["EventStream"]

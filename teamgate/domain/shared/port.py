"""Marker base for domain ports (interfaces implemented by infrastructure adapters)."""

from typing import Protocol


class Port(Protocol):
    """Base protocol for every port.

    Ports live in the domain; adapters in ``teamgate.infrastructure`` subclass them
    explicitly so a missing method fails at instantiation instead of at call time.
    """

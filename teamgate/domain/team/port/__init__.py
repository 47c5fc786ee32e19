"""Team domain ports."""

from .notifier import TeamNotifier
from .repository import TeamRepository
from .resource_counter import ResourceCounter

__all__ = [
    "ResourceCounter",
    "TeamNotifier",
    "TeamRepository",
]

"""Abstract interface for TTL-keyed key/value storage backends."""

from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any


class Storage(abc.ABC):
    """Key/value store whose items expire *ttl* milliseconds after insertion.

    Expiry is evaluated on access; an expired item behaves exactly like an
    absent one. Backends reached over a network implement this same surface.
    """

    @abc.abstractmethod
    def set_options(self, options: Mapping[str, Any]) -> None:
        """Merge recognised *options* over the defaults; unknown keys are dropped."""
        ...

    @abc.abstractmethod
    def get_options(self) -> dict[str, Any]: ...

    @abc.abstractmethod
    def get_item(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or *default* when absent or expired."""
        ...

    @abc.abstractmethod
    def has_item(self, key: str) -> bool: ...

    @abc.abstractmethod
    def set_item(self, key: str, value: Any) -> bool:
        """Store *value*. Overwriting an existing item keeps its TTL clock."""
        ...

    @abc.abstractmethod
    def replace_item(self, key: str, value: Any) -> bool:
        """Overwrite an existing item and restart its TTL clock.

        Raises:
            ItemNotFoundError: *key* is absent or expired.
        """
        ...

    @abc.abstractmethod
    def touch_item(self, key: str) -> bool:
        """Restart the TTL clock of an existing item.

        Raises:
            ItemNotFoundError: *key* is absent or expired.
        """
        ...

    @abc.abstractmethod
    def remove_item(self, key: str) -> bool:
        """Delete an existing item.

        Raises:
            ItemNotFoundError: *key* is absent or expired.
        """
        ...

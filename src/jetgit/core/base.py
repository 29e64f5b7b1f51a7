"""Base classes shared by configuration and runtime models.

Kept apart from config.py so that log.py can build on them without a
circular import.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Anything holding a resource that must be released."""

    def close(self) -> None:
        """Release resources."""
        ...


class BaseCloseable(BaseModel):
    """Model that closes every Closeable field on close().

    Acts as a context manager. A failure closing one child is reported
    on stderr and the remaining children are still closed, so
    Config.close() reaches Logger.close() and each Sink.close().
    """

    def close(self):
        """Close all Closeable children."""
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None:
                continue
            if isinstance(child, Closeable):
                try:
                    child.close()
                except Exception as e:
                    print(
                        f"Warning: Error closing {field_name}: {e}",
                        file=sys.stderr,
                    )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Marker base for configuration sections (YAML/env/CLI)."""
    pass


class BaseState(BaseCloseable):
    """Marker base for runtime state mutated by workflows."""
    pass


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]

"""Errors raised while reading catalogsync settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, such as a non-numeric page size."""


class MissingConfigurationError(ConfigurationError):
    """Required settings are unset or blank; ``names`` lists them in sorted order."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")

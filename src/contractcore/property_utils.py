"""Resolution of named options from caller options, system properties and env.

Lookup order for ``name`` (first value with text wins):

1. ``options[name]`` when an options mapping is given
2. system property ``contractcore.properties.<name>``, then ``<name>``
3. environment variable ``CONTRACTCORE_PROPERTIES_<NAME>``, then ``<NAME>``
   where ``<NAME>`` is upper-cased with dots and dashes turned into underscores

System properties are a process-wide registry, the equivalent of ``-D``
options on the command line. The module-level :data:`FETCHER` is swappable
for tests; configure it before resolving, never concurrently with lookups.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

logger = logging.getLogger(__name__)

PROPERTY_PREFIX = "contractcore.properties."
ENV_PREFIX = "CONTRACTCORE_PROPERTIES_"

SYSTEM_PROPERTIES: dict[str, str] = {}


def set_system_property(name: str, value: str) -> None:
    """Register a process-wide system property."""
    SYSTEM_PROPERTIES[name] = value


def clear_system_property(name: str) -> None:
    """Remove a system property if present."""
    SYSTEM_PROPERTIES.pop(name, None)


class PropertyFetcher:
    """Reads raw values from the system property registry and the environment."""

    def system_prop(self, name: str) -> str | None:
        return SYSTEM_PROPERTIES.get(name)

    def env_var(self, name: str) -> str | None:
        return os.environ.get(name)


FETCHER = PropertyFetcher()


def has_text(value: str | None) -> bool:
    """True if value is non-null and contains a non-whitespace character."""
    return value is not None and value.strip() != ""


def to_env_name(name: str) -> str:
    """``foo.bar-baz`` -> ``FOO_BAR_BAZ``."""
    return name.replace(".", "_").replace("-", "_").upper()


def _with_prefix(name: str) -> str:
    if name.startswith(PROPERTY_PREFIX):
        return name
    return PROPERTY_PREFIX + name


def _without_prefix(name: str) -> str:
    if name.startswith(PROPERTY_PREFIX):
        return name[len(PROPERTY_PREFIX):]
    return name


def _system_value(name: str) -> str | None:
    for candidate in (_with_prefix(name), _without_prefix(name)):
        value = FETCHER.system_prop(candidate)
        if has_text(value):
            logger.debug(f"Resolved [{name}] from system property [{candidate}]")
            return value
    return None


def _env_value(name: str) -> str | None:
    env_name = to_env_name(_without_prefix(name))
    for candidate in (ENV_PREFIX + env_name, env_name):
        value = FETCHER.env_var(candidate)
        if has_text(value):
            logger.debug(f"Resolved [{name}] from environment variable [{candidate}]")
            return value
    return None


def get_property(options: Mapping[str, str] | None, name: str) -> str | None:
    """Resolve ``name`` through options, system properties and environment.

    Args:
        options: Caller-supplied options; may be None
        name: Dot-separated property name, e.g. ``foo.bar-baz``

    Returns:
        The first value with text, or None
    """
    if options is not None and has_text(options.get(name)):
        return options[name]
    value = _system_value(name)
    if value is not None:
        return value
    return _env_value(name)


def has_property(options: Mapping[str, str] | None, name: str) -> bool:
    """True if :func:`get_property` would find a value."""
    return get_property(options, name) is not None


def is_property_set(name: str) -> bool:
    """Resolve a boolean flag from system properties, then environment.

    The first source with text decides; only ``true`` (any case) is true.
    """
    value = _system_value(name)
    if value is None:
        value = _env_value(name)
    return value is not None and value.strip().lower() == "true"

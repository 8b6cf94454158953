"""
Configuration for example generation.

Supports:
- Property resolution (options, system properties, environment variables)
- Dictionary configuration (e.g. YAML)
- Runtime overrides through explicit construction
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from contractcore.property_utils import get_property

DEFAULT_MAX_ATTEMPTS = 100

SEED_PROPERTY = "generator.seed"
MAX_ATTEMPTS_PROPERTY = "generator.max-attempts"


@dataclass
class GeneratorSettings:
    """
    Settings for drawing examples from regular expressions.

    Defaults:
    - seed: None (fresh entropy per thread)
    - max_attempts: 100 draws before giving up on a pattern
    """

    seed: int | None = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @classmethod
    def from_properties(cls, options: Mapping[str, str] | None = None) -> "GeneratorSettings":
        """
        Create settings through property resolution.

        Properties:
            generator.seed: Integer seed (CONTRACTCORE_PROPERTIES_GENERATOR_SEED)
            generator.max-attempts: Draw limit (CONTRACTCORE_PROPERTIES_GENERATOR_MAX_ATTEMPTS)
        """
        seed = get_property(options, SEED_PROPERTY)
        max_attempts = get_property(options, MAX_ATTEMPTS_PROPERTY)
        return cls(
            seed=int(seed) if seed is not None else None,
            max_attempts=int(max_attempts) if max_attempts is not None else DEFAULT_MAX_ATTEMPTS,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratorSettings":
        """Create settings from dictionary."""
        return cls(
            seed=data.get("seed"),
            max_attempts=data.get("max_attempts", DEFAULT_MAX_ATTEMPTS),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "seed": self.seed,
            "max_attempts": self.max_attempts,
        }

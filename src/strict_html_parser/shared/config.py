"""Configuration for strict HTML parsing.

This module provides the immutable configuration object that controls the
tree-building policy and resource limits of the parser.
"""

import json
from dataclasses import dataclass, fields, replace
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class TagMatchingPolicy(Enum):
    """How closing tag names are checked against their opening tags."""

    STRICT = auto()    # Closing tag must repeat the opening tag's name
    LENIENT = auto()   # Closing tag only needs to be present


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for the grammar matcher and AST builder.

    Frozen so a single instance can be shared between threads and parser
    instances without coordination.
    """

    tag_matching: TagMatchingPolicy = TagMatchingPolicy.STRICT
    max_nesting_depth: int = 100
    correlation_id: Optional[str] = None
    logging_level: str = "WARNING"

    # Metadata
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if not isinstance(self.tag_matching, TagMatchingPolicy):
            raise ConfigValidationError(
                "tag_matching must be a TagMatchingPolicy",
                field_name="tag_matching",
                suggestions=[member.name for member in TagMatchingPolicy],
            )
        if self.max_nesting_depth <= 0:
            raise ConfigValidationError(
                "max_nesting_depth must be > 0",
                field_name="max_nesting_depth",
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=VALID_LOGGING_LEVELS,
            )

    @property
    def checks_tag_names(self) -> bool:
        """Check whether closing tag names are validated."""
        return self.tag_matching is TagMatchingPolicy.STRICT

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig().override(max_nesting_depth=50)
            >>> config.max_nesting_depth
            50
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.name if isinstance(value, Enum) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected. ``tag_matching`` may be given as a policy
        name in any case.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a mapping")

        values = dict(data)
        policy = values.get("tag_matching")
        if isinstance(policy, str):
            try:
                values["tag_matching"] = TagMatchingPolicy[policy.upper()]
            except KeyError:
                raise ConfigValidationError(
                    f"Unknown tag matching policy: {policy!r}",
                    field_name="tag_matching",
                    suggestions=[member.name for member in TagMatchingPolicy],
                ) from None

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        config_path = Path(path)
        try:
            content = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Create configuration that rejects mismatched closing tags."""
        return cls(
            tag_matching=TagMatchingPolicy.STRICT,
            name="strict",
            description="Closing tags must repeat the opening tag name",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Create configuration that accepts any structurally present closing tag."""
        return cls(
            tag_matching=TagMatchingPolicy.LENIENT,
            name="lenient",
            description="Closing tag names are not compared with opening tags",
        )

"""Configuration loading and validation for member generation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

import yaml

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Member toggles
# ---------------------------------------------------------------------------

@dataclass
class MemberConfig:
    enabled: bool = True


@dataclass
class ConstructorConfig:
    enabled: bool = True
    # this.field = <default> for non-nullable primitives and collections
    default_values: bool = False


@dataclass
class FromMapConfig:
    enabled: bool = True
    # guard every extracted value with `?? <default>`
    default_values: bool = False


@dataclass
class HashCodeConfig:
    enabled: bool = True
    use_jenkins: bool = False


@dataclass
class GeneratorConfig:
    constructor: ConstructorConfig = field(default_factory=ConstructorConfig)
    copy_with: MemberConfig = field(default_factory=MemberConfig)
    to_map: MemberConfig = field(default_factory=MemberConfig)
    from_map: FromMapConfig = field(default_factory=FromMapConfig)
    to_json: MemberConfig = field(default_factory=MemberConfig)
    from_json: MemberConfig = field(default_factory=MemberConfig)
    to_string: MemberConfig = field(default_factory=MemberConfig)
    equality: MemberConfig = field(default_factory=MemberConfig)
    hash_code: HashCodeConfig = field(default_factory=HashCodeConfig)
    use_equatable: bool = False
    use_equatable_mixin: bool = False


# ---------------------------------------------------------------------------
# Host facts
# ---------------------------------------------------------------------------

@dataclass
class ProjectConfig:
    """Overrides for facts otherwise discovered from pubspec.yaml."""
    package_name: Optional[str] = None
    is_flutter: Optional[bool] = None


# ---------------------------------------------------------------------------
# Output config
# ---------------------------------------------------------------------------

@dataclass
class OutputConfig:
    backup: bool = False  # keep <file>.bak when writing in place


# ---------------------------------------------------------------------------
# Top-level Config
# ---------------------------------------------------------------------------

@dataclass
class DartGenConfig:
    version: str = "1.0"
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    project: ProjectConfig = field(default_factory=ProjectConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


# ---------------------------------------------------------------------------
# Part filter
# ---------------------------------------------------------------------------

# Member categories that can be generated on their own.
PARTS = ("constructor", "copyWith", "serialization", "toString", "equality", "useEquatable")

# Rewrites whole classes for json_serializable; only runs when asked for.
JSON_SERIALIZABLE = "jsonSerializable"


def validate_part(part: Optional[str]) -> Optional[str]:
    if part is not None and part not in PARTS and part != JSON_SERIALIZABLE:
        choices = ", ".join(PARTS + (JSON_SERIALIZABLE,))
        raise ConfigError(f"Unknown part '{part}', expected one of: {choices}")
    return part


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def _apply_dict(obj, data: dict):
    """Apply dictionary values to a dataclass instance, recursively."""
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping for {type(obj).__name__}, got {type(data).__name__}")
    for key, value in data.items():
        if not hasattr(obj, key):
            raise ConfigError(f"Unknown option '{key}' in {type(obj).__name__}")
        current = getattr(obj, key)
        if hasattr(current, '__dataclass_fields__'):
            # `to_string: false` is shorthand for `to_string: {enabled: false}`
            if isinstance(value, bool) and hasattr(current, 'enabled'):
                current.enabled = value
            else:
                _apply_dict(current, value)
        else:
            setattr(obj, key, value)


def load_config(config_path: Optional[str] = None, project_root: Optional[str] = None) -> DartGenConfig:
    """Load generator configuration from a YAML file.

    Search order when *config_path* is None:
      1. ``dartgen.yaml`` in *project_root*
      2. ``analysis/dartgen.yaml`` in *project_root*

    *project_root* defaults to cwd. Without a file the defaults are used.
    """
    if project_root is None:
        project_root = os.getcwd()

    config = DartGenConfig()

    if config_path is None:
        candidates = [
            os.path.join(project_root, "dartgen.yaml"),
            os.path.join(project_root, "analysis", "dartgen.yaml"),
        ]
        for candidate in candidates:
            if os.path.isfile(candidate):
                config_path = candidate
                break
    elif not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    if config_path:
        try:
            with open(config_path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if "version" in data:
            config.version = str(data["version"])
        if "generator" in data:
            _apply_dict(config.generator, data["generator"])
        if "project" in data:
            _apply_dict(config.project, data["project"])
        if "output" in data:
            _apply_dict(config.output, data["output"])

    return config

"""Dart package discovery for the file being generated."""

from __future__ import annotations

import os
import sys
from typing import Optional

import yaml

from .config import ProjectConfig
from .models import ProjectInfo


def find_pubspec(path: str) -> Optional[str]:
    """Walk up from *path* to the nearest directory holding pubspec.yaml."""
    current = os.path.abspath(path)
    if os.path.isfile(current):
        current = os.path.dirname(current)
    while True:
        if os.path.isfile(os.path.join(current, "pubspec.yaml")):
            return os.path.join(current, "pubspec.yaml")
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def _fallback_name(directory: str) -> str:
    return os.path.basename(os.path.abspath(directory)).replace("-", "_")


def find_project(path: str) -> ProjectInfo:
    """Package name and Flutter flag of the package containing *path*.

    Without a readable pubspec.yaml the directory of *path* stands in for the
    package root and Flutter is assumed absent.
    """
    pubspec_path = find_pubspec(path)
    if pubspec_path is None:
        directory = os.path.dirname(os.path.abspath(path)) if os.path.isfile(path) else path
        return ProjectInfo(package_name=_fallback_name(directory), is_flutter=False, root=None)

    root = os.path.dirname(pubspec_path)
    try:
        with open(pubspec_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"[discovery] could not read {pubspec_path}: {e}", file=sys.stderr)
        data = {}
    if not isinstance(data, dict):
        data = {}

    name = data.get("name") or _fallback_name(root)

    # Check if it's a Flutter package
    deps = data.get("dependencies", {}) or {}
    is_flutter = "flutter" in deps

    return ProjectInfo(package_name=name, is_flutter=is_flutter, root=root)


def resolve_project(path: str, overrides: Optional[ProjectConfig] = None) -> ProjectInfo:
    """Discover the project of *path* and apply configured overrides."""
    info = find_project(path)
    if overrides is None:
        return info
    return ProjectInfo(
        package_name=overrides.package_name if overrides.package_name is not None else info.package_name,
        is_flutter=overrides.is_flutter if overrides.is_flutter is not None else info.is_flutter,
        root=info.root,
    )

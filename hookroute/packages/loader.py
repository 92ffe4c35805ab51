"""YAML loader for routing files."""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .models import RoutingFile
from .registry import RegistryError

YAML_VERSION = (1, 2)


class RoutingConfigError(ValueError):
    """Raised when a routing file cannot be parsed or validated."""

    def __init__(self, issues: list[str]) -> None:
        """Store the individual problems found in the file."""
        self.issues = issues
        super().__init__("; ".join(issues))


def load_routing_file(path: Path | str) -> RoutingFile:
    """Parse and validate a YAML routing file.

    The registry described by the file is built once here so that duplicate
    packages or an unknown primary package are reported at load time rather
    than on the first webhook.
    """
    yaml = _yaml()
    path_obj = Path(path)

    try:
        loaded = yaml.load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise RoutingConfigError([f"failed to parse YAML: {exc}"]) from exc

    if loaded is None:
        raise RoutingConfigError(["routing file is empty"])

    try:
        routing = msgspec.convert(loaded, type=RoutingFile)
    except msgspec.ValidationError as exc:
        raise RoutingConfigError([f"schema validation failed: {exc}"]) from exc

    issues = [
        f"suppress[{index}] needs an id or a login"
        for index, author in enumerate(routing.suppress)
        if author.id is None and not (author.login or "").strip()
    ]
    try:
        routing.to_registry()
    except RegistryError as exc:
        issues.append(str(exc))
    if issues:
        raise RoutingConfigError(issues)

    return routing


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml

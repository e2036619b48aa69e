"""Load and merge repository configuration from ``.github/warden.yml``.

The loader reads the file once per event through the content-read
capability, shallow-merges each section over the built-in defaults and
validates the result. Repositories without a config file run in dry-run
mode so installing Warden never closes anything by surprise.
"""

from __future__ import annotations

import typing as typ

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from warden.logging import get_logger, log_warning
from warden.moderation.errors import (
    ConfigurationError,
    ContentNotFoundError,
    FetchError,
)

from .models import RepositoryConfig
from .validation import validate_repository_config

if typ.TYPE_CHECKING:
    from warden.moderation.protocol import RepositoryContents

CONFIG_PATH = ".github/warden.yml"
YAML_VERSION = (1, 2)
_SECTIONS = ("spam", "community", "pr")

logger = get_logger(__name__)


def merge_with_defaults(overrides: dict[str, typ.Any] | None) -> dict[str, typ.Any]:
    """Overlay repository overrides onto the default configuration.

    Each section is merged one level deep: keys present in the override
    replace the default value for that key, and absent keys keep their
    default. ``dryRun`` defaults to ``True`` when ``overrides`` is ``None``.
    The inputs are never mutated.
    """
    merged: dict[str, typ.Any] = msgspec.to_builtins(RepositoryConfig())
    if overrides is None:
        merged["dryRun"] = True
        return merged

    dry_run = overrides.get("dryRun")
    merged["dryRun"] = False if dry_run is None else dry_run
    for section in _SECTIONS:
        section_overrides = overrides.get(section)
        if section_overrides is None:
            continue
        if not isinstance(section_overrides, dict):
            raise ConfigurationError([f"{section} must be a mapping"])
        merged[section] = {**merged[section], **section_overrides}
    return merged


def parse_repository_config(text: str | None) -> RepositoryConfig:
    """Parse YAML text (or its absence) into a validated configuration.

    Raises
    ------
    ConfigurationError
        If the YAML is malformed, has the wrong shape, or fails validation.

    """
    overrides: dict[str, typ.Any] | None = None
    if text is not None:
        try:
            loaded = _yaml().load(text)
        except YAMLError as exc:
            raise ConfigurationError([f"failed to parse YAML: {exc}"]) from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(["configuration root must be a mapping"])
        overrides = loaded

    merged = merge_with_defaults(overrides)
    try:
        config = msgspec.convert(merged, type=RepositoryConfig)
    except msgspec.ValidationError as exc:
        raise ConfigurationError([f"schema validation failed: {exc}"]) from exc

    return validate_repository_config(config)


async def load_repository_config(contents: RepositoryContents) -> RepositoryConfig:
    """Fetch and parse the repository's configuration file.

    A missing file, or a read failure, yields the defaults in dry-run mode.

    Raises
    ------
    ConfigurationError
        If the file exists but is invalid.

    """
    try:
        text: str | None = await contents.fetch_file_content(CONFIG_PATH)
    except ContentNotFoundError:
        text = None
    except FetchError as exc:
        log_warning(
            logger,
            "Could not read %s, using defaults in dry-run mode: %s",
            CONFIG_PATH,
            exc,
        )
        text = None
    return parse_repository_config(text)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml

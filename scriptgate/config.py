"""Config loading for ScriptGate.

Reads `.scriptgate/config.yaml` (or `~/.scriptgate/config.yaml`).
Raises SystemExit on parse errors, a missing `version` field, or a malformed
field value (port, prefix, marker and extension lists).
If no config file is found, returns default values (safe to run without config).

Config search order:
  1. `config_path` argument (if provided — for testing or explicit override)
  2. SCRIPTGATE_CONFIG environment variable (if set)
  3. `.scriptgate/config.yaml` (working directory — for development)
  4. `~/.scriptgate/config.yaml` (home directory — for deployments)

Environment variable overrides (applied after the file):
  PORT            — overrides server.port; unparseable values fall back to the default
  SCRIPTGATE_ROOT — overrides content.root
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, NoReturn, Optional

import yaml

from scriptgate.constants import (
    DEFAULT_HOST,
    DEFAULT_MARKER_TOKENS,
    DEFAULT_PORT,
    DEFAULT_RAW_TEXT_EXTENSIONS,
    DEFAULT_ROOT_DIRNAME,
    DEFAULT_SNIPPET_BASE_URL,
    SCRIPT_PREFIX,
)
from scriptgate.utils.logger import get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION = 1

SUPPORTED_VERSIONS: frozenset[int] = frozenset({1})

DEFAULT_CONFIG_PATHS = [
    ".scriptgate/config.yaml",
    os.path.expanduser("~/.scriptgate/config.yaml"),
]


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class ServerConfig:
    """Listening socket configuration."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class ContentConfig:
    """Where scripts live and how they are exposed.

    root:                Directory holding servable files. Relative paths are
                         resolved against the working directory.
    prefix:              URL prefix for the script mount (leading and trailing slash).
    raw_text_extensions: Extensions forced to text/plain on raw passthrough.
    snippet_base_url:    Public base URL shown in the rendered loader snippet.
    """

    root: str = DEFAULT_ROOT_DIRNAME
    prefix: str = SCRIPT_PREFIX
    raw_text_extensions: tuple[str, ...] = DEFAULT_RAW_TEXT_EXTENSIONS
    snippet_base_url: str = DEFAULT_SNIPPET_BASE_URL

    @property
    def root_path(self) -> str:
        """Absolute, user-expanded root directory."""
        return os.path.abspath(os.path.expanduser(self.root))

    @property
    def mount_path(self) -> str:
        """Prefix without its trailing slash, as Starlette mounts expect."""
        return self.prefix.rstrip("/") or "/"


@dataclass
class ClassifierConfig:
    """User-Agent marker tokens identifying interactive browsers."""

    markers: tuple[str, ...] = DEFAULT_MARKER_TOKENS


@dataclass
class Config:
    """Root configuration object populated from .scriptgate/config.yaml.

    All fields have safe defaults — ScriptGate can start without any config file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    server: ServerConfig = field(default_factory=ServerConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    path: Optional[str] = None  # Path to the loaded config file

    @classmethod
    def defaults(cls) -> "Config":
        """Return a fully-default Config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Raises:
            SystemExit(1): On a malformed port or prefix, or when markers or
                           raw_text_extensions is not a list of strings.
        """
        # ── Server ────────────────────────────────────────────────────────────
        server_raw = raw.get("server", {}) or {}
        port = server_raw.get("port", DEFAULT_PORT)
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            _fail(
                f"CONFIG ERROR: Invalid server.port: {port!r}. "
                "The port must be an integer between 1 and 65535."
            )
        server = ServerConfig(host=server_raw.get("host", DEFAULT_HOST), port=port)

        # ── Content ───────────────────────────────────────────────────────────
        content_raw = raw.get("content", {}) or {}
        prefix = content_raw.get("prefix", SCRIPT_PREFIX)
        if not (isinstance(prefix, str) and prefix.startswith("/") and prefix.endswith("/")):
            _fail(
                f"CONFIG ERROR: Invalid content.prefix: {prefix!r}. "
                "The prefix must start and end with '/' (e.g. '/script/')."
            )
        content = ContentConfig(
            root=str(content_raw.get("root", DEFAULT_ROOT_DIRNAME)),
            prefix=prefix,
            raw_text_extensions=_string_list(
                content_raw.get("raw_text_extensions", DEFAULT_RAW_TEXT_EXTENSIONS),
                "content.raw_text_extensions",
            ),
            snippet_base_url=content_raw.get("snippet_base_url", DEFAULT_SNIPPET_BASE_URL),
        )

        # ── Classifier ────────────────────────────────────────────────────────
        classifier_raw = raw.get("classifier", {}) or {}
        markers = tuple(
            m.lower()
            for m in _string_list(
                classifier_raw.get("markers", DEFAULT_MARKER_TOKENS), "classifier.markers"
            )
            if m
        )
        if not markers:
            _fail(
                "CONFIG ERROR: classifier.markers must list at least one token. "
                "An empty marker set would serve raw files to every client."
            )
        classifier = ClassifierConfig(markers=markers)

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            server=server,
            content=content,
            classifier=classifier,
            path=path,
        )


# ─── Config loading ───────────────────────────────────────────────────────────


def _fail(msg: str) -> NoReturn:
    print(msg, file=sys.stderr)
    raise SystemExit(1)


def _string_list(value: Any, key: str) -> tuple[str, ...]:
    # A bare YAML scalar would otherwise be split into single characters.
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        _fail(f"CONFIG ERROR: {key} must be a list of strings, got {value!r}.")
    return tuple(value)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate ScriptGate configuration.

    Search order:
      1. ``config_path`` argument (if provided)
      2. ``SCRIPTGATE_CONFIG`` environment variable (if set)
      3. ``.scriptgate/config.yaml`` (current working directory)
      4. ``~/.scriptgate/config.yaml`` (home directory)

    If no file is found at any of these paths, returns default Config (not an error).
    If a file is found but invalid, writes error to stderr and raises SystemExit(1).

    ``PORT`` and ``SCRIPTGATE_ROOT`` are applied afterwards regardless of whether a
    config file was found.

    Raises:
        SystemExit(1): On YAML parse error, missing ``version`` field, unsupported
                       version, or invalid field values.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("SCRIPTGATE_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    # ── No config file found ─────────────────────────────────────────────────
    if found_path is None:
        logger.info("No config file found — using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    # ── Parse config file ─────────────────────────────────────────────────────
    logger.info("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        _fail(
            f"CONFIG ERROR: Failed to parse {found_path}: {exc}\n"
            "ScriptGate refuses to start with an invalid config. "
            "Check the YAML syntax and try again."
        )
    except OSError as exc:
        _fail(f"CONFIG ERROR: Could not read {found_path}: {exc}")

    if not isinstance(raw, dict):
        if raw is None:
            _fail(
                f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        _fail(
            f"CONFIG ERROR: {found_path} is not a valid YAML mapping.\n"
            "The config file must be a YAML dictionary at the top level."
        )

    # ── Version validation ────────────────────────────────────────────────────
    version = raw.get("version")
    if version is None:
        _fail(
            f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )
    if version not in SUPPORTED_VERSIONS:
        _fail(
            f"CONFIG ERROR: Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )

    config = Config.from_dict(raw, path=found_path)
    _apply_env_overrides(config)

    logger.info(
        "Config loaded",
        path=found_path,
        version=config.version,
        root=config.content.root_path,
        markers=list(config.classifier.markers),
    )
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    PORT:            integer port; an unparseable value keeps the configured port
                     and logs a warning rather than refusing to start.
    SCRIPTGATE_ROOT: replaces content.root.
    """
    env_port = os.environ.get("PORT")
    if env_port is not None and env_port.strip():
        try:
            port = int(env_port)
        except ValueError:
            logger.warning(
                "PORT is not a valid integer — keeping configured port",
                value=env_port,
                port=config.server.port,
            )
        else:
            if 0 < port < 65536:
                config.server.port = port
            else:
                logger.warning(
                    "PORT is out of range — keeping configured port",
                    value=env_port,
                    port=config.server.port,
                )

    env_root = os.environ.get("SCRIPTGATE_ROOT")
    if env_root:
        config.content.root = env_root

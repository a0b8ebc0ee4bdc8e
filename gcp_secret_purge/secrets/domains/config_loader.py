"""Configuration loader for gcp-secret-purge."""
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple
import yaml

logger = logging.getLogger(__name__)

CREDENTIALS_ENV = "GOOGLE_APPLICATION_CREDENTIALS"
PROJECT_ENV = "PROJECT"
DRY_RUN_ENV = "DRY_RUN"
CONFIG_PATH_ENV = "SECRET_PURGE_CONFIG"

DEFAULT_SKIP_FILE = "skip.txt"


class ConfigError(Exception):
    """Configuration error exception."""
    pass


class MissingConfiguration(ConfigError):
    """A required environment variable is not set."""

    def __init__(self, name: str):
        super().__init__(f"You must provide {name} as an environment variable")
        self.name = name


@dataclass(frozen=True)
class PurgeConfig:
    """Settings for a single purge run, built once at startup."""
    credentials_path: str
    project: str
    skip_file: str = DEFAULT_SKIP_FILE
    dry_run: bool = False
    skip_list: Tuple[str, ...] = ()


def require_env(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Return a required environment variable.

    Args:
        name: Variable name
        environ: Mapping to read from (defaults to os.environ)

    Raises:
        MissingConfiguration: If the variable is absent, empty or blank
    """
    env = os.environ if environ is None else environ
    value = (env.get(name) or "").strip()
    if value:
        return value
    raise MissingConfiguration(name)


def load_skip_list(path: str = DEFAULT_SKIP_FILE) -> List[str]:
    """
    Read the skip list, one short secret name per line.

    Blank lines are dropped and surrounding whitespace is trimmed.
    Order is preserved and duplicates are kept.

    Returns:
        List of short names, or an empty list if the file doesn't exist
    """
    skip_path = Path(path)
    if not skip_path.exists():
        logger.info(f"No skip file at {skip_path}, nothing will be skipped")
        return []

    try:
        raw = skip_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read skip file at {skip_path}: {e}")

    skips = []
    for line in raw.split("\n"):
        name = line.strip()
        if name:
            skips.append(name)

    logger.info(f"Loaded {len(skips)} skip entries from {skip_path}")
    return skips


def normalize_scope(project: str) -> str:
    """Turn a bare project id into a ``projects/<id>`` parent path."""
    project = project.strip().rstrip("/")
    if "/" in project:
        return project
    return f"projects/{project}"


def _load_settings_file(config_path: str) -> Dict[str, Any]:
    """
    Load optional YAML settings.

    Supported keys: skip_file, dry_run. The project always comes from
    the PROJECT environment variable.

    Raises:
        ConfigError: If the file is missing, unparsable or malformed
    """
    if not os.path.exists(config_path):
        raise ConfigError(f"Configuration file not found at: {config_path}")

    try:
        with open(config_path, 'r') as f:
            settings = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if settings is None:
        logger.warning(f"Config file at {config_path} is empty, ignoring it")
        return {}

    if not isinstance(settings, dict):
        raise ConfigError(
            f"Config file at {config_path} must be a mapping, got {type(settings).__name__}\n"
            f"Expected format:\n"
            f"skip_file: skip.txt\n"
            f"dry_run: false"
        )

    if "project" in settings:
        raise ConfigError(
            f"'project' is not allowed in {config_path}\n"
            f"Set the {PROJECT_ENV} environment variable instead."
        )

    unknown = set(settings) - {"skip_file", "dry_run"}
    if unknown:
        logger.warning(f"Ignoring unknown keys in {config_path}: {', '.join(sorted(unknown))}")

    if "dry_run" in settings and not isinstance(settings["dry_run"], bool):
        raise ConfigError(f"'dry_run' in {config_path} must be true or false")

    if "skip_file" in settings and not isinstance(settings["skip_file"], str):
        raise ConfigError(f"'skip_file' in {config_path} must be a string")

    logger.info(f"Settings loaded from {config_path}")
    return settings


def load_config(
    config_path: Optional[str] = None,
    skip_file: Optional[str] = None,
    dry_run: Optional[bool] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PurgeConfig:
    """
    Build the run configuration.

    Priority order for each setting:
    1. Explicit argument (CLI flag)
    2. Environment variable
    3. YAML settings file (``config_path`` or SECRET_PURGE_CONFIG)
    4. Default

    Args:
        config_path: Optional YAML settings file
        skip_file: Skip list path override
        dry_run: Force dry-run mode when True
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        PurgeConfig with the skip list already loaded

    Raises:
        MissingConfiguration: If credentials or project are not set
        ConfigError: If the settings file or credentials file is invalid
    """
    env = os.environ if environ is None else environ

    credentials_path = require_env(CREDENTIALS_ENV, env)
    if not os.path.isfile(credentials_path):
        raise ConfigError(
            f"Service account file not found at: {credentials_path}\n"
            f"Please ensure {CREDENTIALS_ENV} points to an existing file."
        )

    project = require_env(PROJECT_ENV, env)

    config_path = config_path or env.get(CONFIG_PATH_ENV)
    settings = _load_settings_file(config_path) if config_path else {}

    if dry_run is None:
        if DRY_RUN_ENV in env:
            dry_run = env[DRY_RUN_ENV] == "true"
        else:
            dry_run = settings.get("dry_run", False)

    skip_file = skip_file or settings.get("skip_file") or DEFAULT_SKIP_FILE

    config = PurgeConfig(
        credentials_path=credentials_path,
        project=normalize_scope(project),
        skip_file=skip_file,
        dry_run=dry_run,
        skip_list=tuple(load_skip_list(skip_file)),
    )

    logger.debug(f"Using service account: {config.credentials_path}")
    logger.debug(f"Using project: {config.project}")
    if config.dry_run:
        logger.info("Dry run enabled, no secret will be deleted")

    return config

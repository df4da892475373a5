"""Configuration loading for apianalyzer.

Reads settings from pyproject.toml under the [tool.apianalyzer] section, with
environment variable overrides for the registry and compiler settings.

apianalyzer/src/apianalyzer/config.py
"""

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import load_dotenv

if sys.version_info >= (3, 11):

    import tomllib
else:

    try:

        import tomli as tomllib
    except ImportError as e:

        raise ImportError(
            "apianalyzer requires Python 3.11+ or the 'tomli' package "
            "to parse pyproject.toml on Python 3.10. "
            "Hint: Try running: pip install tomli"
        ) from e

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_ENDPOINT = "https://management.azure.com"
DEFAULT_REGISTRY_API_VERSION = "2024-06-01-preview"
DEFAULT_REGISTRY_TIMEOUT_SECONDS = 60
DEFAULT_COMPILER_COMMAND = "tsp"
DEFAULT_COMPILER_TIMEOUT_SECONDS = 300


def _load_env_files() -> None:
    """Load environment variables from the first .env file found."""
    env_paths = [
        Path.cwd() / ".env",
        Path.home() / ".apianalyzer.env",
    ]

    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment from {env_path}")
            break


def walk_up_for_config(start_path: Path) -> Path | None:
    """Return the nearest directory at or above start_path holding a pyproject.toml."""
    current = start_path.resolve()
    if current.is_file():
        current = current.parent

    for candidate in [current] + list(current.parents):
        if (candidate / "pyproject.toml").is_file():
            return candidate
    return None


class Config:
    """Holds the apianalyzer configuration loaded from pyproject.toml.

    Attributes:
    project_root: The directory containing the pyproject.toml that was read,
    or None if none was found.
    settings: A read-only view of the [tool.apianalyzer] table. Empty if the
    file or section is missing or invalid.

    """

    def __init__(self, project_root: Path | None, config_dict: dict[str, Any]):
        self._project_root = project_root
        self._config_dict = config_dict.copy()

    @property
    def project_root(self) -> Path | None:
        """The detected project root directory, or None if not found."""
        return self._project_root

    @property
    def settings(self) -> Mapping[str, Union[str, bool, int, list, dict]]:
        """Read-only view of the settings loaded from [tool.apianalyzer]."""
        return self._config_dict

    def get(
        self, key: str, default: Union[str, bool, int, list, dict, None] = None
    ) -> Union[str, bool, int, list, dict, None]:
        """Gets a value from the loaded settings, returning default if not found."""
        return self._config_dict.get(key, default)

    def __getitem__(self, key: str) -> Union[str, bool, int, list, dict]:
        if key not in self._config_dict:
            raise KeyError(
                f"Required configuration key '{key}' not found in "
                f"[tool.apianalyzer] section of pyproject.toml."
            )
        return self._config_dict[key]

    def __contains__(self, key: str) -> bool:
        return key in self._config_dict

    def is_present(self) -> bool:
        """Checks if a project root was found and some settings were loaded."""
        return self._project_root is not None and bool(self._config_dict)


def load_config(start_path: Path) -> Config:
    """Loads apianalyzer configuration from the nearest pyproject.toml.

    Args:
    start_path: The directory to start searching upwards for pyproject.toml.

    Returns:
    A Config object. Its settings are empty when no usable
    [tool.apianalyzer] table is found.

    """
    project_root = walk_up_for_config(start_path)
    loaded_settings: dict[str, Any] = {}

    if not project_root:
        logger.debug(
            f"Could not find project root (pyproject.toml) searching from '{start_path}'. "
            "Using defaults and environment only."
        )
        return Config(project_root=None, config_dict=loaded_settings)

    pyproject_path = project_root / "pyproject.toml"
    logger.debug(f"Attempting to load config from: {pyproject_path}")

    try:
        with open(pyproject_path, "rb") as f:
            full_toml_config = tomllib.load(f)

        tool_section = full_toml_config.get("tool")
        if not isinstance(tool_section, dict):
            logger.debug("pyproject.toml [tool] section is missing or invalid")
            analyzer_config = {}
        else:
            analyzer_config = tool_section.get("apianalyzer", {})

        if isinstance(analyzer_config, dict):
            loaded_settings = analyzer_config
            if loaded_settings:
                logger.debug(f"Loaded [tool.apianalyzer] settings from {pyproject_path}")
            else:
                logger.debug(f"Found {pyproject_path}, but [tool.apianalyzer] is empty or missing.")
        else:
            logger.warning(
                f"[tool.apianalyzer] section in {pyproject_path} is not a valid table. "
                "Ignoring this section."
            )

    except tomllib.TOMLDecodeError as e:
        logger.error(f"Error parsing {pyproject_path}: {e}. Using empty configuration.")
    except OSError as e:
        logger.error(f"Error reading {pyproject_path}: {e}. Using empty configuration.")

    return Config(project_root=project_root, config_dict=loaded_settings)


@dataclass
class RegistryConfig:
    """Typed registry (API Center) connection settings."""

    endpoint: str = DEFAULT_REGISTRY_ENDPOINT
    api_version: str = DEFAULT_REGISTRY_API_VERSION
    access_token: Optional[str] = None
    timeout_seconds: int = DEFAULT_REGISTRY_TIMEOUT_SECONDS

    def __post_init__(self):
        if not self.endpoint:
            raise ValueError("endpoint is required - configure in [tool.apianalyzer.registry]")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self.endpoint = self.endpoint.rstrip("/")


@dataclass
class CompilerConfig:
    """Typed settings for the TypeSpec compiler backend."""

    command: str = DEFAULT_COMPILER_COMMAND
    timeout_seconds: int = DEFAULT_COMPILER_TIMEOUT_SECONDS
    ruleset: Optional[str] = None
    project_dir: Optional[str] = None

    def __post_init__(self):
        if not self.command:
            raise ValueError("command is required - configure in [tool.apianalyzer.compiler]")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


def _get_env_int(key: str) -> Optional[int]:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Ignoring non-integer value for {key}: {value!r}")
            return None
    return None


def _env_int_or(key: str, default: Any) -> Any:
    """Integer from the environment when set, else default."""
    value = _get_env_int(key)
    return value if value is not None else default


def _section(config: Config, name: str) -> dict[str, Any]:
    section = config.get(name, {})
    if not isinstance(section, dict):
        logger.warning(f"[tool.apianalyzer.{name}] is not a table. Ignoring it.")
        return {}
    return section


def get_registry_config(config: Optional[Config] = None) -> RegistryConfig:
    """Get typed registry configuration.

    Environment variables take precedence over [tool.apianalyzer.registry].
    """
    if config is None:
        config = load_config(Path.cwd())
    _load_env_files()

    registry = _section(config, "registry")

    return RegistryConfig(
        endpoint=(
            os.getenv("APIANALYZER_REGISTRY_ENDPOINT")
            or registry.get("endpoint", DEFAULT_REGISTRY_ENDPOINT)
        ),
        api_version=(
            os.getenv("APIANALYZER_REGISTRY_API_VERSION")
            or registry.get("api_version", DEFAULT_REGISTRY_API_VERSION)
        ),
        access_token=os.getenv("APIANALYZER_ACCESS_TOKEN") or registry.get("access_token"),
        timeout_seconds=_env_int_or(
            "APIANALYZER_REGISTRY_TIMEOUT",
            registry.get("timeout_seconds", DEFAULT_REGISTRY_TIMEOUT_SECONDS),
        ),
    )


def _project_path(config: Config, value: Optional[str]) -> Optional[str]:
    """Resolve a relative path setting against the project root."""
    if value and config.project_root is not None and not Path(value).is_absolute():
        return str(config.project_root / value)
    return value


def get_compiler_config(config: Optional[Config] = None) -> CompilerConfig:
    """Get typed compiler configuration."""
    if config is None:
        config = load_config(Path.cwd())
    _load_env_files()

    compiler = _section(config, "compiler")

    return CompilerConfig(
        command=os.getenv("APIANALYZER_TSP_COMMAND") or compiler.get("command", DEFAULT_COMPILER_COMMAND),
        timeout_seconds=_env_int_or(
            "APIANALYZER_COMPILER_TIMEOUT",
            compiler.get("timeout_seconds", DEFAULT_COMPILER_TIMEOUT_SECONDS),
        ),
        ruleset=_project_path(config, compiler.get("ruleset")),
        project_dir=_project_path(
            config,
            os.getenv("APIANALYZER_COMPILER_PROJECT_DIR") or compiler.get("project_dir"),
        ),
    )


__all__ = [
    "Config",
    "load_config",
    "walk_up_for_config",
    "RegistryConfig",
    "CompilerConfig",
    "get_registry_config",
    "get_compiler_config",
]

"""Configuration management module.

Builds the immutable settings for one gethosts run from, in priority order:

1. CLI arguments
2. Environment variables (GETHOSTS_*)
3. Config file (~/.gethosts/config.toml)
4. Built-in defaults

Security:
- Config file permissions: 0600 (owner read/write only)
- Passwords are never read from the config file
- Cache file name validation (no path components)
"""

import logging
import math
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for newer Python versions
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

from gethosts.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_FILE = "hostslist.txt"
DEFAULT_CACHE_DURATION = 3600.0  # 1 hour

ENV_PREFIX = "GETHOSTS_"
CONFIG_KEYS = (
    "url",
    "user",
    "password",
    "cache_dir",
    "cache_file",
    "cache_duration",
    "verify_tls",
    "timeout",
)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_duration(value: str | float | int) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) and Go-style duration strings made of
    number+unit parts, with units ns, us, ms, s, m and h.

    Args:
        value: Duration string or number of seconds

    Returns:
        Duration in seconds

    Raises:
        ConfigError: If the value is malformed or negative

    Examples:
        >>> parse_duration("1h30m")
        5400.0
        >>> parse_duration("90")
        90.0
        >>> parse_duration(1.5)
        1.5
    """
    if isinstance(value, bool):
        raise ConfigError(f"Invalid duration: {value!r}")

    if isinstance(value, (int, float)):
        seconds = float(value)
    elif not isinstance(value, str):
        raise ConfigError(f"Invalid duration: {value!r}")
    else:
        text = value.strip()
        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_duration_string(text)

    if not math.isfinite(seconds):
        raise ConfigError(f"Duration must be finite: {value!r}")
    if seconds < 0:
        raise ConfigError(f"Duration must not be negative: {value!r}")
    return seconds


def _parse_duration_string(text: str) -> float:
    if not text:
        raise ConfigError("Invalid duration: empty string")

    pos = 0
    seconds = 0.0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if not match:
            raise ConfigError(f"Invalid duration: {text!r} (examples: 90s, 30m, 1h30m)")
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return seconds


def parse_bool(value: str | bool) -> bool:
    """Parse a boolean setting from an environment variable or config value.

    Raises:
        ConfigError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value

    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")


@dataclass(frozen=True)
class HostsConfig:
    """Settings for one gethosts run.

    Attributes:
        url: Host list URL
        user: Basic auth user name
        password: Basic auth password
        cache_dir: Directory holding the cache file
        cache_file: Cache file name inside cache_dir
        cache_duration: Seconds a cached list stays fresh
        verify_tls: Validate the server certificate
        timeout: Request timeout in seconds, None to wait forever
    """

    url: str
    user: str = ""
    password: str = ""
    cache_dir: Path = Path.home() / ".gethosts"
    cache_file: str = DEFAULT_CACHE_FILE
    cache_duration: float = DEFAULT_CACHE_DURATION
    verify_tls: bool = False
    timeout: float | None = None

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.url:
            raise ConfigError(
                "No host list URL configured. Use --url, GETHOSTS_URL "
                "or 'url' in ~/.gethosts/config.toml"
            )

        if not self.cache_file or Path(self.cache_file).name != self.cache_file:
            raise ConfigError(f"Cache file must be a plain file name: {self.cache_file!r}")

        if self.cache_file in (".", ".."):
            raise ConfigError(f"Cache file must be a plain file name: {self.cache_file!r}")

        if not math.isfinite(self.cache_duration) or self.cache_duration < 0:
            raise ConfigError("Cache duration must be a finite, non-negative number of seconds")

        if self.timeout is not None and not (0 < self.timeout < math.inf):
            raise ConfigError("Timeout must be a positive finite number of seconds")

    @property
    def cache_path(self) -> Path:
        """Full path of the cache file."""
        return self.cache_dir / self.cache_file

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HostsConfig":
        """Create from a dictionary of raw (string or TOML typed) values.

        Raises:
            ConfigError: If a value cannot be converted
        """
        kwargs: dict[str, Any] = {"url": data.get("url") or ""}

        for key in ("user", "password", "cache_file"):
            if data.get(key) is not None:
                kwargs[key] = str(data[key])

        if data.get("cache_dir"):
            kwargs["cache_dir"] = Path(data["cache_dir"]).expanduser()

        if data.get("cache_duration") is not None:
            kwargs["cache_duration"] = parse_duration(data["cache_duration"])

        if data.get("verify_tls") is not None:
            kwargs["verify_tls"] = parse_bool(data["verify_tls"])

        if data.get("timeout") is not None:
            timeout = parse_duration(data["timeout"])
            kwargs["timeout"] = timeout or None

        return cls(**kwargs)


class ConfigManager:
    """Load gethosts configuration.

    Configuration is stored at ~/.gethosts/config.toml with secure permissions.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".gethosts"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file

        Raises:
            ConfigError: If a custom path is given but does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_file(cls, custom_path: str | None = None) -> dict[str, Any]:
        """Load raw settings from the TOML config file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Dictionary of settings, empty if the default file does not exist

        Raises:
            ConfigError: If the file cannot be read or contains a password
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return {}

        try:
            # Verify file permissions
            stat = config_path.stat()
            mode = stat.st_mode & 0o777

            if mode & 0o077:  # Check if group/other have any permissions
                logger.warning(
                    f"Config file has insecure permissions: {oct(mode)}. Fixing to 0600..."
                )
                os.chmod(config_path, 0o600)

            with open(config_path, "rb") as f:
                data = tomli.load(f)

        except Exception as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        if "password" in data:
            raise ConfigError(
                f"Refusing to read password from {config_path}. "
                f"Use --password or {ENV_PREFIX}PASSWORD instead."
            )

        unknown = sorted(set(data) - set(CONFIG_KEYS))
        for key in unknown:
            logger.warning(f"Unknown config key: {key}")

        logger.debug(f"Loaded config from: {config_path}")
        return {key: value for key, value in data.items() if key in CONFIG_KEYS}

    @staticmethod
    def load_environment(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Load settings from GETHOSTS_* environment variables.

        Environment variables:
            GETHOSTS_URL, GETHOSTS_USER, GETHOSTS_PASSWORD, GETHOSTS_CACHE_DIR,
            GETHOSTS_CACHE_FILE, GETHOSTS_CACHE_DURATION, GETHOSTS_VERIFY_TLS,
            GETHOSTS_TIMEOUT
        """
        environ = os.environ if environ is None else environ
        return {key: environ.get(ENV_PREFIX + key.upper()) for key in CONFIG_KEYS}

    @classmethod
    def load_config(
        cls,
        custom_path: str | None = None,
        cli_values: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> HostsConfig:
        """Load and merge configuration from all sources.

        Args:
            custom_path: Custom config file path (optional)
            cli_values: Values from CLI options, None meaning "not given"
            environ: Environment mapping (default: os.environ)

        Returns:
            HostsConfig for this run

        Raises:
            ConfigError: If any source is invalid

        Example:
            >>> config = ConfigManager.load_config(
            ...     cli_values={"url": "https://inventory/hosts", "cache_duration": "30m"}
            ... )
            >>> config.cache_duration
            1800.0
        """
        merged: dict[str, Any] = dict(cls.load_file(custom_path))

        for source in (cls.load_environment(environ), cli_values or {}):
            for key, value in source.items():
                if value is not None:
                    merged[key] = value

        return HostsConfig.from_dict(merged)

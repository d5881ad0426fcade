"""Configuration management for commitguard."""
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple
import os
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import tomli
import tomli_w

from .models import BREAKING_CHANGE, DEFAULT_TYPES

DEFAULT_CONFIG_FILENAME = ".commitguard.toml"
CONFIG_SECTION = "commitguard"

DEFAULT_FOOTER_KEYS = (
    "Closes",
    "Refs",
    "Relates-to",
    BREAKING_CHANGE,
    "Co-authored-by",
)

DEFAULT_IGNORE_PATTERNS = (
    r"^Merge ",
    r'^Revert "',
    r"^(fixup|squash|amend)! ",
)


class ConfigError(Exception):
    """Raised when a configuration file or value cannot be used."""


class Config(BaseModel):
    """Configuration settings for commitguard.

    This class defines all configurable options that can be set either
    via the config file, environment variables or command line arguments.
    Instances are frozen; use ``with_overrides`` to derive overrides.
    """

    model_config = ConfigDict(frozen=True)

    allowed_types: Tuple[str, ...] = Field(
        default=DEFAULT_TYPES,
        description="Commit types accepted in the header"
    )

    max_subject_length: int = Field(
        default=72,
        gt=0,
        description="Hard limit for the subject length"
    )

    recommended_subject_length: int = Field(
        default=50,
        gt=0,
        description="Subject length above which a warning is reported"
    )

    require_scope: bool = Field(
        default=False,
        description="Whether every header must carry a scope"
    )

    allowed_scopes: Tuple[str, ...] = Field(
        default=(),
        description="Scopes accepted in the header (empty accepts any)"
    )

    footer_allow_list: Tuple[str, ...] = Field(
        default=DEFAULT_FOOTER_KEYS,
        description="Footer keys accepted without a warning"
    )

    max_body_line_length: int = Field(
        default=72,
        ge=0,
        description="Body line length above which a warning is reported (0 disables)"
    )

    ignore_patterns: Tuple[str, ...] = Field(
        default=DEFAULT_IGNORE_PATTERNS,
        description="Regular expressions for headers that are not checked"
    )

    comment_char: str = Field(
        default="#",
        min_length=1,
        max_length=1,
        description="Comment character git uses in the message file"
    )

    always_log: bool = Field(
        default=False,
        description="Whether to always write a log file"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Path to log file (if not using automatic log file generation)"
    )

    @field_validator("allowed_types")
    @classmethod
    def _check_types(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("at least one commit type must be allowed")
        for item in value:
            if not re.fullmatch(r"[a-z][a-z0-9]*", item):
                raise ValueError(f"invalid commit type {item!r}")
        return value

    @field_validator("ignore_patterns")
    @classmethod
    def _check_patterns(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid ignore pattern {pattern!r}: {e}") from e
        return value

    @staticmethod
    def _sanitize_string(value: str) -> str:
        """Strip control characters from string values."""
        if not value:
            return value

        value = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', value)

        if len(value) > 1000:
            value = value[:1000]

        return value.strip()

    @staticmethod
    def _is_safe_path(path: str) -> bool:
        """Check if a path is safe (no path traversal)."""
        if not path:
            return False

        if '..' in Path(path).parts or '\\' in path:
            return False

        if os.path.isabs(path):
            return False

        return True

    @staticmethod
    def _env_overrides() -> dict:
        """Read ``COMMITGUARD_*`` environment variables."""
        env_mapping = {
            'COMMITGUARD_ALLOWED_TYPES': 'allowed_types',
            'COMMITGUARD_MAX_SUBJECT_LENGTH': 'max_subject_length',
            'COMMITGUARD_RECOMMENDED_SUBJECT_LENGTH': 'recommended_subject_length',
            'COMMITGUARD_REQUIRE_SCOPE': 'require_scope',
            'COMMITGUARD_ALLOWED_SCOPES': 'allowed_scopes',
            'COMMITGUARD_FOOTER_ALLOW_LIST': 'footer_allow_list',
            'COMMITGUARD_MAX_BODY_LINE_LENGTH': 'max_body_line_length',
            'COMMITGUARD_ALWAYS_LOG': 'always_log',
            'COMMITGUARD_LOG_FILE': 'log_file',
        }
        list_fields = {'allowed_types', 'allowed_scopes', 'footer_allow_list'}
        bool_fields = {'require_scope', 'always_log'}

        env_data = {}
        for env_var, field_name in env_mapping.items():
            if env_var not in os.environ:
                continue
            value = Config._sanitize_string(os.environ[env_var])

            if field_name in list_fields:
                value = tuple(item.strip() for item in value.split(',') if item.strip())
            elif field_name in bool_fields:
                value = value.lower() in ['true', '1', 'yes', 'on']

            env_data[field_name] = value
        return env_data

    @classmethod
    def env_field_names(cls) -> set:
        """Names of the fields currently set by environment variables."""
        return set(cls._env_overrides())

    @classmethod
    def load(cls, repo_path: Path, use_env: bool = True) -> 'Config':
        """Load configuration from the config file.

        Values are layered: defaults, then the ``[commitguard]`` table of
        the config file, then environment variables.

        Args:
            repo_path: Directory holding the config file
            use_env: Whether to apply ``COMMITGUARD_*`` environment variables

        Returns:
            Config: Configuration object with values from file or defaults

        Raises:
            ConfigError: If the file is not valid TOML or holds invalid values
        """
        config_path = Path(repo_path) / DEFAULT_CONFIG_FILENAME
        data = {}

        if config_path.exists():
            try:
                with config_path.open('rb') as f:
                    config_data = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                raise ConfigError(f"Error reading config file {config_path}: {e}") from e

            section = config_data.get(CONFIG_SECTION, config_data)
            if not isinstance(section, dict):
                raise ConfigError(
                    f"Invalid config file {config_path}: '{CONFIG_SECTION}' must be a table"
                )
            data = dict(section)
            for key, value in data.items():
                if isinstance(value, str):
                    data[key] = cls._sanitize_string(value)

        if use_env:
            data.update(cls._env_overrides())

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def save(self, repo_path: Path) -> Path:
        """Save configuration to the config file.

        Args:
            repo_path: Directory to write the config file into

        Returns:
            Path: The written config file
        """
        config_path = Path(repo_path) / DEFAULT_CONFIG_FILENAME

        config_dict = {
            k: v for k, v in self.model_dump(mode="json").items() if v is not None
        }

        if config_dict.get('log_file') and not self._is_safe_path(config_dict['log_file']):
            raise ConfigError(f"Unsafe log file path '{config_dict['log_file']}'")

        try:
            with config_path.open('wb') as f:
                tomli_w.dump({CONFIG_SECTION: config_dict}, f)
        except OSError as e:
            raise ConfigError(f"Error saving config file: {e}") from e
        return config_path

    def with_overrides(self, **overrides) -> 'Config':
        """Return a validated copy with the non-None overrides applied."""
        update = {k: v for k, v in overrides.items() if v is not None}
        if not update:
            return self
        try:
            return type(self)(**{**self.model_dump(), **update})
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def get_log_file(self) -> Optional[Path]:
        """Get the path to the log file.

        If always_log is True, generates a timestamped log file name.
        Otherwise, returns the configured log_file path if set.

        Returns:
            Optional[Path]: Path to the log file, or None if logging is disabled
        """
        if self.always_log:
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            return Path(f"commitguard_log-{timestamp}.log")
        elif self.log_file:
            if self._is_safe_path(self.log_file):
                return Path(self.log_file)
            raise ConfigError(f"Unsafe log file path '{self.log_file}'")
        return None

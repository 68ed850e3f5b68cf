"""
Unified configuration management for Mediumroast Reports.

This module provides:
- Environment-aware configuration (development, staging, production, test)
- YAML config loading with environment-specific overlays
- Environment variable overrides
- Pydantic models for type-safe access

Usage:
    from mrreports.utils.config import get_config

    config = get_config()
    reports = config.settings.reports
    token = config.github_token
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import MissingConfigError


# =============================================================================
# Environment Definition
# =============================================================================

class Environment(Enum):
    """Environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


# =============================================================================
# Pydantic Config Models (for type-safe access)
# =============================================================================

class GitHubConfig(BaseModel):
    """Configuration for the GitHub repository holding the Mediumroast objects."""
    api_url: str = Field(default="https://api.github.com")
    owner: Optional[str] = Field(default=None)
    repo: Optional[str] = Field(default=None)
    branch: str = Field(default="main")
    committer_name: str = Field(default="mediumroast-reports")
    committer_email: str = Field(default="mediumroast-reports@users.noreply.github.com")
    max_retries: int = Field(default=3)
    retry_backoff: float = Field(default=1.0)
    timeout: int = Field(default=30)


class S3Config(BaseModel):
    """Configuration for the S3 compatible store holding interaction documents."""
    endpoint_url: Optional[str] = Field(default=None)
    region: str = Field(default="us-east-1")
    source_bucket: Optional[str] = Field(default=None)
    max_retries: int = Field(default=3)


class ReportSettings(BaseModel):
    """Settings handed to every report assembler."""
    model_config = ConfigDict(frozen=True)

    companies_dir: str = Field(default="Companies")
    studies_dir: str = Field(default="Studies")
    index_name: str = Field(default="README.md")
    top_insight_count: int = Field(default=5)
    insights_per_interaction: int = Field(default=2)
    abstract_max_chars: int = Field(default=500)
    creator: str = Field(default="Mediumroast for GitHub")
    author_company: str = Field(default="Mediumroast, Inc.")
    output_dir: str = Field(default="reports")
    work_dir: str = Field(default="reports/work")
    contact_discord: str = Field(default="https://discord.gg/ebM4Cf8meK")
    contact_email: str = Field(default="hello@mediumroast.io")
    support_email: str = Field(default="help@mediumroast.io")


class SyncConfig(BaseModel):
    """Configuration for report reconciliation."""
    max_workers: int = Field(default=4)
    update_message: str = Field(default="Update {name} report")
    delete_message: str = Field(default="Delete {name} report")


class BranchConfig(BaseModel):
    """Configuration for branch pruning."""
    max_branches: int = Field(default=15)


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="INFO")
    log_path: str = Field(default="logs")
    max_log_files: int = Field(default=30)
    log_format: str = Field(default="json")


class Settings(BaseModel):
    """Main settings container."""
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    s3: S3Config = Field(default_factory=S3Config)
    reports: ReportSettings = Field(default_factory=ReportSettings)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    branches: BranchConfig = Field(default_factory=BranchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class EnvSettings(BaseSettings):
    """Environment variable settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: Optional[str] = Field(default=None)
    github_repository: Optional[str] = Field(default=None)
    mr_s3_access_key: Optional[str] = Field(default=None)
    mr_s3_secret_key: Optional[str] = Field(default=None)
    mr_s3_endpoint: Optional[str] = Field(default=None)
    mr_env: str = Field(default="development")
    log_level: Optional[str] = Field(default=None)


# =============================================================================
# Unified AppConfig Class
# =============================================================================

class AppConfig:
    """
    Unified configuration manager for Mediumroast Reports.

    Combines:
    - Environment-aware configuration (dev/staging/prod/test)
    - YAML config loading with environment overlays
    - Environment variable overrides
    - Type-safe Pydantic settings

    Usage:
        config = get_config()
        print(config.settings.github.repo)
        print(config.is_production)
    """

    def __init__(self, env: Optional[str] = None):
        """
        Initialize unified configuration.

        Args:
            env: Environment name. Defaults to MR_ENV or 'development'.
        """
        self._env_settings = EnvSettings()

        self._env_name = env or os.getenv("MR_ENV") or self._env_settings.mr_env
        try:
            self._environment = Environment(self._env_name)
        except ValueError:
            self._environment = Environment.DEVELOPMENT

        # Raw config dict (for dot-notation access)
        self._config: dict[str, Any] = {}

        self._load_config()

        self._settings = self._create_settings()

    def _load_config(self) -> None:
        """Load configuration files with environment overlay."""
        config_dir = get_project_root() / "config"

        base_path = config_dir / "settings.yaml"
        if base_path.exists():
            with open(base_path) as f:
                self._config = yaml.safe_load(f) or {}

        env_path = config_dir / f"settings.{self._environment.value}.yaml"
        if env_path.exists():
            with open(env_path) as f:
                env_config = yaml.safe_load(f) or {}
            self._deep_merge(self._config, env_config)

        self._apply_env_overrides()

    def _deep_merge(self, base: dict, overlay: dict) -> None:
        """Deep merge overlay dict into base dict."""
        for key, value in overlay.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        # GITHUB_REPOSITORY is "owner/repo" inside GitHub Actions
        if repository := self._env_settings.github_repository:
            owner, _, repo = repository.partition("/")
            if owner and repo:
                self._set_nested("github.owner", owner)
                self._set_nested("github.repo", repo)

        if branch := os.getenv("MR_GITHUB_BRANCH"):
            self._set_nested("github.branch", branch)

        if endpoint := self._env_settings.mr_s3_endpoint:
            self._set_nested("s3.endpoint_url", endpoint)

        if bucket := os.getenv("MR_S3_BUCKET"):
            self._set_nested("s3.source_bucket", bucket)

        if output_dir := os.getenv("MR_REPORTS_DIR"):
            self._set_nested("reports.output_dir", output_dir)

        if log_level := os.getenv("MR_LOG_LEVEL") or self._env_settings.log_level:
            self._set_nested("logging.level", log_level)

    def _set_nested(self, path: str, value: Any) -> None:
        """Set nested dictionary value using dot notation."""
        keys = path.split(".")
        d = self._config
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value

    def _create_settings(self) -> Settings:
        """Create typed Settings object from config dict."""
        return Settings(**self._config)

    # -------------------------------------------------------------------------
    # Public Properties
    # -------------------------------------------------------------------------

    @property
    def environment(self) -> Environment:
        """Current environment."""
        return self._environment

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self._environment == Environment.PRODUCTION

    @property
    def is_test(self) -> bool:
        """Check if running in test."""
        return self._environment == Environment.TEST

    @property
    def settings(self) -> Settings:
        """Get typed settings object."""
        return self._settings

    @property
    def github_token(self) -> str:
        """GitHub token, required for every GitHub operation."""
        token = self._env_settings.github_token
        if not token:
            raise MissingConfigError(
                "GITHUB_TOKEN is not set",
                {"operation": "github access"},
            )
        return token

    @property
    def s3_credentials(self) -> tuple[Optional[str], Optional[str]]:
        """S3 access key and secret key (None lets boto3 use its own chain)."""
        return (
            self._env_settings.mr_s3_access_key,
            self._env_settings.mr_s3_secret_key,
        )

    @property
    def output_dir(self) -> Path:
        """Get absolute report output directory."""
        return get_absolute_path(self._settings.reports.output_dir)

    @property
    def work_dir(self) -> Path:
        """Get absolute working directory for report packages."""
        return get_absolute_path(self._settings.reports.work_dir)

    # -------------------------------------------------------------------------
    # Access Methods
    # -------------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Config key (e.g., 'github.branch').
            default: Default value if not found.

        Returns:
            Configuration value.
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_github_config(self) -> dict[str, Any]:
        """Get GitHub configuration dict (without the token)."""
        github = self._settings.github
        return {
            "api_url": github.api_url,
            "repository": f"{github.owner}/{github.repo}",
            "branch": github.branch,
            "max_retries": github.max_retries,
            "timeout": github.timeout,
        }

    def get_report_config(self) -> dict[str, Any]:
        """Get report configuration dict."""
        return self._settings.reports.model_dump()

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []

        github = self._settings.github
        if not github.owner or not github.repo:
            errors.append("GitHub owner/repo not configured (set github.owner/github.repo or GITHUB_REPOSITORY)")

        reports = self._settings.reports
        if reports.top_insight_count < 1:
            errors.append(f"Invalid top_insight_count: {reports.top_insight_count} (must be >= 1)")
        if reports.insights_per_interaction < 1:
            errors.append(
                f"Invalid insights_per_interaction: {reports.insights_per_interaction} (must be >= 1)"
            )

        if self._settings.sync.max_workers < 1:
            errors.append(f"Invalid sync.max_workers: {self._settings.sync.max_workers}")

        if self.is_production and not self._env_settings.github_token:
            errors.append("Production requires GITHUB_TOKEN")

        return errors


# =============================================================================
# Global Instances and Accessor Functions
# =============================================================================

_config: Optional[AppConfig] = None


def get_project_root() -> Path:
    """Get the project root directory."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "config").exists() and (parent / "mrreports").exists():
            return parent
    return Path.cwd()


def get_absolute_path(relative_path: str) -> Path:
    """
    Convert a relative path to absolute path from project root.

    Args:
        relative_path: Path relative to project root.

    Returns:
        Absolute Path object.
    """
    path = Path(relative_path).expanduser()
    if path.is_absolute():
        return path
    return get_project_root() / path


def get_config(env: Optional[str] = None) -> AppConfig:
    """
    Get the unified configuration instance.

    Args:
        env: Optional environment override.

    Returns:
        AppConfig instance.
    """
    global _config
    if _config is None or env is not None:
        _config = AppConfig(env=env)
    return _config


def get_settings() -> Settings:
    """Get the current typed settings."""
    return get_config().settings


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config
    _config = None

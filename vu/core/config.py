"""Typed configuration loading and validation.

The config file is YAML::

    global:
      git:
        github:
          authenticate: true
    services:
      web:
        git: {repo: acme/web, type: github, version_filter: "v(.*)"}
        image: {name: ghcr.io/acme/web, tag: "${RELEASE_VERSION}"}

Everything that can be checked without the network is checked here, so a
misconfigured run fails before the first request.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

import yaml
from loguru import logger

from .result import Err, Ok, Result
from .secrets import CODEBERG_TOKEN, GITHUB_TOKEN, GITLAB_TOKEN, SecretsProvider
from .structured import StrDict, as_str_dict, get_bool, get_int, get_raw_str, get_str, get_table

__all__ = [
    "AppConfig",
    "ConfigError",
    "GitConfig",
    "GlobalConfig",
    "ImageConfig",
    "Provider",
    "ServiceConfig",
    "DEFAULT_VERSION_FILTER",
    "RELEASE_VERSION_PLACEHOLDER",
    "compile_version_filter",
    "load_config",
    "parse_config",
]

DEFAULT_VERSION_FILTER = "(.*)"
RELEASE_VERSION_PLACEHOLDER = "${RELEASE_VERSION}"


class Provider(Enum):
    """Source-control hosting service a release is read from."""

    GITHUB = "github"
    GITLAB = "gitlab"
    CODEBERG = "codeberg"
    NONE = "none"

    def __str__(self) -> str:
        return self.value

    @property
    def token_env(self) -> str | None:
        """Environment variable holding this provider's API token."""
        match self:
            case Provider.GITHUB:
                return GITHUB_TOKEN
            case Provider.GITLAB:
                return GITLAB_TOKEN
            case Provider.CODEBERG:
                return CODEBERG_TOKEN
            case Provider.NONE:
                return None


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or fails validation."""

    message: str
    path: Path | None = None
    service: str | None = None

    def __str__(self) -> str:
        prefix = f"service '{self.service}': " if self.service else ""
        location = f" ({self.path})" if self.path else ""
        return f"{prefix}{self.message}{location}"


def compile_version_filter(pattern: str) -> re.Pattern[str]:
    """Compile a version filter, requiring exactly one capture group.

    Raises:
        ValueError: If the pattern is invalid or has the wrong group count.
    """
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise ValueError(f"invalid version_filter {pattern!r}: {e}") from e
    if compiled.groups != 1:
        raise ValueError(
            f"version_filter {pattern!r} must have exactly one capture group, "
            f"found {compiled.groups}"
        )
    return compiled


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Where a service's upstream releases come from.

    Attributes:
        provider: Hosting service, or NONE for services without release tracking
        repo: Repository slug ("owner/name")
        project_id: Numeric project id, required for GitLab
        version_filter: Compiled filter; group 1 is the version
        private: Send the provider token with the request
        global_github_auth: Process-wide GitHub authentication flag
    """

    provider: Provider
    repo: str = ""
    project_id: int | None = None
    version_filter: re.Pattern[str] = field(
        default_factory=lambda: re.compile(DEFAULT_VERSION_FILTER)
    )
    private: bool = False
    global_github_auth: bool = False

    @property
    def identifier(self) -> str:
        if self.project_id is not None:
            return str(self.project_id)
        return self.repo

    @property
    def requires_token(self) -> bool:
        """Whether requests for this source must be authenticated."""
        if self.private:
            return self.provider is not Provider.NONE
        return self.provider is Provider.GITHUB and self.global_github_auth

    def with_global_github_auth(self, enabled: bool) -> GitConfig:
        return replace(self, global_github_auth=enabled)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> GitConfig:
        """Create GitConfig from the service's ``git`` table.

        Raises:
            ValueError: On unknown provider, bad filter, or missing fields.
        """
        raw_type = get_str(data, "type")
        if raw_type is None:
            raise ValueError("git.type is required")
        try:
            provider = Provider(raw_type.lower())
        except ValueError:
            choices = ", ".join(p.value for p in Provider)
            raise ValueError(f"unknown git.type {raw_type!r} (expected one of: {choices})") from None

        repo = get_str(data, "repo") or ""
        if provider in (Provider.GITHUB, Provider.CODEBERG) and not repo:
            raise ValueError(f"git.repo is required for {provider} sources")

        if "project_id" in data and data["project_id"] is not None:
            project_id = get_int(data, "project_id")
            if project_id is None:
                raise ValueError("git.project_id must be an integer")
        else:
            project_id = None

        raw_filter = get_raw_str(data, "version_filter")
        if "version_filter" in data and raw_filter is None:
            raise ValueError("git.version_filter must be a string")

        return cls(
            provider=provider,
            repo=repo,
            project_id=project_id,
            version_filter=compile_version_filter(raw_filter or DEFAULT_VERSION_FILTER),
            private=get_bool(data, "private"),
        )

    def validate(self, secrets: SecretsProvider) -> str | None:
        """Return a problem description, or None if the source is usable."""
        if self.provider is Provider.GITLAB and self.project_id is None:
            return "GitLab sources require git.project_id"

        if self.requires_token:
            env_var = self.provider.token_env
            if env_var and secrets.env(env_var) is None:
                return f"requires {env_var} to be set for authenticated {self.provider} requests"
        return None


@dataclass(frozen=True, slots=True)
class ImageConfig:
    """Container image and its tag template."""

    name: str
    tag: str = RELEASE_VERSION_PLACEHOLDER

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ImageConfig:
        name = get_str(data, "name")
        if name is None:
            raise ValueError("image.name is required")
        tag = get_raw_str(data, "tag")
        if tag is None:
            raise ValueError("image.tag is required")
        return cls(name=name, tag=tag)


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    git: GitConfig
    image: ImageConfig

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ServiceConfig:
        git = get_table(data, "git")
        if git is None:
            raise ValueError("missing 'git' table")
        image = get_table(data, "image")
        if image is None:
            raise ValueError("missing 'image' table")
        return cls(git=GitConfig.from_dict(git), image=ImageConfig.from_dict(image))


@dataclass(frozen=True, slots=True)
class GlobalConfig:
    """Settings that apply to every service."""

    github_authenticate: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> GlobalConfig:
        git: StrDict = get_table(data, "git") or {}
        github: StrDict = get_table(git, "github") or {}
        return cls(github_authenticate=get_bool(github, "authenticate"))


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Validated configuration for one run."""

    services: dict[str, ServiceConfig]
    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    path: Path | None = None


def parse_config(
    data: Mapping[str, object],
    secrets: SecretsProvider,
    path: Path | None = None,
) -> Result[AppConfig, ConfigError]:
    """Build and validate AppConfig from parsed YAML."""
    global_table: StrDict = get_table(data, "global") or {}
    global_config = GlobalConfig.from_dict(global_table)

    raw_services = data.get("services")
    services_table = as_str_dict(raw_services) if raw_services is not None else {}
    if services_table is None:
        return Err(ConfigError("'services' must be a mapping of service names", path=path))

    services: dict[str, ServiceConfig] = {}
    for name, raw in services_table.items():
        entry = as_str_dict(raw)
        if entry is None:
            return Err(ConfigError("service entry must be a mapping", path=path, service=name))
        try:
            service = ServiceConfig.from_dict(entry)
        except ValueError as e:
            logger.error("Invalid configuration for service '{}': {}", name, e)
            return Err(ConfigError(str(e), path=path, service=name))

        git = service.git.with_global_github_auth(global_config.github_authenticate)
        problem = git.validate(secrets)
        if problem is not None:
            logger.error("Service '{}' {}", name, problem)
            return Err(ConfigError(problem, path=path, service=name))
        services[name] = replace(service, git=git)

    if not services:
        logger.warning("No services configured")

    return Ok(AppConfig(services=services, global_config=global_config, path=path))


def _parse_yaml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a YAML file, handling I/O and syntax errors."""
    try:
        content = path.read_text(encoding="utf-8")
        data_obj: object = yaml.safe_load(content)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except yaml.YAMLError as e:
        return Err(ConfigError(f"Invalid YAML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a YAML mapping", path=path))
    return Ok(data)


def load_config(path: Path, secrets: SecretsProvider) -> Result[AppConfig, ConfigError]:
    """Load, parse and validate configuration from a YAML file.

    Args:
        path: Path to the config file
        secrets: Used to check that required tokens are present

    Returns:
        Ok(AppConfig) on success, Err(ConfigError) on the first problem found
    """
    logger.info("Reading config file: {}", path)
    result = _parse_yaml(path)
    if isinstance(result, Err):
        return result
    logger.trace("Config content is {}", result.value)
    return parse_config(result.value, secrets, path=path)

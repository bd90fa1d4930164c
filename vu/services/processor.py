"""Per-service orchestration.

A ServiceProcessor moves one service through:

    START -> RESOLVING_VERSION -> SUBSTITUTING_TAG -> VALIDATING_REGISTRY -> DONE
                    |                                        |
                    +------------------> FAILED <------------+

Failures never propagate: they become a ServiceResult with a sentinel tag
(and an error message for real failures), so the output schema is the same
for every service.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from loguru import logger

from vu.core.config import RELEASE_VERSION_PLACEHOLDER
from vu.core.failures import RateLimited
from vu.core.result import Err
from vu.registry.image import parse_image

if TYPE_CHECKING:
    from vu.core.config import ServiceConfig
    from vu.providers.resolver import ProviderVersionResolver
    from vu.registry.client import RegistryClient

__all__ = [
    "ServiceProcessor",
    "ServiceResult",
    "ResultStatus",
    "ProcessorState",
    "substitute_version",
    "NOT_FOUND_TAG",
    "RATE_LIMITED_TAG",
    "ERROR_TAG",
]

NOT_FOUND_TAG = "<NOT_FOUND>"
RATE_LIMITED_TAG = "<RATE_LIMITED>"
ERROR_TAG = "<ERROR>"


class ResultStatus(Enum):
    UPDATED = auto()
    NOT_FOUND = auto()
    RATE_LIMITED = auto()
    FAILED = auto()


class ProcessorState(Enum):
    START = auto()
    RESOLVING_VERSION = auto()
    SUBSTITUTING_TAG = auto()
    VALIDATING_REGISTRY = auto()
    DONE = auto()
    FAILED = auto()


@dataclass(frozen=True, slots=True)
class ServiceResult:
    """Outcome of processing one service.

    Attributes:
        container_image: Image name from the config
        image_tag: Validated tag, or a sentinel (<NOT_FOUND>, <RATE_LIMITED>, <ERROR>)
        error: Message for failed services, None otherwise
    """

    container_image: str
    image_tag: str
    error: str | None = None

    @classmethod
    def updated(cls, image: str, tag: str) -> ServiceResult:
        return cls(container_image=image, image_tag=tag)

    @classmethod
    def not_found(cls, image: str) -> ServiceResult:
        return cls(container_image=image, image_tag=NOT_FOUND_TAG)

    @classmethod
    def rate_limited(cls, image: str) -> ServiceResult:
        return cls(container_image=image, image_tag=RATE_LIMITED_TAG)

    @classmethod
    def failed(cls, image: str, error: str) -> ServiceResult:
        return cls(container_image=image, image_tag=ERROR_TAG, error=error)

    @property
    def status(self) -> ResultStatus:
        if self.error is not None:
            return ResultStatus.FAILED
        if self.image_tag == NOT_FOUND_TAG:
            return ResultStatus.NOT_FOUND
        if self.image_tag == RATE_LIMITED_TAG:
            return ResultStatus.RATE_LIMITED
        return ResultStatus.UPDATED

    def to_dict(self) -> dict[str, str]:
        """Output record; ``error`` is omitted when unset."""
        data = {"containerImage": self.container_image, "imageTag": self.image_tag}
        if self.error is not None:
            data["error"] = self.error
        return data


def substitute_version(template: str, version: str) -> str:
    """Replace the first ``${RELEASE_VERSION}`` in ``template``.

    Without a placeholder the template is returned unchanged.
    """
    return template.replace(RELEASE_VERSION_PLACEHOLDER, version, 1)


class ServiceProcessor:
    """Resolves and validates the image tag of a single service."""

    def __init__(
        self,
        name: str,
        config: ServiceConfig,
        resolver: ProviderVersionResolver,
        registry: RegistryClient,
    ) -> None:
        self.name = name
        self.config = config
        self._resolver = resolver
        self._registry = registry
        self.state = ProcessorState.START
        self._log = logger.bind(service=name)

    def _fail(self, result: ServiceResult) -> ServiceResult:
        self.state = ProcessorState.FAILED
        return result

    def process(self) -> ServiceResult:
        image_name = self.config.image.name

        self.state = ProcessorState.RESOLVING_VERSION
        version = self._resolver.resolve(self.config.git)
        if isinstance(version, Err):
            if isinstance(version.error, RateLimited):
                self._log.warning("{}: {}", self.name, version.error)
                return self._fail(ServiceResult.rate_limited(image_name))
            self._log.error("{}: failed to get version: {}", self.name, version.error)
            return self._fail(
                ServiceResult.failed(image_name, f"Failed to get version: {version.error}")
            )

        self.state = ProcessorState.SUBSTITUTING_TAG
        tag = substitute_version(self.config.image.tag, version.value)

        self.state = ProcessorState.VALIDATING_REGISTRY
        exists = self._registry.validate_tag(parse_image(image_name), tag)
        if isinstance(exists, Err):
            if isinstance(exists.error, RateLimited):
                self._log.warning("{}: {}", self.name, exists.error)
                return self._fail(ServiceResult.rate_limited(image_name))
            self._log.error("{}: failed to validate image tag: {}", self.name, exists.error)
            return self._fail(
                ServiceResult.failed(image_name, f"Failed to validate image tag: {exists.error}")
            )

        self.state = ProcessorState.DONE
        if not exists.value:
            self._log.error("Image {}:{} does not exist in the registry", image_name, tag)
            return ServiceResult.not_found(image_name)

        self._log.info("{}: {}:{}", self.name, image_name, tag)
        return ServiceResult.updated(image_name, tag)

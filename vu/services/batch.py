"""Concurrent processing of all configured services.

Each service runs as its own task on a worker thread (the HTTP client is
synchronous); the batch waits for all of them and merges the results into a
mapping sorted by service name. A failure, even an unexpected exception, is
confined to the service it happened in.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

from vu.providers.resolver import ProviderVersionResolver
from vu.registry.client import RegistryClient
from vu.services.processor import ServiceProcessor, ServiceResult

if TYPE_CHECKING:
    from vu.core.config import AppConfig
    from vu.core.secrets import SecretsProvider
    from vu.http.client import HttpClient

__all__ = ["process_services", "run_services"]


async def process_services(
    config: AppConfig,
    http: HttpClient,
    secrets: SecretsProvider,
) -> dict[str, ServiceResult]:
    """Process every service concurrently and return results sorted by name."""
    resolver = ProviderVersionResolver(http, secrets)
    registry = RegistryClient(http, secrets)

    names = list(config.services)
    processors = [
        ServiceProcessor(name, config.services[name], resolver, registry) for name in names
    ]
    logger.info("Processing {} services", len(processors))

    results = await asyncio.gather(
        *[asyncio.to_thread(p.process) for p in processors],
        return_exceptions=True,
    )

    output: dict[str, ServiceResult] = {}
    for name, result in sorted(zip(names, results), key=lambda item: item[0]):
        if isinstance(result, BaseException):
            logger.error("Failed to process service '{}': {}", name, result)
            output[name] = ServiceResult.failed(
                config.services[name].image.name, f"Unexpected error: {result}"
            )
        else:
            output[name] = result
    return output


def run_services(
    config: AppConfig,
    http: HttpClient,
    secrets: SecretsProvider,
) -> dict[str, ServiceResult]:
    """Synchronous entry point for the CLI."""
    return asyncio.run(process_services(config, http, secrets))

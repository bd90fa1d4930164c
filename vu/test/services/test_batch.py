"""Tests for vu.services.batch - concurrent processing of all services."""

from __future__ import annotations

import pytest

from vu.core.config import AppConfig, GitConfig, ImageConfig, Provider, ServiceConfig
from vu.core.secrets import MockSecrets
from vu.http.client import MockHttpClient
from vu.services import batch
from vu.services.batch import run_services
from vu.services.processor import (
    ERROR_TAG,
    NOT_FOUND_TAG,
    RATE_LIMITED_TAG,
    ServiceProcessor,
    ServiceResult,
)

GITHUB_URL = "https://api.github.com/repos/acme/web/releases/latest"
GHCR_TOKEN_URL = "https://ghcr.io/token?service=ghcr.io&scope=repository:acme/web:pull"
GHCR_MANIFEST_URL = "https://ghcr.io/v2/acme/web/manifests/3.4.0"


def _web() -> ServiceConfig:
    return ServiceConfig(
        git=GitConfig(provider=Provider.GITHUB, repo="acme/web"),
        image=ImageConfig(name="ghcr.io/acme/web", tag="${RELEASE_VERSION}"),
    )


def _static(image: str, tag: str) -> ServiceConfig:
    return ServiceConfig(
        git=GitConfig(provider=Provider.NONE),
        image=ImageConfig(name=image, tag=tag),
    )


class TestRunServicesEndToEnd:
    def test_updated(self) -> None:
        client = MockHttpClient()
        client.add_json(GITHUB_URL, {"tag_name": "3.4.0"})
        client.add_json(GHCR_TOKEN_URL, {"token": "reg-token"})
        client.add_json(GHCR_MANIFEST_URL, {"schemaVersion": 2})

        results = run_services(AppConfig(services={"web": _web()}), client, MockSecrets())

        assert results == {"web": ServiceResult.updated("ghcr.io/acme/web", "3.4.0")}

    def test_tag_not_in_registry(self) -> None:
        client = MockHttpClient()
        client.add_json(GITHUB_URL, {"tag_name": "3.4.0"})
        client.add_json(GHCR_TOKEN_URL, {"token": "reg-token"})
        client.add_text(GHCR_MANIFEST_URL, "manifest unknown", status=404)

        results = run_services(AppConfig(services={"web": _web()}), client, MockSecrets())

        assert results["web"].image_tag == NOT_FOUND_TAG
        assert len(client.calls_to(GHCR_MANIFEST_URL)) == 3

    def test_provider_rate_limited(self) -> None:
        client = MockHttpClient()
        client.add_json(GITHUB_URL, {"message": "API rate limit exceeded"}, status=403)

        results = run_services(AppConfig(services={"web": _web()}), client, MockSecrets())

        assert results["web"].image_tag == RATE_LIMITED_TAG
        assert client.calls_to(GHCR_TOKEN_URL) == []

    def test_empty_config(self) -> None:
        assert run_services(AppConfig(services={}), MockHttpClient(), MockSecrets()) == {}


class TestIsolation:
    def test_one_failure_does_not_affect_others(self) -> None:
        """Three services where the middle one fails: the others still update."""
        client = MockHttpClient()
        client.add_json(
            "https://quay.io/v2/prometheus/node-exporter/manifests/v1.8.0", {"schemaVersion": 2}
        )
        client.add_error(
            "https://registry.example.com/v2/token?service=registry.example.com"
            "&scope=repository:team/broken:pull",
            "Connection refused",
        )
        client.add_json(
            "https://quay.io/v2/prometheus/alertmanager/manifests/v0.27.0", {"schemaVersion": 2}
        )
        config = AppConfig(
            services={
                "a-exporter": _static("quay.io/prometheus/node-exporter", "v1.8.0"),
                "b-broken": _static("registry.example.com/team/broken", "1.0"),
                "c-alerts": _static("quay.io/prometheus/alertmanager", "v0.27.0"),
            }
        )

        results = run_services(config, client, MockSecrets())

        assert results["a-exporter"].image_tag == "v1.8.0"
        assert results["b-broken"].image_tag == ERROR_TAG
        assert results["c-alerts"].image_tag == "v0.27.0"

    def test_unexpected_exception_is_confined(self, monkeypatch: pytest.MonkeyPatch) -> None:
        original = ServiceProcessor.process

        def flaky(self: ServiceProcessor) -> ServiceResult:
            if self.name == "boom":
                raise RuntimeError("kaboom")
            return original(self)

        monkeypatch.setattr(batch.ServiceProcessor, "process", flaky)
        client = MockHttpClient()
        client.add_json("https://quay.io/v2/org/ok/manifests/1", {})
        config = AppConfig(
            services={
                "boom": _static("quay.io/org/boom", "1"),
                "ok": _static("quay.io/org/ok", "1"),
            }
        )

        results = run_services(config, client, MockSecrets())

        assert results["boom"] == ServiceResult.failed(
            "quay.io/org/boom", "Unexpected error: kaboom"
        )
        assert results["ok"] == ServiceResult.updated("quay.io/org/ok", "1")


class TestOrdering:
    def test_results_sorted_by_name(self) -> None:
        client = MockHttpClient()
        for name in ("zeta", "alpha", "mid"):
            client.add_json(f"https://quay.io/v2/org/{name}/manifests/1", {})
        config = AppConfig(
            services={name: _static(f"quay.io/org/{name}", "1") for name in ("zeta", "alpha", "mid")}
        )

        results = run_services(config, client, MockSecrets())

        assert list(results) == ["alpha", "mid", "zeta"]

"""Tests for vu.registry.image."""

from __future__ import annotations

import pytest

from vu.registry.image import DOCKER_HUB_REGISTRY, ImageReference, parse_image


class TestParseImage:
    @pytest.mark.parametrize(
        ("name", "registry", "path"),
        [
            ("ghcr.io/acme/web", "ghcr.io", "acme/web"),
            ("registry.gitlab.com/group/sub/app", "registry.gitlab.com", "group/sub/app"),
            ("quay.io/prometheus/node-exporter", "quay.io", "prometheus/node-exporter"),
            ("registry.example.com:5000/team/app", "registry.example.com:5000", "team/app"),
            ("localhost:5000/app", "localhost:5000", "app"),
        ],
    )
    def test_explicit_registry(self, name: str, registry: str, path: str) -> None:
        assert parse_image(name) == ImageReference(registry=registry, path=path)

    def test_official_image(self) -> None:
        """Bare names are official Docker Hub images under library/."""
        assert parse_image("nginx") == ImageReference(DOCKER_HUB_REGISTRY, "library/nginx")

    def test_docker_hub_user_image(self) -> None:
        assert parse_image("grafana/grafana") == ImageReference(
            DOCKER_HUB_REGISTRY, "grafana/grafana"
        )

    def test_docker_io_alias(self) -> None:
        assert parse_image("docker.io/redis") == ImageReference(DOCKER_HUB_REGISTRY, "library/redis")

    def test_manifest_url(self) -> None:
        image = parse_image("ghcr.io/acme/web")
        assert image.manifest_url("3.4.0") == "https://ghcr.io/v2/acme/web/manifests/3.4.0"

    def test_str(self) -> None:
        assert str(parse_image("nginx")) == "registry.hub.docker.com/library/nginx"

"""Tests for vu.registry.client - authenticate then check the manifest."""

from __future__ import annotations

from vu.core.failures import AuthenticationError, CredentialStoreError
from vu.core.result import Err, Ok
from vu.core.secrets import MockSecrets
from vu.http.client import MockHttpClient
from vu.registry import RegistryClient, parse_image

GHCR_TOKEN_URL = "https://ghcr.io/token?service=ghcr.io&scope=repository:acme/web:pull"
GHCR_MANIFEST_URL = "https://ghcr.io/v2/acme/web/manifests/3.4.0"
QUAY_MANIFEST_URL = "https://quay.io/v2/prometheus/node-exporter/manifests/v1.8.0"


class TestValidateTag:
    def test_existing_tag(self) -> None:
        client = MockHttpClient()
        client.add_json(GHCR_TOKEN_URL, {"token": "reg-token"})
        client.add_json(GHCR_MANIFEST_URL, {"schemaVersion": 2})

        result = RegistryClient(client, MockSecrets()).validate_tag(
            parse_image("ghcr.io/acme/web"), "3.4.0"
        )

        assert result == Ok(True)
        assert client.urls == [GHCR_TOKEN_URL, GHCR_MANIFEST_URL]
        assert client.calls[1].headers["Authorization"] == "Bearer reg-token"

    def test_missing_tag(self) -> None:
        client = MockHttpClient()
        client.add_json(GHCR_TOKEN_URL, {"token": "reg-token"})
        client.add_text(GHCR_MANIFEST_URL, "manifest unknown", status=404)

        result = RegistryClient(client, MockSecrets()).validate_tag(
            parse_image("ghcr.io/acme/web"), "3.4.0"
        )

        assert result == Ok(False)
        assert len(client.calls_to(GHCR_MANIFEST_URL)) == 3

    def test_anonymous_registry_has_no_authorization(self) -> None:
        client = MockHttpClient()
        client.add_json(QUAY_MANIFEST_URL, {"schemaVersion": 2})

        result = RegistryClient(client, MockSecrets()).validate_tag(
            parse_image("quay.io/prometheus/node-exporter"), "v1.8.0"
        )

        assert result == Ok(True)
        assert client.urls == [QUAY_MANIFEST_URL]
        assert "Authorization" not in client.calls[0].headers

    def test_auth_failure_skips_manifest(self) -> None:
        client = MockHttpClient()
        client.add_text(GHCR_TOKEN_URL, "denied", status=403)

        result = RegistryClient(client, MockSecrets()).validate_tag(
            parse_image("ghcr.io/acme/web"), "3.4.0"
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, AuthenticationError)
        assert client.calls_to(GHCR_MANIFEST_URL) == []

    def test_credential_store_failure(self) -> None:
        client = MockHttpClient()
        secrets = MockSecrets()
        secrets.set_credential("ghcr.io", CredentialStoreError("bad base64"))

        result = RegistryClient(client, secrets).validate_tag(
            parse_image("ghcr.io/acme/web"), "3.4.0"
        )

        assert result == Err(CredentialStoreError("bad base64"))
        assert client.calls == []

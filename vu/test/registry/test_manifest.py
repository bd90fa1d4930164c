"""Tests for vu.registry.manifest - content-negotiated existence checks."""

from __future__ import annotations

from vu.core.failures import RateLimited, RequestError
from vu.core.result import Err, Ok
from vu.http.client import MockHttpClient
from vu.registry.manifest import MANIFEST_MEDIA_TYPES, ManifestChecker

URL = "https://ghcr.io/v2/acme/web/manifests/3.4.0"


def _accepts(client: MockHttpClient) -> list[str]:
    return [call.headers["Accept"] for call in client.calls]


class TestManifestChecker:
    def test_first_media_type_found(self) -> None:
        """A 200 on the first media type returns without further requests."""
        client = MockHttpClient()
        client.add_json(URL, {"schemaVersion": 2})

        result = ManifestChecker(client).exists(URL, "tok")

        assert result == Ok(True)
        assert len(client.calls) == 1
        assert _accepts(client) == [MANIFEST_MEDIA_TYPES[0]]

    def test_all_manifest_unknown(self) -> None:
        """Three 404 'manifest unknown' answers mean the tag is absent."""
        client = MockHttpClient()
        client.add_text(URL, '{"errors":[{"message":"manifest unknown"}]}', status=404)

        result = ManifestChecker(client).exists(URL, "tok")

        assert result == Ok(False)
        assert len(client.calls) == 3
        assert _accepts(client) == list(MANIFEST_MEDIA_TYPES)

    def test_oci_index_found_on_second_type(self) -> None:
        client = MockHttpClient()
        client.add_text(URL, "OCI index found", status=404)
        client.add_json(URL, {"schemaVersion": 2})

        result = ManifestChecker(client).exists(URL, None)

        assert result == Ok(True)
        assert _accepts(client) == list(MANIFEST_MEDIA_TYPES[:2])

    def test_manifest_list_on_third_type(self) -> None:
        client = MockHttpClient()
        client.add_text(URL, '{"errors":[{"code":"MANIFEST_UNKNOWN"}]}', status=404)
        client.add_text(URL, '{"errors":[{"code":"MANIFEST_UNKNOWN"}]}', status=404)
        client.add_json(URL, {"manifests": []})

        assert ManifestChecker(client).exists(URL, None) == Ok(True)
        assert len(client.calls) == 3

    def test_rate_limited_stops_immediately(self) -> None:
        client = MockHttpClient()
        client.add_text(URL, "manifest unknown", status=404)
        client.add_text(URL, "toomanyrequests", status=429)

        result = ManifestChecker(client).exists(URL, "tok")

        assert isinstance(result, Err)
        assert isinstance(result.error, RateLimited)
        assert len(client.calls) == 2

    def test_unexpected_status(self) -> None:
        client = MockHttpClient()
        client.add_text(URL, '{"errors":[{"code":"UNAUTHORIZED"}]}', status=401)

        result = ManifestChecker(client).exists(URL, None)

        assert isinstance(result, Err)
        assert isinstance(result.error, RequestError)
        assert result.error.status == 401
        assert "UNAUTHORIZED" in result.error.body
        assert len(client.calls) == 1

    def test_unrecognised_404_on_earlier_type_continues(self) -> None:
        client = MockHttpClient()
        client.add_text(URL, "page not found", status=404)
        client.add_json(URL, {"schemaVersion": 2})

        assert ManifestChecker(client).exists(URL, None) == Ok(True)

    def test_unrecognised_404_on_last_type_is_absent(self) -> None:
        client = MockHttpClient()
        client.add_text(URL, "page not found", status=404)

        assert ManifestChecker(client).exists(URL, None) == Ok(False)
        assert len(client.calls) == 3

    def test_token_sent_as_bearer(self) -> None:
        client = MockHttpClient()
        client.add_json(URL, {})

        ManifestChecker(client).exists(URL, "tok")

        assert client.calls[0].headers["Authorization"] == "Bearer tok"

    def test_no_authorization_without_token(self) -> None:
        client = MockHttpClient()
        client.add_json(URL, {})

        ManifestChecker(client).exists(URL, None)

        assert "Authorization" not in client.calls[0].headers

    def test_transport_failure(self) -> None:
        client = MockHttpClient()
        client.add_error(URL, "Connection refused")

        result = ManifestChecker(client).exists(URL, None)

        assert isinstance(result, Err)
        assert isinstance(result.error, RequestError)
        assert "Connection refused" in str(result.error)

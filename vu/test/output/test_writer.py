"""Tests for vu.output.writer module."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from vu.core.result import Err, Ok
from vu.output.writer import OutputFormat, render, write_output
from vu.services.processor import ServiceResult

RESULTS = {
    "web": ServiceResult.updated("ghcr.io/acme/web", "3.4.0"),
    "api": ServiceResult.failed("registry.gitlab.com/acme/api", "Failed to get version: boom"),
    "cache": ServiceResult.rate_limited("redis"),
}


class TestRender:
    def test_json_sorted_by_name(self) -> None:
        content = render(RESULTS, OutputFormat.JSON)

        data = json.loads(content)
        assert list(data) == ["api", "cache", "web"]
        assert data["web"] == {"containerImage": "ghcr.io/acme/web", "imageTag": "3.4.0"}
        assert data["api"]["error"] == "Failed to get version: boom"
        assert content.endswith("\n")

    def test_yaml(self) -> None:
        content = render(RESULTS, OutputFormat.YAML)

        data = yaml.safe_load(content)
        assert list(data) == ["api", "cache", "web"]
        assert data["cache"] == {"containerImage": "redis", "imageTag": "<RATE_LIMITED>"}

    def test_empty(self) -> None:
        assert json.loads(render({}, OutputFormat.JSON)) == {}


class TestWriteOutput:
    def test_writes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"

        result = write_output(RESULTS, path)

        assert result == Ok(path)
        assert json.loads(path.read_text(encoding="utf-8"))["web"]["imageTag"] == "3.4.0"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "out.yaml"

        result = write_output(RESULTS, path, OutputFormat.YAML)

        assert isinstance(result, Ok)
        assert path.exists()

    def test_unwritable_path(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")

        result = write_output(RESULTS, blocker / "out.json")

        assert isinstance(result, Err)
        assert result.error.path == blocker / "out.json"
        assert "cannot write output" in str(result.error)

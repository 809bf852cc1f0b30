"""Tests for configuration loading and registry wiring."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from fluentreq import mime
from fluentreq.codecs import CsvCodec, JsonCodec, XmlCodec, YamlCodec
from fluentreq.config import configure_registry, get_config, load_config, reset_config, set_config
from fluentreq.exceptions import ConfigError
from fluentreq.models import ClientConfig, CodecSettings, RequestDefaults, SerializeMode
from fluentreq.registry import MimeRegistry


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_defaults_without_files(self, workdir: Path) -> None:
        config = load_config()
        assert config == ClientConfig()
        assert config.request.serialize_mode == SerializeMode.SMART

    def test_explicit_json_path(self, workdir: Path) -> None:
        path = workdir / "custom.json"
        path.write_text(json.dumps({"request": {"timeout": 3, "mime": "json"}}))
        config = load_config(path)
        assert config.request.timeout == 3
        assert config.request.mime == "json"

    def test_project_yaml(self, workdir: Path) -> None:
        (workdir / "fluentreq.yaml").write_text("codecs:\n  csv_as_records: true\n")
        assert load_config().codecs.csv_as_records is True

    def test_env_var_beats_project_file(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (workdir / "fluentreq.json").write_text(json.dumps({"request": {"timeout": 1}}))
        other = workdir / "other.yml"
        other.write_text("request:\n  timeout: 9\n")
        monkeypatch.setenv("FLUENTREQ_CONFIG", str(other))
        assert load_config().request.timeout == 9

    def test_env_overrides(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (workdir / "fluentreq.json").write_text(json.dumps({"request": {"timeout": 1}}))
        monkeypatch.setenv("FLUENTREQ_TIMEOUT", "2.5")
        monkeypatch.setenv("FLUENTREQ_VERIFY_SSL", "no")
        config = load_config()
        assert config.request.timeout == 2.5
        assert config.request.verify_ssl is False

    def test_empty_file(self, workdir: Path) -> None:
        (workdir / "fluentreq.yml").write_text("")
        assert load_config() == ClientConfig()

    @pytest.mark.parametrize(
        "filename, content",
        [
            ("bad.json", "{not json"),
            ("bad.yaml", "request: [1, 2"),
            ("list.json", "[1, 2]"),
            ("invalid.json", json.dumps({"request": {"serialize_mode": "sometimes"}})),
        ],
    )
    def test_invalid_files(self, workdir: Path, filename: str, content: str) -> None:
        path = workdir / filename
        path.write_text(content)
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_explicit_file(self, workdir: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(workdir / "nope.json")

    def test_missing_env_file(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLUENTREQ_CONFIG", str(workdir / "nope.json"))
        with pytest.raises(ConfigError):
            load_config()

    @pytest.mark.parametrize("name, value", [("FLUENTREQ_TIMEOUT", "soon"), ("FLUENTREQ_VERIFY_SSL", "maybe")])
    def test_bad_env_values(self, workdir: Path, monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError):
            load_config()


# ---------------------------------------------------------------------------
# Process-wide config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_set_get_reset(self, workdir: Path) -> None:
        custom = ClientConfig(request=RequestDefaults(timeout=4))
        set_config(custom)
        assert get_config() is custom
        reset_config()
        assert get_config().request.timeout is None


# ---------------------------------------------------------------------------
# configure_registry
# ---------------------------------------------------------------------------


class TestConfigureRegistry:
    def test_defaults_register_nothing(self, empty_registry: MimeRegistry) -> None:
        assert configure_registry(ClientConfig(), empty_registry) == []
        assert len(empty_registry) == 0

    def test_configured_codecs(self, empty_registry: MimeRegistry) -> None:
        settings = CodecSettings(
            json_decode_as_dict=False,
            xml_namespace="urn:x",
            csv_as_records=True,
            enable_yaml=True,
        )
        registered = configure_registry(ClientConfig(codecs=settings), empty_registry)
        assert registered == [mime.JSON, mime.XML, mime.CSV, mime.YAML]
        assert empty_registry.get(mime.JSON).decode_as_dict is False
        assert empty_registry.get(mime.XML).namespace == "urn:x"
        assert isinstance(empty_registry.get(mime.CSV), CsvCodec)
        assert isinstance(empty_registry.get(mime.YAML), YamlCodec)

    def test_configured_codecs_beat_builtins(self, empty_registry: MimeRegistry) -> None:
        configure_registry(ClientConfig(codecs=CodecSettings(csv_as_records=True)), empty_registry)
        empty_registry.install_builtin_codecs()
        assert empty_registry.get(mime.CSV).as_records is True
        assert isinstance(empty_registry.get(mime.JSON), JsonCodec)

    def test_existing_entries_kept(self, empty_registry: MimeRegistry, caplog: pytest.LogCaptureFixture) -> None:
        existing = XmlCodec()
        empty_registry.register(mime.XML, existing)
        with caplog.at_level(logging.WARNING, logger="fluentreq.config"):
            registered = configure_registry(
                ClientConfig(codecs=CodecSettings(xml_parser_options={"recover": True})), empty_registry
            )
        assert registered == []
        assert empty_registry.get(mime.XML) is existing
        assert "already registered" in caplog.text


class TestBootstrap:
    def test_idempotent(self) -> None:
        from fluentreq.config import bootstrap
        from fluentreq.registry import default_registry

        bootstrap()
        first = default_registry.get(mime.JSON)
        bootstrap()
        assert default_registry.builtins_installed
        assert default_registry.get(mime.JSON) is first

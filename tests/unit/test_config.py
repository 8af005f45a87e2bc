"""Unit tests for scriptgate/config.py: file loading, validation, env overrides.

Covers:
  - Missing config file → Config.defaults(), no exception
  - Valid file → values merged onto defaults
  - Missing / unsupported version, invalid YAML, non-mapping → SystemExit(1)
  - Invalid content.prefix / empty classifier.markers → SystemExit(1)
  - Scalar or non-string markers / raw_text_extensions, bad server.port → SystemExit(1)
  - SCRIPTGATE_CONFIG env var search
  - PORT override; unparseable or out-of-range PORT keeps the configured port
  - SCRIPTGATE_ROOT override
"""

from __future__ import annotations

import os
import textwrap
from pathlib import Path

import pytest

from scriptgate.config import (
    SUPPORTED_VERSIONS,
    ClassifierConfig,
    Config,
    ContentConfig,
    ServerConfig,
    load_config,
)
from scriptgate.constants import (
    DEFAULT_MARKER_TOKENS,
    DEFAULT_PORT,
    DEFAULT_SNIPPET_BASE_URL,
    SCRIPT_PREFIX,
)


def _write(tmp_path: Path, body: str, name: str = "config.yaml") -> str:
    path = tmp_path / name
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return str(path)


class TestDefaults:
    def test_missing_file_returns_defaults(self) -> None:
        config = load_config(config_path="/nonexistent/path/config.yaml")
        assert isinstance(config, Config)
        assert config.version == 1
        assert config.path is None

    def test_default_values(self) -> None:
        config = Config.defaults()
        assert config.server == ServerConfig(host="0.0.0.0", port=DEFAULT_PORT)
        assert config.server.port == 80
        assert config.content.prefix == SCRIPT_PREFIX
        assert config.content.raw_text_extensions == (".lua",)
        assert config.content.snippet_base_url == DEFAULT_SNIPPET_BASE_URL
        assert config.classifier == ClassifierConfig(markers=DEFAULT_MARKER_TOKENS)

    def test_default_root_is_script_under_cwd(self) -> None:
        config = load_config(config_path="/nonexistent/config.yaml")
        assert config.content.root_path == os.path.join(os.getcwd(), "script")

    def test_mount_path_strips_trailing_slash(self) -> None:
        assert ContentConfig().mount_path == "/script"
        assert ContentConfig(prefix="/").mount_path == "/"

    def test_supported_versions(self) -> None:
        assert SUPPORTED_VERSIONS == frozenset({1})


class TestFileLoading:
    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
            version: 1
            server:
              host: 127.0.0.1
              port: 4000
            content:
              root: /srv/scripts
              prefix: /lua/
              raw_text_extensions: [".lua", ".luau"]
              snippet_base_url: https://scripts.example.test
            classifier:
              markers: [Chrome, Firefox]
            """,
        )
        config = load_config(config_path=path)
        assert config.path == path
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 4000
        assert config.content.root == "/srv/scripts"
        assert config.content.prefix == "/lua/"
        assert config.content.raw_text_extensions == (".lua", ".luau")
        assert config.content.snippet_base_url == "https://scripts.example.test"
        assert config.classifier.markers == ("chrome", "firefox")

    def test_version_only_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(config_path=_write(tmp_path, "version: 1\n"))
        assert config.server.port == DEFAULT_PORT
        assert config.classifier.markers == DEFAULT_MARKER_TOKENS

    def test_env_config_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write(tmp_path, "version: 1\nserver:\n  port: 9000\n")
        monkeypatch.setenv("SCRIPTGATE_CONFIG", path)
        assert load_config().server.port == 9000

    def test_cwd_config_file(self) -> None:
        os.makedirs(".scriptgate")
        with open(".scriptgate/config.yaml", "w", encoding="utf-8") as fh:
            fh.write("version: 1\nserver:\n  port: 7000\n")
        assert load_config().server.port == 7000


class TestInvalidFiles:
    @pytest.mark.parametrize(
        "body",
        [
            "server:\n  port: 1\n",          # missing version
            "",                              # empty file
            "version: 2\n",                  # unsupported version
            "version: 1\nserver: [unclosed\n",  # invalid YAML
            "- just\n- a list\n",            # not a mapping
            "version: 1\ncontent:\n  prefix: script\n",  # bad prefix
            "version: 1\nclassifier:\n  markers: []\n",  # empty markers
            "version: 1\nclassifier:\n  markers: chrome\n",  # scalar markers
            "version: 1\nclassifier:\n  markers: [chrome, 7]\n",  # non-string marker
            "version: 1\ncontent:\n  raw_text_extensions: .lua\n",  # scalar extensions
            "version: 1\nserver:\n  port: eighty\n",  # non-integer port
            "version: 1\nserver:\n  port: 70000\n",  # port out of range
            "version: 1\nserver:\n  port: 0\n",  # port out of range
            "version: 1\nserver:\n  port: true\n",  # boolean port
        ],
    )
    def test_invalid_file_exits(self, tmp_path: Path, body: str) -> None:
        with pytest.raises(SystemExit) as exc_info:
            load_config(config_path=_write(tmp_path, body))
        assert exc_info.value.code == 1

    def test_error_message_on_stderr(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit):
            load_config(config_path=_write(tmp_path, "version: 3\n"))
        assert "Unsupported config version" in capsys.readouterr().err

    def test_scalar_markers_are_rejected_not_split(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit):
            load_config(config_path=_write(tmp_path, "version: 1\nclassifier:\n  markers: chrome\n"))
        assert "classifier.markers must be a list of strings" in capsys.readouterr().err

    def test_bad_port_message_names_the_value(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit):
            load_config(config_path=_write(tmp_path, "version: 1\nserver:\n  port: eighty\n"))
        assert "Invalid server.port: 'eighty'" in capsys.readouterr().err


class TestEnvOverrides:
    def test_port_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "4000")
        assert load_config(config_path="/nonexistent").server.port == 4000

    def test_port_override_beats_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PORT", "5001")
        config = load_config(config_path=_write(tmp_path, "version: 1\nserver:\n  port: 9000\n"))
        assert config.server.port == 5001

    @pytest.mark.parametrize("value", ["abc", "80.5", "0", "70000", "-1", "   "])
    def test_unusable_port_falls_back(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("PORT", value)
        config = load_config(config_path="/nonexistent")
        assert config.server.port == DEFAULT_PORT

    def test_unusable_port_keeps_file_port(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PORT", "not-a-port")
        config = load_config(config_path=_write(tmp_path, "version: 1\nserver:\n  port: 9000\n"))
        assert config.server.port == 9000

    def test_root_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCRIPTGATE_ROOT", str(tmp_path / "elsewhere"))
        config = load_config(config_path="/nonexistent")
        assert config.content.root_path == str(tmp_path / "elsewhere")

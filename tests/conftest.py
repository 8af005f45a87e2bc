"""Root test configuration for ScriptGate.

Every test runs with the process environment scrubbed of ScriptGate variables
(PORT, SCRIPTGATE_ROOT, SCRIPTGATE_CONFIG) so a developer's shell never leaks
into config loading. Tests that exercise env overrides set them explicitly.

Shared fixtures build a throwaway script root under tmp_path and a Config
pointing at it, so each test gets its own independent app.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from scriptgate.config import Config, ContentConfig

LIBRARY_SOURCE = 'print("hi")\n'


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Remove ScriptGate env vars, run from an empty cwd, ignore ~/.scriptgate."""
    for name in ("PORT", "SCRIPTGATE_ROOT", "SCRIPTGATE_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr("scriptgate.config.DEFAULT_CONFIG_PATHS", [".scriptgate/config.yaml"])


@pytest.fixture()
def script_root(tmp_path: Path) -> Path:
    """A script root containing a few files and a secret sibling outside it.

    Layout:
        tmp/secret.txt               ← outside the root, must never be served
        tmp/script/library.lua       ← print("hi")
        tmp/script/tools/util.lua
        tmp/script/notes.txt
        tmp/script/tools/            ← directory
    """
    (tmp_path / "secret.txt").write_text("TOP SECRET\n", encoding="utf-8")
    root = tmp_path / "script"
    (root / "tools").mkdir(parents=True)
    (root / "library.lua").write_text(LIBRARY_SOURCE, encoding="utf-8")
    (root / "tools" / "util.lua").write_text("local x = 1 < 2 and '&'\n", encoding="utf-8")
    (root / "notes.txt").write_text("plain notes\n", encoding="utf-8")
    return root


@pytest.fixture()
def gate_config(script_root: Path) -> Config:
    """Default Config rooted at the temporary script directory."""
    return Config(content=ContentConfig(root=str(script_root)))

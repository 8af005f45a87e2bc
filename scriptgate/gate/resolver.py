"""Root-confined script resolution for the RENDER branch.

resolve() maps a request path under the script prefix to a file inside the
root directory and reads it as text. Two failure modes, never confused:

  PathTraversalError   — HTTP 400. The canonical target lies outside the root.
                         Raised BEFORE any filesystem read of the target.
  ScriptNotFoundError  — HTTP 404. The target is missing or is a directory.

Canonicalisation uses os.path.realpath on both the root and the candidate, so
".." segments and symlinks pointing out of the root are both rejected. The
containment test is os.path.commonpath, not a string prefix ("/srv/script2"
is not inside "/srv/script").
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from scriptgate.constants import SCRIPT_PREFIX


class GateError(Exception):
    """Base class for request-level gate failures.

    ``status_code`` is the HTTP status the dispatcher answers with. The message
    is for operator logs only and is never sent to the client.
    """

    status_code: int = 500


class PathTraversalError(GateError):
    """The requested path resolves outside the root directory."""

    status_code = 400


class ScriptNotFoundError(GateError):
    """The requested path does not exist or is a directory."""

    status_code = 404


@dataclass(frozen=True)
class ResolvedFile:
    """A script successfully located and read.

    path:     canonical absolute filesystem path
    name:     path relative to the root, POSIX separators (display only)
    contents: file text, decoded as UTF-8 with undecodable bytes replaced
    """

    path: str
    name: str
    contents: str


def _strip_prefix(request_path: str, prefix: str) -> str:
    if request_path.startswith(prefix):
        suffix = request_path[len(prefix):]
    else:
        suffix = request_path
    # A leading "/" would make os.path.join discard the root entirely.
    return suffix.lstrip("/")


def resolve(root_dir: str, request_path: str, prefix: str = SCRIPT_PREFIX) -> ResolvedFile:
    """Locate and read the script addressed by ``request_path``.

    Args:
        root_dir:     Directory all scripts must live under.
        request_path: URL-decoded request path, e.g. "/script/library.lua".
        prefix:       Script mount prefix stripped from ``request_path``.

    Returns:
        ResolvedFile with the canonical path, display name and text contents.

    Raises:
        PathTraversalError:  canonical target escapes ``root_dir`` (or the path
                             carries a NUL byte). Nothing is read.
        ScriptNotFoundError: target missing or a directory. Nothing is read.
        OSError:             the file exists but could not be read.
    """
    suffix = _strip_prefix(request_path, prefix)
    if "\x00" in suffix:
        raise PathTraversalError(f"NUL byte in request path: {request_path!r}")

    root = os.path.realpath(root_dir)
    candidate = os.path.realpath(os.path.join(root, suffix))

    if os.path.commonpath([root, candidate]) != root:
        raise PathTraversalError(f"{request_path!r} resolves outside {root}")

    if not os.path.isfile(candidate):
        raise ScriptNotFoundError(f"{request_path!r} is missing or not a regular file")

    with open(candidate, encoding="utf-8", errors="replace") as fh:
        contents = fh.read()

    return ResolvedFile(
        path=candidate,
        name=Path(candidate).relative_to(root).as_posix(),
        contents=contents,
    )

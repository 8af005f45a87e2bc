"""User-Agent classification for the script gate.

classify() is a pure function: the same (identity, path, markers, prefix)
always yields the same Outcome, with no I/O and no logging.

Matching is a case-insensitive substring test. A programmatic client that
sends a browser-like User-Agent is treated as a browser; that is a known
limitation of header-based classification, not something this module tries
to detect.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from scriptgate.constants import DEFAULT_MARKER_TOKENS, SCRIPT_PREFIX


class Outcome(str, Enum):
    """What the gate does with a request."""

    RENDER = "render"            # browser on the script mount → escaped HTML view
    BLOCK = "block"              # browser anywhere else → 403
    PASSTHROUGH = "passthrough"  # non-browser → raw static serving


def is_interactive_client(
    identity: Optional[str],
    markers: Iterable[str] = DEFAULT_MARKER_TOKENS,
) -> bool:
    """Return True if the identity string contains any marker token.

    An absent or empty identity is never interactive.
    """
    if not identity:
        return False
    lowered = identity.lower()
    return any(marker.lower() in lowered for marker in markers if marker)


def classify(
    identity: Optional[str],
    request_path: str,
    markers: Iterable[str] = DEFAULT_MARKER_TOKENS,
    prefix: str = SCRIPT_PREFIX,
) -> Outcome:
    """Decide RENDER, BLOCK or PASSTHROUGH for a request.

    Args:
        identity:     Declared client identity (User-Agent). Untrusted; may be None.
        request_path: URL-decoded request path beginning with "/".
        markers:      Case-insensitive browser marker tokens.
        prefix:       Script mount prefix, e.g. "/script/".

    Returns:
        PASSTHROUGH when no marker matches, otherwise RENDER for paths under
        ``prefix`` and BLOCK for everything else.
    """
    if not is_interactive_client(identity, markers):
        return Outcome.PASSTHROUGH
    if request_path.startswith(prefix):
        return Outcome.RENDER
    return Outcome.BLOCK

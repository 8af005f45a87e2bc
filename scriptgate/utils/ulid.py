"""Request ID generation for ScriptGate.

Every request that the gate decides on gets a ULID, used as:
  - the X-ScriptGate-Request-ID response header on gate-built responses
  - the request_id field merged into every structured log line

Uses the `python-ulid` library — do NOT hand-roll ULID generation.
"""

from __future__ import annotations

from ulid import ULID


def generate_request_id() -> str:
    """Return a new 26-character, Crockford Base32 ULID string.

    Example::

        request_id = generate_request_id()
        # "01KJ0JRVHYA7KX32VPN5ZSCTMV"
    """
    return str(ULID())

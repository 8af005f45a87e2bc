"""Shared constants for ScriptGate.

Defaults for the classifier, the script mount and the rendered view live here.
Every value below can be overridden through config (see scriptgate/config.py);
these are the fallbacks used when no config file is present.
"""

# ─── Classifier ──────────────────────────────────────────────────────────────

# Case-insensitive substrings that mark an interactive web browser.
# "edg" covers both legacy Edge ("Edge/") and Chromium Edge ("Edg/").
DEFAULT_MARKER_TOKENS: tuple[str, ...] = ("chrome", "firefox", "safari", "opera", "edg")

# ─── Script mount ────────────────────────────────────────────────────────────

# Path prefix under which scripts are rendered (browsers) or served raw (others).
SCRIPT_PREFIX: str = "/script/"

# Directory name (relative to the working directory) holding servable scripts.
DEFAULT_ROOT_DIRNAME: str = "script"

# Extensions whose raw passthrough is forced to text/plain regardless of
# the inferred media type.
DEFAULT_RAW_TEXT_EXTENSIONS: tuple[str, ...] = (".lua",)

RAW_TEXT_CONTENT_TYPE: str = "text/plain; charset=utf-8"
HTML_CONTENT_TYPE: str = "text/html; charset=utf-8"

# ─── Rendered view ───────────────────────────────────────────────────────────

# Public base URL embedded in the loader snippet shown on the rendered page.
DEFAULT_SNIPPET_BASE_URL: str = "https://kuronami-hub.onrender.com"

# ─── Server ──────────────────────────────────────────────────────────────────

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 80

# Response header carrying the per-request correlation ID on gate responses.
REQUEST_ID_HEADER: str = "X-ScriptGate-Request-ID"

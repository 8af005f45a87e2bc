"""Fixed-page HTTP response builders for the script gate.

One builder per terminal branch of the gate:

  build_render_response():       HTTP 200 — rendered script view
  build_bad_request_response():  HTTP 400 — path escaped the root directory
  build_blocked_response():      HTTP 403 — browser outside the script mount
  build_not_found_response():    HTTP 404 — script missing or a directory

build_gate_error_response() picks the 400 or 404 builder from a GateError's
status_code.

The 400/403/404 bodies are static. They never include the request path, the
root directory, or exception detail, so a failed request discloses nothing
about the filesystem layout.

Every gate response carries ``X-ScriptGate-Request-ID`` for log correlation.
"""

from __future__ import annotations

from starlette.responses import HTMLResponse

from scriptgate.constants import REQUEST_ID_HEADER

# ─── Static bodies (defined once) ─────────────────────────────────────────────

BAD_REQUEST_BODY = "Bad request"

NOT_FOUND_BODY = (
    "<!doctype html><html><body style=\"background:#071430;color:#fff;"
    "font-family:sans-serif;display:flex;align-items:center;justify-content:center;"
    "height:100vh;\"><div style=\"text-align:center\"><h2>Not found</h2>"
    "<p style=\"color:#9fb0c8\">The requested script was not found.</p></div>"
    "</body></html>"
)

BLOCKED_BODY = (
    "<!doctype html><html><body style=\"background:linear-gradient(180deg,#041226,"
    "#071430,#04192a);color:#e6eef8;font-family:Inter,system-ui,Arial,sans-serif;"
    "display:flex;align-items:center;justify-content:center;height:100vh\">"
    "<div style=\"max-width:560px;text-align:center;padding:24px;border-radius:12px;"
    "background:rgba(3,20,40,0.88);border:1px solid rgba(15,23,42,0.7);"
    "box-shadow:0 8px 30px rgba(2,8,20,0.7)\"><h2 style=\"margin:0 0 8px\">"
    "Access Denied</h2><p style=\"margin:0;color:#9fb0c8\">You might get "
    "blacklisted if ur still trying to see our code.</p></div></body></html>"
)


def _html(body: str, status_code: int, request_id: str) -> HTMLResponse:
    response = HTMLResponse(content=body, status_code=status_code, media_type="text/html")
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def build_render_response(html: str, request_id: str) -> HTMLResponse:
    """HTTP 200 carrying a page produced by render_script_page()."""
    return _html(html, 200, request_id)


def build_bad_request_response(request_id: str) -> HTMLResponse:
    """HTTP 400 for a path that resolves outside the root directory.

    The body is a minimal fixed string. No file is read before this is built.
    """
    return _html(BAD_REQUEST_BODY, 400, request_id)


def build_blocked_response(request_id: str) -> HTMLResponse:
    """HTTP 403 fixed denial page for browsers outside the script mount."""
    return _html(BLOCKED_BODY, 403, request_id)


def build_not_found_response(request_id: str) -> HTMLResponse:
    """HTTP 404 fixed page for a missing script or a directory."""
    return _html(NOT_FOUND_BODY, 404, request_id)


_GATE_ERROR_BUILDERS = {
    400: build_bad_request_response,
    404: build_not_found_response,
}

GATE_ERROR_STATUSES: frozenset[int] = frozenset(_GATE_ERROR_BUILDERS)


def build_gate_error_response(status_code: int, request_id: str) -> HTMLResponse:
    """Fixed page for a GateError's status_code.

    Raises:
        KeyError: status_code has no fixed page (see GATE_ERROR_STATUSES).
    """
    return _GATE_ERROR_BUILDERS[status_code](request_id)

"""ScriptGate response models.

Public API:
    build_render_response       — HTTP 200 rendered script page
    build_blocked_response      — HTTP 403 fixed denial page
    build_not_found_response    — HTTP 404 fixed page
    build_bad_request_response  — HTTP 400 minimal body
    build_gate_error_response   — 400 or 404 page keyed by GateError.status_code
"""
from scriptgate.models.pages import (
    GATE_ERROR_STATUSES,
    build_bad_request_response,
    build_blocked_response,
    build_gate_error_response,
    build_not_found_response,
    build_render_response,
)

__all__ = [
    "GATE_ERROR_STATUSES",
    "build_bad_request_response",
    "build_blocked_response",
    "build_gate_error_response",
    "build_not_found_response",
    "build_render_response",
]

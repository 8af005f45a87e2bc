"""ScriptGate request gate.

Public API:
    Outcome              — RENDER | BLOCK | PASSTHROUGH
    classify             — pure User-Agent / path classification
    resolve              — root-confined script lookup and read
    render_script_page   — escaped HTML view of a script
    ScriptGateMiddleware — per-request dispatch on the classification
    ScriptStaticFiles    — raw passthrough with forced text/plain for scripts
"""
from scriptgate.gate.classifier import Outcome, classify, is_interactive_client
from scriptgate.gate.middleware import ScriptGateMiddleware
from scriptgate.gate.renderer import escape_html, render_script_page
from scriptgate.gate.resolver import (
    GateError,
    PathTraversalError,
    ResolvedFile,
    ScriptNotFoundError,
    resolve,
)
from scriptgate.gate.static import ScriptStaticFiles

__all__ = [
    "GateError",
    "Outcome",
    "PathTraversalError",
    "ResolvedFile",
    "ScriptGateMiddleware",
    "ScriptNotFoundError",
    "ScriptStaticFiles",
    "classify",
    "escape_html",
    "is_interactive_client",
    "render_script_page",
    "resolve",
]

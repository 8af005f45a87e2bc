"""Script gate middleware — per-request dispatch on the User-Agent classification.

Every request is classified (see scriptgate/gate/classifier.py) and answered by
exactly one terminal branch:

  RENDER       resolve under the root → 400 traversal | 404 missing | 200 view
  BLOCK        403 fixed denial page
  PASSTHROUGH  call_next() — the ScriptStaticFiles mount serves raw bytes

Failure policy:
  - Expected failures (traversal, missing file) raise a GateError whose
    status_code selects the fixed page.
  - ANY other exception while classifying, resolving or rendering is logged
    with its traceback and the request falls through to call_next(). The gate
    never turns its own bug into a 500.

The single blocking file read runs in Starlette's threadpool so the event loop
is never held by disk I/O.
"""

from __future__ import annotations

from typing import Iterable, Optional

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from scriptgate.constants import DEFAULT_MARKER_TOKENS, DEFAULT_SNIPPET_BASE_URL, SCRIPT_PREFIX
from scriptgate.gate.classifier import Outcome, classify
from scriptgate.gate.renderer import render_script_page
from scriptgate.gate.resolver import GateError, resolve
from scriptgate.models.pages import (
    GATE_ERROR_STATUSES,
    build_blocked_response,
    build_gate_error_response,
    build_render_response,
)
from scriptgate.utils.logger import PerformanceLogger, clear_request_id, get_logger, set_request_id
from scriptgate.utils.ulid import generate_request_id

logger = get_logger(__name__)


class ScriptGateMiddleware(BaseHTTPMiddleware):
    """Classify each request and answer RENDER / BLOCK itself.

    Registration (in create_app() in scriptgate/main.py):
        application.add_middleware(
            ScriptGateMiddleware,
            root_dir=config.content.root_path,
            markers=config.classifier.markers,
            prefix=config.content.prefix,
            snippet_base_url=config.content.snippet_base_url,
        )

    All behaviour is fixed at construction; instances share no state, so two
    apps built with different roots or marker sets never interfere.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        root_dir: str,
        markers: Iterable[str] = DEFAULT_MARKER_TOKENS,
        prefix: str = SCRIPT_PREFIX,
        snippet_base_url: str = DEFAULT_SNIPPET_BASE_URL,
    ) -> None:
        super().__init__(app)
        self.root_dir = root_dir
        self.markers = tuple(markers)
        self.prefix = prefix
        self.snippet_base_url = snippet_base_url

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = generate_request_id()
        set_request_id(request_id)
        try:
            try:
                response = await self._gate(request, request_id)
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Script gate error — falling through to passthrough",
                    path=request.scope.get("path"),
                )
                response = None

            if response is None:
                return await call_next(request)
            return response
        finally:
            clear_request_id()

    async def _gate(self, request: Request, request_id: str) -> Optional[Response]:
        """Return the gate's own response, or None to pass the request through."""
        # scope["path"] is already percent-decoded; request.url.path re-parses
        # the URL and would split on a decoded "?" or "#".
        path: str = request.scope["path"]
        user_agent = request.headers.get("user-agent", "")

        outcome = classify(user_agent, path, self.markers, self.prefix)

        if outcome is Outcome.PASSTHROUGH:
            logger.debug("Passthrough", path=path, outcome=outcome.value)
            return None

        if outcome is Outcome.BLOCK:
            logger.warning(
                "Browser request blocked outside script mount",
                path=path,
                outcome=outcome.value,
                user_agent=user_agent,
                status_code=403,
            )
            return build_blocked_response(request_id)

        # ── RENDER ────────────────────────────────────────────────────────────
        try:
            resolved = await run_in_threadpool(resolve, self.root_dir, path, self.prefix)
        except GateError as exc:
            if exc.status_code not in GATE_ERROR_STATUSES:
                raise
            log = logger.warning if exc.status_code == 400 else logger.info
            log(
                "Script request rejected",
                path=path,
                outcome=outcome.value,
                error_type=type(exc).__name__,
                reason=str(exc),
                status_code=exc.status_code,
            )
            return build_gate_error_response(exc.status_code, request_id)

        with PerformanceLogger("render_script_page", logger):
            html = render_script_page(path, resolved.name, resolved.contents, self.snippet_base_url)

        logger.info(
            "Script rendered",
            path=path,
            outcome=outcome.value,
            file=resolved.name,
            size=len(resolved.contents),
            status_code=200,
        )
        return build_render_response(html, request_id)

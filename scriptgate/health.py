"""Health endpoint for ScriptGate.

GET /health — 503 before the lifespan marks the app ready, 200 afterwards.

/health sits outside the script mount, so the gate BLOCKs it for browser
User-Agents like any other path. Probes (curl, kubelet, load balancers) are
not browsers and reach it normally.
"""

from __future__ import annotations

import os
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from scriptgate.config import Config

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Primary health check endpoint.

    Response body (200):
        {
          "status": "ok",
          "root_exists": true,
          "prefix": "/script/"
        }

    Response body (503):
        {"error": {"status": "starting", "message": "..."}}
    """
    if not getattr(request.app.state, "ready", False):
        raise HTTPException(
            status_code=503,
            detail={
                "status": "starting",
                "message": "ScriptGate is starting up.",
            },
        )

    config: Config = request.app.state.config
    root = config.content.root_path
    return {
        "status": "ok",
        "root_exists": os.path.isdir(root),
        "prefix": config.content.prefix,
    }

"""Programmatic uvicorn entry point for ScriptGate.

Reads host, port and root from the loaded config (0.0.0.0:80, ./script by
default; PORT and SCRIPTGATE_ROOT override) and starts uvicorn with hardened
defaults:

  --limit-concurrency 100  Max 100 concurrent connections; HTTP 503 when exceeded
  --backlog 50             OS connection queue depth
  --timeout-keep-alive 5   Short keep-alive window against slow clients

Usage:
    python -m scriptgate.run
    scriptgate                 # via pyproject.toml [project.scripts]

If the port cannot be bound (already in use, privileged port without
permission) uvicorn logs the OS error itself and exits the process with its
startup-failure status (3).
"""

from __future__ import annotations

import uvicorn

from scriptgate.config import load_config
from scriptgate.main import LOG_LEVEL, create_app
from scriptgate.utils.logger import get_logger

logger = get_logger(__name__)

UVICORN_LIMIT_CONCURRENCY: int = 100

UVICORN_BACKLOG: int = 50

UVICORN_TIMEOUT_KEEP_ALIVE: int = 5


def main() -> None:
    """Start the ScriptGate server.

    Raises:
        SystemExit: Status 1 from load_config() on config errors, or status 3
                    from uvicorn when the listening socket cannot be opened.
    """
    config = load_config()
    application = create_app(config)

    logger.info("Starting ScriptGate", host=config.server.host, port=config.server.port)
    uvicorn.run(
        application,
        host=config.server.host,
        port=config.server.port,
        log_level=LOG_LEVEL.lower(),
        limit_concurrency=UVICORN_LIMIT_CONCURRENCY,
        backlog=UVICORN_BACKLOG,
        timeout_keep_alive=UVICORN_TIMEOUT_KEEP_ALIVE,
    )


if __name__ == "__main__":
    main()

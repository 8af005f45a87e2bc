"""Raw passthrough serving for non-browser clients.

ScriptStaticFiles is Starlette's StaticFiles with one override: files whose
name ends in a raw-text extension (".lua" by default) are always served as
``text/plain; charset=utf-8``, whatever mimetypes would have guessed.
Existence checks, directory confinement, ETag / Last-Modified handling and
byte-range requests are all inherited unchanged.
"""

from __future__ import annotations

import os
from typing import Iterable

from starlette.responses import Response
from starlette.staticfiles import PathLike, StaticFiles
from starlette.types import Scope

from scriptgate.constants import DEFAULT_RAW_TEXT_EXTENSIONS, RAW_TEXT_CONTENT_TYPE
from scriptgate.utils.logger import get_logger

logger = get_logger(__name__)


class ScriptStaticFiles(StaticFiles):
    """StaticFiles with forced text/plain for script extensions.

    Mounted under the script prefix in create_app():
        application.mount("/script", ScriptStaticFiles(directory=root))
    """

    def __init__(
        self,
        *,
        directory: PathLike,
        raw_text_extensions: Iterable[str] = DEFAULT_RAW_TEXT_EXTENSIONS,
        check_dir: bool = False,
    ) -> None:
        super().__init__(directory=directory, check_dir=check_dir)
        self.raw_text_extensions = tuple(ext.lower() for ext in raw_text_extensions)

    def is_raw_text(self, path: PathLike) -> bool:
        return os.fspath(path).lower().endswith(self.raw_text_extensions)

    async def check_config(self) -> None:
        """Log, rather than raise, when the root directory is missing.

        Starlette raises RuntimeError on the first request if the directory is
        gone; every lookup would then be a 500. With the check relaxed, lookups
        against a missing root simply answer 404.
        """
        try:
            await super().check_config()
        except RuntimeError as exc:
            logger.warning("Script root unavailable for passthrough", error=str(exc))

    def file_response(
        self,
        full_path: PathLike,
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        # 304 responses carry no content-type; leave them alone.
        if "content-type" in response.headers and self.is_raw_text(full_path):
            response.headers["content-type"] = RAW_TEXT_CONTENT_TYPE
        return response

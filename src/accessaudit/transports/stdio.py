"""Stdio transport — newline-delimited JSON-RPC over stdin/stdout.

One JSON value per line in, one JSON line per reply out.  A line may hold a
batch array.  Stdout carries protocol traffic only; logs go to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from accessaudit.protocol.router import ProtocolRouter

logger = logging.getLogger(__name__)


class StdioServer:
    """Serves a :class:`ProtocolRouter` over a pair of text streams."""

    def __init__(
        self,
        router: ProtocolRouter,
        reader: TextIO | None = None,
        writer: TextIO | None = None,
    ) -> None:
        self._router = router
        self._reader = reader or sys.stdin
        self._writer = writer or sys.stdout

    async def run(self) -> None:
        """Serve lines until the reader reaches EOF."""
        logger.info("stdio server ready")
        while True:
            line = await asyncio.to_thread(self._reader.readline)
            if not line:
                break
            line = line.strip()
            if not line:
                continue
            try:
                reply = await self._router.handle_text(line)
                if reply is not None:
                    self._write(reply)
            except Exception:
                logger.exception("Failed to serve line; continuing")
        logger.info("stdin closed, stdio server stopping")

    def _write(self, reply: object) -> None:
        self._writer.write(json.dumps(reply) + "\n")
        self._writer.flush()

"""
Seed Data Loader

The seed document is read once at startup, and only when no persisted
snapshot exists. A single awaited read, no retry: on any failure the
ledger starts empty.
"""

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from ledger.audit import AuditLogger


logger = structlog.get_logger(__name__)


async def load_seed(
    path: Path,
    audit_logger: Optional["AuditLogger"] = None,
) -> list[dict]:
    """
    Read transaction-shaped objects from a seed JSON document.

    Accepts either a bare array or an object with a "transactions" array.
    Returns an empty list if the document is missing or malformed.
    """
    try:
        raw = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
        data = json.loads(raw)
    except (OSError, ValueError) as e:
        logger.error("seed_load_failed", path=str(path), error=str(e))
        if audit_logger:
            audit_logger.log_seed_load_failed(str(path), str(e))
        return []

    if isinstance(data, dict):
        data = data.get("transactions", [])

    if not isinstance(data, list):
        logger.error("seed_not_a_list", path=str(path))
        if audit_logger:
            audit_logger.log_seed_load_failed(str(path), "Seed document is not a list")
        return []

    logger.info("seed_loaded", path=str(path), count=len(data))
    return data

"""Deterministic schema fingerprints for drift detection."""

import hashlib
import json
import logging
import re
from pathlib import Path

from dbtbl.errors import WriteError
from dbtbl.models import SchemaSnapshot

logger = logging.getLogger(__name__)

HASH_ALGORITHM = "md5"

# Matches "@schema-hash md5:<hex>" as well as the bare "schema-hash md5:<hex>"
SCHEMA_HASH_PATTERN = re.compile(r"schema-hash\s+md5:([0-9a-f]{32})")


def hash_schema(snapshot: SchemaSnapshot) -> str:
    """Compute the md5 hex digest of a schema snapshot.

    The payload is serialized with sorted keys and compact separators, so the
    digest depends only on the snapshot's content.

    Args:
        snapshot: Normalized schema snapshot

    Returns:
        32-character lowercase hex digest
    """
    payload = json.dumps(snapshot.hash_payload(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.md5(payload.encode("utf-8"), usedforsecurity=False).hexdigest()


def format_hash_marker(schema_hash: str) -> str:
    """Return the marker line embedded in generated files"""
    return f"@schema-hash {HASH_ALGORITHM}:{schema_hash}"


def extract_schema_hash(path: Path) -> str | None:
    """Read the schema hash embedded in a previously generated file.

    Args:
        path: Generated artifact holding the hash marker

    Returns:
        The embedded hex digest, or None if the file or marker is missing

    Raises:
        WriteError: If the file exists but cannot be read
    """
    if not path.is_file():
        logger.debug(f"No previous artifact at {path}")
        return None

    try:
        # Hand-edited artifacts may hold stray bytes; the marker itself is ASCII
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise WriteError(f"Cannot read previous output ({e.strerror or e})", path) from e

    match = SCHEMA_HASH_PATTERN.search(content)
    if match is None:
        logger.debug(f"No schema-hash marker in {path}")
        return None

    return match.group(1)

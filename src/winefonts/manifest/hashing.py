"""Content digests for resolved dependency files."""

import hashlib
import logging
from pathlib import Path

from winefonts.core.exceptions import ResourceReadError

logger = logging.getLogger(__name__)

HASH_CHUNK_SIZE = 8192


def compute_file_hash(file_path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Return the lowercase hex SHA-256 digest of a file's bytes."""
    hasher = hashlib.sha256()
    try:
        with Path(file_path).open("rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                hasher.update(chunk)
    except OSError as e:
        raise ResourceReadError(str(file_path), str(e)) from e

    digest = hasher.hexdigest()
    logger.debug(f"sha256({file_path}) = {digest}")
    return digest


def file_size(file_path: Path) -> int:
    """Return the size of a file in bytes."""
    try:
        return Path(file_path).stat().st_size
    except OSError as e:
        raise ResourceReadError(str(file_path), str(e)) from e

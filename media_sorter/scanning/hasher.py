import hashlib
import logging
from pathlib import Path
from typing import Container

from .. import config
from ..models import Comparison


class DuplicateComparator:
    def __init__(self):
        # Number of checksums computed so far (one per file read)
        self.checksum_count = 0

    def compare(self, existing: Path, candidate: Path) -> Comparison:
        """
        Decides whether two files hold the same content.

        Strategy:
        1. Either path is not a regular file -> DIFFERENT.
        2. Sizes differ -> DIFFERENT. Nothing is read.
        3. Sizes match  -> Full Read (SHA-256) of both files, compare digests.
        """
        if not (existing.is_file() and candidate.is_file()):
            return Comparison.DIFFERENT
        if existing.stat().st_size != candidate.stat().st_size:
            return Comparison.DIFFERENT

        # Same size is rare for distinct photos, so note it
        logging.debug(f"{candidate} and {existing} have the same size. Comparing checksums...")
        if self._full_sha256(existing) == self._full_sha256(candidate):
            return Comparison.IDENTICAL
        return Comparison.DIFFERENT

    def _full_sha256(self, path: Path) -> bytes:
        """Reads entire file. High I/O cost."""
        self.checksum_count += 1
        h = hashlib.sha256()
        with open(path, 'rb') as f:
            while chunk := f.read(config.HASH_CHUNK_SIZE):
                h.update(chunk)
        return h.digest()


def create_duplicate_file_name(path: Path, folder: Path, taken: Container[Path] = ()) -> Path:
    """
    Returns the first free 'name(N).ext' in folder, starting at N=1.

    The full file name is kept in front of the counter, so 'photo.jpg'
    becomes 'photo.jpg(1).jpg'. Names in taken are skipped as if they existed.
    """
    counter = 1
    while True:
        candidate = folder / f"{path.name}({counter}){path.suffix}"
        if not candidate.exists() and candidate not in taken:
            return candidate
        counter += 1

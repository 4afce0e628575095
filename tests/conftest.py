import os
from datetime import datetime

import pytest

from media_sorter.exceptions import MetadataDecodeError
from media_sorter.models import CaptureMetadata, RunContext, SortOptions


class FakeLookup:
    """
    Metadata lookup keyed by file name. Names listed in `broken` raise a
    decode error, unknown names have no tags at all.
    """

    def __init__(self, photos=None, videos=None, broken=()):
        self.photos = photos or {}
        self.videos = videos or {}
        self.broken = set(broken)
        self.calls = []

    def _lookup(self, table, path):
        self.calls.append(path)
        if path.name in self.broken:
            raise MetadataDecodeError(f"corrupt header in {path.name}")
        return table.get(path.name, CaptureMetadata())

    def photo_metadata(self, path):
        return self._lookup(self.photos, path)

    def video_metadata(self, path):
        return self._lookup(self.videos, path)


@pytest.fixture
def make_lookup():
    """Builds a FakeLookup: make_lookup(photos={...}, videos={...}, broken={...})."""
    return FakeLookup


@pytest.fixture
def fake_lookup(make_lookup):
    return make_lookup()


@pytest.fixture
def make_file():
    """Writes a file (creating parents) and optionally sets its mtime."""
    def _make(path, content=b"data", mtime=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        if mtime is not None:
            ts = mtime.timestamp() if isinstance(mtime, datetime) else mtime
            os.utime(path, (ts, ts))
        return path
    return _make


@pytest.fixture
def make_ctx(tmp_path):
    """Returns a RunContext for the given option overrides, rooted at tmp_path/src."""
    def _make(**overrides):
        overrides.setdefault("source", tmp_path / "src")
        return RunContext.create(SortOptions(**overrides))
    return _make

"""
Data model for a sorting run.

Everything here is transient: built per file or per run, never persisted.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

from . import config


class MediaKind(Enum):
    PHOTO = "photo"
    VIDEO = "video"
    OTHER = "other"
    CLEANUP = "cleanup"


class SkipReason(Enum):
    UNSUPPORTED = "unsupported file"
    NO_METADATA_DATE = "no date found in metadata"
    DECODE_ERROR = "metadata decoding error"
    ALREADY_SORTED = "already in correct directory"


class Comparison(Enum):
    IDENTICAL = "identical"
    DIFFERENT = "different"


class DuplicateDecision(Enum):
    IDENTICAL_DELETE = "identical-delete"
    IDENTICAL_KEEP_COPY = "identical-keep-copy"
    DIFFERENT_RENAME = "different-rename"

    @classmethod
    def decide(cls, comparison: Comparison, keep_duplicates: bool) -> "DuplicateDecision":
        if comparison is Comparison.DIFFERENT:
            return cls.DIFFERENT_RENAME
        if keep_duplicates:
            return cls.IDENTICAL_KEEP_COPY
        return cls.IDENTICAL_DELETE


@dataclass
class MediaFile:
    """
    A file found during the walk. Recomputed on every visit.
    """
    path: Path
    ext: str
    size_bytes: int
    mtime: float
    kind: MediaKind

    @classmethod
    def from_path(cls, path: Path, kind: MediaKind) -> "MediaFile":
        stat_result = path.stat()
        return cls(
            path=path,
            ext=path.suffix.lower(),
            size_bytes=stat_result.st_size,
            mtime=stat_result.st_mtime,
            kind=kind,
        )

    @property
    def modified_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.mtime)


@dataclass
class CaptureMetadata:
    """
    Tags the sorter cares about. Every field may be missing.
    """
    original: Optional[datetime] = None    # DateTimeOriginal / container creation
    secondary: Optional[datetime] = None   # DateTimeDigitized / DateTime
    make: Optional[str] = None
    model: Optional[str] = None


@dataclass(frozen=True)
class TargetFolder:
    """
    Destination folder relative to the destination root: year/date[/camera].

    Year and date always come from the same timestamp, so build it with
    from_datetime().
    """
    year: str
    date: str
    camera: Optional[str] = None
    source: str = "modified"  # which timestamp won

    @classmethod
    def from_datetime(cls, dt: datetime, camera: Optional[str] = None, source: str = "modified") -> "TargetFolder":
        return cls(
            year=dt.strftime(config.YEAR_FORMAT),
            date=dt.strftime(config.DATE_FORMAT),
            camera=camera,
            source=source,
        )

    @property
    def segments(self) -> Tuple[str, ...]:
        if self.camera:
            return (self.year, self.date, self.camera)
        return (self.year, self.date)

    @property
    def relative_path(self) -> Path:
        return Path(*self.segments)


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving a file: a target folder, or a reason to skip it.
    """
    target: Optional[TargetFolder] = None
    reason: Optional[SkipReason] = None
    detail: str = ""

    @classmethod
    def found(cls, target: TargetFolder) -> "Resolution":
        return cls(target=target)

    @classmethod
    def skip(cls, reason: SkipReason, detail: str = "") -> "Resolution":
        return cls(reason=reason, detail=detail)

    @property
    def is_skip(self) -> bool:
        return self.target is None


@dataclass
class SortOptions:
    source: Path
    destination: Optional[Path] = None  # defaults to source
    photos: bool = True
    videos: bool = True
    dry_run: bool = False
    metadata_only: bool = False
    use_camera_name: bool = False
    keep_duplicates: bool = False
    use_secondary_date: bool = True
    write_notes: bool = False
    show_progress: bool = False


@dataclass
class RunStatistics:
    files: int = 0
    folders: int = 0
    moved: int = 0
    deleted: int = 0
    duplicates: int = 0
    skipped: int = 0
    errors: int = 0
    removed_folders: int = 0
    elapsed: float = 0.0


@dataclass
class RunContext:
    """
    Everything a single run needs. Built once per invocation by MediaSorter.
    """
    options: SortOptions
    source_root: Path
    dest_root: Path
    stats: RunStatistics = field(default_factory=RunStatistics)
    # Directories that received a file during this run (plus their ancestors)
    populated: Set[Path] = field(default_factory=set)
    # Destination -> source for every move and note issued this run. In a dry
    # run nothing lands on disk, so this is the only record of taken names.
    claimed: Dict[Path, Path] = field(default_factory=dict)

    @classmethod
    def create(cls, options: SortOptions) -> "RunContext":
        source_root = Path(options.source).resolve()
        dest_root = Path(options.destination or options.source).resolve()
        return cls(options=options, source_root=source_root, dest_root=dest_root)

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run

    def mark_populated(self, folder: Path):
        self.populated.add(folder)
        self.populated.update(folder.parents)

    def occupant(self, path: Path) -> Optional[Path]:
        """Returns the file standing at path (or planned for it), else None."""
        if path.exists():
            return path
        return self.claimed.get(path)

import os
from pathlib import Path
from typing import List, Tuple

from .. import config
from ..models import MediaKind, SortOptions


def is_cleanup(path: Path) -> bool:
    """Thumbnail/cache files that cameras and operating systems leave behind."""
    return path.name in config.CLEANUP_NAMES or path.suffix.lower() in config.CLEANUP_EXTS


def classify(path: Path, options: SortOptions) -> MediaKind:
    """
    Cleanup artifacts win over everything else, even when the matching media
    kind is switched off. Photo/video only count when enabled.
    """
    if is_cleanup(path):
        return MediaKind.CLEANUP

    ext = path.suffix.lower()
    if options.photos and ext in config.PHOTO_EXTS:
        return MediaKind.PHOTO
    if options.videos and ext in config.VIDEO_EXTS:
        return MediaKind.VIDEO
    return MediaKind.OTHER


def is_duplicates_folder(path: Path) -> bool:
    return path.name.lower() == config.DUPLICATES_FOLDER.lower()


def list_directory(folder: Path) -> Tuple[List[Path], List[Path]]:
    """
    Returns (subdirectories, files) of folder from a single os.scandir pass.
    Symlinks are not followed; anything else non-regular counts as a file so
    the folder is never mistaken for empty.
    """
    with os.scandir(folder) as it:
        entries = list(it)

    # Sort for stable traversal order
    entries.sort(key=lambda e: e.name.lower())

    dirs = []
    files = []
    for e in entries:
        if e.is_dir(follow_symlinks=False):
            dirs.append(Path(e.path))
        else:
            files.append(Path(e.path))
    return dirs, files

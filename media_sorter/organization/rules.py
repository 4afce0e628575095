import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple

from ..exceptions import MetadataDecodeError
from ..models import (
    CaptureMetadata,
    MediaFile,
    MediaKind,
    Resolution,
    RunContext,
    SkipReason,
    TargetFolder,
)


class MetadataLookup(Protocol):
    """Anything that can read capture tags. MetadataExtractor in production."""

    def photo_metadata(self, path: Path) -> CaptureMetadata: ...

    def video_metadata(self, path: Path) -> CaptureMetadata: ...


class DateStrategy(Protocol):
    def capture(self, media: MediaFile, lookup: MetadataLookup,
                ctx: RunContext) -> Tuple[Optional[datetime], str, Optional[str]]:
        """
        Returns (capture date or None, which tag it came from, camera label or None).

        May raise MetadataDecodeError.
        """
        ...


def camera_label(make: Optional[str], model: Optional[str]) -> Optional[str]:
    """
    Builds the camera folder name. Needs both make and model.

    'Canon' + 'Canon EOS 90D' -> 'Canon EOS 90D'
    'Canon' + 'EOS 90D'       -> 'Canon EOS 90D'
    """
    if make is None or model is None:
        return None
    if model.startswith(make):
        label = model.strip()
    else:
        label = f"{make.strip()} {model.strip()}"
    label = label.replace("/", "_").replace("\\", "_")
    return label or None


class PhotoDateStrategy:
    """DateTimeOriginal, then (optionally) DateTimeDigitized/DateTime. Adds the camera label."""

    def capture(self, media: MediaFile, lookup: MetadataLookup, ctx: RunContext) -> Tuple[Optional[datetime], str, Optional[str]]:
        meta: CaptureMetadata = lookup.photo_metadata(media.path)

        dt, source = meta.original, "original"
        if dt is None and ctx.options.use_secondary_date:
            dt, source = meta.secondary, "secondary"

        camera = None
        if ctx.options.use_camera_name:
            camera = camera_label(meta.make, meta.model)
        return dt, source, camera


class VideoDateStrategy:
    """Container creation time only."""

    def capture(self, media: MediaFile, lookup: MetadataLookup, ctx: RunContext) -> Tuple[Optional[datetime], str, Optional[str]]:
        meta: CaptureMetadata = lookup.video_metadata(media.path)
        return meta.original, "container", None


# One strategy per media kind. A new kind needs a new entry, nothing else.
STRATEGIES: Dict[MediaKind, DateStrategy] = {
    MediaKind.PHOTO: PhotoDateStrategy(),
    MediaKind.VIDEO: VideoDateStrategy(),
}


class TargetResolver:
    def __init__(self, lookup: MetadataLookup):
        self.lookup = lookup

    def resolve(self, media: MediaFile, ctx: RunContext) -> Resolution:
        """
        Computes the year/date[/camera] folder for a file.

        Precedence: metadata capture date -> file modified time (unless
        metadata_only). Exactly one timestamp feeds both year and date.
        """
        strategy = STRATEGIES.get(media.kind)
        if strategy is None:
            return Resolution.skip(SkipReason.UNSUPPORTED)

        try:
            dt, source, camera = strategy.capture(media, self.lookup, ctx)
        except MetadataDecodeError as e:
            return Resolution.skip(SkipReason.DECODE_ERROR, str(e))

        if dt is None:
            if ctx.options.metadata_only:
                return Resolution.skip(SkipReason.NO_METADATA_DATE)
            logging.debug(f"Using file modified time for {media.path}")
            # Camera folders only go with a metadata date
            dt, source, camera = media.modified_datetime, "modified", None

        return Resolution.found(TargetFolder.from_datetime(dt, camera=camera, source=source))

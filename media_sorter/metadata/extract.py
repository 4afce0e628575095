import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataDecodeError
from ..models import CaptureMetadata


class MetadataExtractor:
    """
    Metadata lookup used by the resolver.

    Strategies:
      - Photos: 'exifread' (fast, Python-native).
      - Video: 'pymediainfo' container metadata.

    A missing tag is a normal outcome (the field stays None). A decoder that
    blows up is reported as MetadataDecodeError so the caller can tell the two
    apart.
    """

    def photo_metadata(self, path: Path) -> CaptureMetadata:
        try:
            with path.open('rb') as f:
                # details=False skips maker notes and thumbnails
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            raise MetadataDecodeError(f"EXIF read failed: {e}") from e

        if not tags:
            logging.debug(f"No EXIF tags found for {path}")
            return CaptureMetadata()

        return CaptureMetadata(
            original=self._first_exif_date(tags, config.ORIGINAL_DATE_TAGS),
            secondary=self._first_exif_date(tags, config.SECONDARY_DATE_TAGS),
            make=self._tag_text(tags, config.MAKE_TAG),
            model=self._tag_text(tags, config.MODEL_TAG),
        )

    def video_metadata(self, path: Path) -> CaptureMetadata:
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            raise MetadataDecodeError(f"MediaInfo parse failed: {e}") from e

        capture_dt = None
        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.VIDEO_DATE_FIELDS:
                dt = self._parse_mediainfo_date(getattr(track, field, None))
                if dt:
                    capture_dt = dt
                    break
            break

        if capture_dt is None:
            logging.debug(f"No container creation date found for {path}")
        return CaptureMetadata(original=capture_dt)

    # --- Internal Helpers ---

    def _first_exif_date(self, tags, names) -> Optional[datetime]:
        for tag in names:
            if tag in tags:
                dt = self._parse_exif_date(str(tags[tag]))
                if dt:
                    return dt
        return None

    def _tag_text(self, tags, name: str) -> Optional[str]:
        if name not in tags:
            return None
        # Some cameras pad ASCII tags with NULs
        text = str(tags[name]).replace('\x00', '').strip()
        return text or None

    def _parse_exif_date(self, dt_str: str) -> Optional[datetime]:
        """EXIF format is "YYYY:MM:DD HH:MM:SS". Blank/zeroed dates count as missing."""
        try:
            clean = dt_str.strip().replace(':', '-', 2)
            return datetime.strptime(clean[:19], "%Y-%m-%d %H:%M:%S")
        except ValueError:
            return None

    def _parse_mediainfo_date(self, dt_str: Optional[str]) -> Optional[datetime]:
        """
        Parses MediaInfo dates ("2020-01-01 12:00:00 UTC", "UTC 2020-01-01 12:00:00",
        ISO). UTC values are converted to local time; returns a naive datetime.
        """
        if not dt_str:
            return None

        s = str(dt_str).strip()
        is_utc = "UTC" in s
        clean = s.replace("UTC", "").strip()
        if "." in clean:
            clean = clean.split(".")[0]

        dt = None
        try:
            dt = datetime.fromisoformat(clean)
        except ValueError:
            try:
                dt = datetime.strptime(clean.replace(":", "-", 2), "%Y-%m-%d %H:%M:%S")
            except ValueError:
                return None

        if dt.year <= config.QUICKTIME_EPOCH_YEAR:
            return None

        if dt.tzinfo is not None:
            return dt.astimezone().replace(tzinfo=None)
        if is_utc:
            return dt.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        return dt

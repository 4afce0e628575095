import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from . import config
from .core import MediaSorter
from .models import SortOptions


def setup_logging(log_dir: Path, verbose: bool, started: Optional[datetime] = None) -> Path:
    """Sets up logging to both console and a timestamped file. Returns the log file path."""
    log_level = logging.DEBUG if verbose else logging.INFO

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / config.LOG_FILE_PATTERN.format(started=started or datetime.now())

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    return log_file


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="media-sorter",
        description="MediaSorter sorts photos and videos into folders by year and date. "
                    "Photos can optionally be sorted into a camera name folder under the date folder.",
    )

    p.add_argument("-s", "--source-folder", type=Path, required=True, help="Source folder to be processed")
    p.add_argument("-d", "--destination-folder", type=Path, default=None,
                   help="Destination folder (defaults to the source folder)")

    p.add_argument("-p", "--photos", action="store_true", help="Sort photos (photos and/or videos required)")
    p.add_argument("-v", "--videos", action="store_true", help="Sort videos (photos and/or videos required)")
    p.add_argument("-t", "--test-sort", action="store_true",
                   help="Write intended move and delete operations to the log only")
    p.add_argument("-m", "--metadata-only", action="store_true",
                   help="Skip files without a date in their metadata instead of using the file modified date")
    p.add_argument("-c", "--use-camera-name", action="store_true",
                   help="Add a camera name folder under the date folder (photos only)")
    p.add_argument("-k", "--keep-duplicates", action="store_true",
                   help=f"Keep identical duplicates in a '{config.DUPLICATES_FOLDER}' folder instead of deleting them")
    p.add_argument("--no-secondary-date", action="store_true",
                   help="Only trust DateTimeOriginal for photos, not DateTimeDigitized/DateTime")
    p.add_argument("--write-notes", action="store_true",
                   help="Write a .txt note with the original path next to files moved out of non-date folders")

    p.add_argument("--log-dir", type=Path, default=Path.cwd(), help="Folder for the log file (default: current dir)")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args(argv)
    if not (args.photos or args.videos):
        p.error("MediaSorter requires either the --photos and/or --videos option.")
    return args


def build_options(args) -> SortOptions:
    return SortOptions(
        source=args.source_folder.resolve(),
        destination=args.destination_folder.resolve() if args.destination_folder else None,
        photos=args.photos,
        videos=args.videos,
        dry_run=args.test_sort,
        metadata_only=args.metadata_only,
        use_camera_name=args.use_camera_name,
        keep_duplicates=args.keep_duplicates,
        use_secondary_date=not args.no_secondary_date,
        write_notes=args.write_notes,
        show_progress=True,
    )


def main(argv=None):
    args = parse_args(argv)

    # 1. Setup
    log_file = setup_logging(args.log_dir.resolve(), args.verbose)
    logging.info("=== Media Sorter Started ===")

    if not args.photos and (args.metadata_only or args.use_camera_name):
        logging.warning("useCameraName and metadataOnly options only work with photos.")

    # 2. Execution
    sorter = MediaSorter(build_options(args))
    exit_code = 0
    try:
        sorter.sort()
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        exit_code = 1
    except Exception:
        logging.exception("Fatal error during sorting.")
        if sorter.ctx is not None:
            stats = sorter.ctx.stats
            logging.error(f"Aborted after {stats.files} files in {stats.folders} folders.")
        exit_code = 1

    logging.info(f"Details in log file {log_file}")
    logging.shutdown()
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()

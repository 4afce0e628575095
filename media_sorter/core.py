import logging
import time
from datetime import timedelta
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from . import config
from .exceptions import SourceFolderError
from .metadata.extract import MetadataExtractor
from .models import (
    DuplicateDecision,
    MediaFile,
    MediaKind,
    Resolution,
    RunContext,
    RunStatistics,
    SkipReason,
    SortOptions,
    TargetFolder,
)
from .organization.mover import ActionExecutor
from .organization.rules import MetadataLookup, TargetResolver
from .scanning.filesystem import classify, is_duplicates_folder, list_directory
from .scanning.hasher import DuplicateComparator, create_duplicate_file_name


class MediaSorter:
    def __init__(self, options: SortOptions, lookup: Optional[MetadataLookup] = None,
                 comparator: Optional[DuplicateComparator] = None):
        """
        Args:
            lookup: anything with photo_metadata(path) / video_metadata(path).
                    Defaults to the exifread/pymediainfo based MetadataExtractor.
        """
        self.options = options
        self.lookup = lookup if lookup is not None else MetadataExtractor()
        self.comparator = comparator if comparator is not None else DuplicateComparator()
        self.resolver = TargetResolver(self.lookup)
        self.ctx: Optional[RunContext] = None
        self.executor: Optional[ActionExecutor] = None
        self._progress = None

    def sort(self) -> RunStatistics:
        """
        Runs one full pass over the source tree.
        1. Walk folders depth-first (subfolders before files)
        2. Resolve, dedupe and move each file
        3. Remove folders left empty, leaves first

        The summary line is only logged when the walk completes. A
        FileOperationError aborts the run and propagates to the caller.
        """
        ctx = RunContext.create(self.options)
        if not ctx.source_root.is_dir():
            raise SourceFolderError(f"Source folder {ctx.source_root} not found")

        self.ctx = ctx
        self.executor = ActionExecutor(ctx)

        logging.info(f"Source: {ctx.source_root}")
        logging.info(f"Dest:   {ctx.dest_root}")
        if ctx.dry_run:
            logging.info("Test sort: no files will be moved or deleted.")

        self.executor.make_dirs(ctx.dest_root)
        ctx.mark_populated(ctx.dest_root)

        started = time.perf_counter()
        with tqdm(desc="Sorting", unit="file", disable=not self.options.show_progress) as progress:
            self._progress = progress
            self.process_folder(ctx.source_root)
        self._progress = None

        stats = ctx.stats
        stats.elapsed = time.perf_counter() - started
        logging.info(
            f"Processed {stats.files} files in {stats.folders} folders, "
            f"elapsed time = {timedelta(seconds=stats.elapsed)}"
        )
        logging.info(
            f"Moved {stats.moved}, deleted {stats.deleted} ({stats.duplicates} duplicates), "
            f"skipped {stats.skipped}, errors {stats.errors}, removed {stats.removed_folders} folders"
        )
        return stats

    # --- Traversal ---

    def process_folder(self, folder: Path) -> bool:
        """
        Processes subfolders, then files, then removes folder if nothing is
        left in it. Returns True when the folder was removed.

        Emptiness comes from what happened to the entries listed up front, so
        dry runs report the same cascade a real run would perform.
        """
        ctx = self.ctx
        dirs, files = list_directory(folder)
        remaining = 0

        for sub in dirs:
            ctx.stats.folders += 1
            # ignore the duplicates folder so sorted folders can be reprocessed
            if is_duplicates_folder(sub):
                remaining += 1
                continue
            if not self.process_folder(sub):
                remaining += 1

        for path in files:
            ctx.stats.files += 1
            if self._progress is not None:
                self._progress.update(1)
            if self.process_file(path):
                remaining += 1

        if remaining or folder in ctx.populated:
            return False
        if folder in (ctx.source_root, ctx.dest_root):
            return False

        self.executor.remove_directory(folder)
        return True

    def process_file(self, path: Path) -> bool:
        """Returns True when the file stays where it is."""
        kind = classify(path, self.options)

        if kind is MediaKind.CLEANUP:
            self.executor.delete_file(path)
            return False

        if kind is MediaKind.OTHER or not path.is_file():
            self._skip(path, Resolution.skip(SkipReason.UNSUPPORTED))
            return True

        media = MediaFile.from_path(path, kind)
        resolution = self.resolver.resolve(media, self.ctx)
        if resolution.is_skip:
            self._skip(path, resolution)
            return True

        target = resolution.target
        target_folder = self.ctx.dest_root / target.relative_path
        target_path = target_folder / path.name

        # skip files already in the right place to allow reprocessing directories
        if target_path == path:
            self._skip(path, Resolution.skip(SkipReason.ALREADY_SORTED))
            return True

        # In a dry run the occupant may be a file that would have moved here
        occupant = self.ctx.occupant(target_path)
        if occupant is None:
            self.executor.make_dirs(target_folder)
            self.executor.move(path, target_path)
            self._write_note(path, target_path, target)
            return False

        comparison = self.comparator.compare(occupant, path)
        decision = DuplicateDecision.decide(comparison, self.options.keep_duplicates)

        if decision is DuplicateDecision.DIFFERENT_RENAME:
            # Same name, different content: keep both side by side
            target_path = create_duplicate_file_name(path, target_folder, taken=self.ctx.claimed)
        elif decision is DuplicateDecision.IDENTICAL_KEEP_COPY:
            self.ctx.stats.duplicates += 1
            dup_folder = target_folder / config.DUPLICATES_FOLDER
            self.executor.make_dirs(dup_folder)
            target_path = create_duplicate_file_name(path, dup_folder, taken=self.ctx.claimed)
        else:
            self.ctx.stats.duplicates += 1
            logging.info(f"Detected duplicate {path}")
            self.executor.delete_file(path)
            return False

        self.executor.move(path, target_path)
        self._write_note(path, target_path, target)
        return False

    # --- Helpers ---

    def _skip(self, path: Path, resolution: Resolution):
        self.ctx.stats.skipped += 1
        reason = resolution.reason

        if reason is SkipReason.UNSUPPORTED:
            logging.info(f"Skipping unsupported file: {path}")
        elif reason is SkipReason.ALREADY_SORTED:
            logging.info(f"Skipping {path} - already in correct directory")
        elif reason is SkipReason.DECODE_ERROR:
            self.ctx.stats.errors += 1
            logging.warning(f"Skipping file due to metadata decoding error ({resolution.detail}): {path}")
        else:
            logging.info(f"Could not generate target folder for {path} ({reason.value})")

    def _write_note(self, original: Path, moved_to: Path, target: TargetFolder):
        """
        Leaves '<moved name>.txt' (e.g. 'a.jpg.txt') next to the moved file
        when its old folder name carried something other than the date.
        Never replaces an existing file: a taken name gets a counter.
        """
        if not self.options.write_notes:
            return
        if original.parent.name == target.date:
            return
        folder = moved_to.parent
        note_path = folder / (moved_to.name + config.NOTE_EXT)
        if self.ctx.occupant(note_path) is not None:
            note_path = create_duplicate_file_name(note_path, folder, taken=self.ctx.claimed)
        self.executor.write_note(note_path, original)

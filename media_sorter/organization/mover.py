import os
import shutil
import logging
from pathlib import Path

from ..exceptions import FileOperationError
from ..models import RunContext


class ActionExecutor:
    """
    The only place that changes the filesystem.

    With dry_run set every action is logged and nothing is touched.
    """

    def __init__(self, ctx: RunContext):
        self.ctx = ctx

    def _refuse_overwrite(self, dest: Path):
        if self.ctx.occupant(dest) is not None:
            raise FileOperationError(f"Refusing to overwrite {dest}")

    def _log(self, message: str):
        prefix = "[DRY RUN] " if self.ctx.dry_run else ""
        logging.info(f"{prefix}{message}")

    def make_dirs(self, folder: Path):
        if folder.is_dir():
            return
        self._log(f"Creating directory {folder}")
        if self.ctx.dry_run:
            return
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Failed to create directory {folder}: {e}") from e

    def move(self, src: Path, dest: Path):
        self._refuse_overwrite(dest)
        self._log(f"Moving {src} to {dest}")
        self.ctx.mark_populated(dest.parent)
        self.ctx.claimed[dest] = src
        self.ctx.stats.moved += 1
        if self.ctx.dry_run:
            return
        try:
            shutil.move(str(src), str(dest))
        except OSError as e:
            raise FileOperationError(f"Failed to move {src} -> {dest}: {e}") from e

    def delete_file(self, path: Path):
        self._log(f"Deleting file {path}")
        self.ctx.stats.deleted += 1
        if self.ctx.dry_run:
            return
        try:
            path.unlink()
        except OSError as e:
            raise FileOperationError(f"Failed to delete {path}: {e}") from e

    def remove_directory(self, folder: Path):
        self._log(f"Removing directory {folder}")
        self.ctx.stats.removed_folders += 1
        if self.ctx.dry_run:
            return
        try:
            os.rmdir(folder)
        except OSError as e:
            raise FileOperationError(f"Failed to remove directory {folder}: {e}") from e

    def write_note(self, note_path: Path, original: Path):
        """Writes a small text file recording where a moved file came from."""
        self._refuse_overwrite(note_path)
        self._log(f"Writing note {note_path}")
        self.ctx.mark_populated(note_path.parent)
        self.ctx.claimed[note_path] = original
        if self.ctx.dry_run:
            return
        try:
            with note_path.open("x", encoding="utf-8") as f:
                f.write(f"Original path = {original}\n")
        except OSError as e:
            raise FileOperationError(f"Failed to write note {note_path}: {e}") from e

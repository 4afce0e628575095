import logging
from datetime import datetime
from pathlib import Path

import pytest

from media_sorter import main as main_module
from media_sorter.metadata.extract import MetadataExtractor
from media_sorter.models import CaptureMetadata


@pytest.fixture(autouse=True)
def restore_root_logging():
    """main() reconfigures the root logger; drop the handlers it added."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_parse_args_defaults(tmp_path):
    args = main_module.parse_args(["-s", str(tmp_path), "-p"])
    opts = main_module.build_options(args)

    assert opts.source == tmp_path.resolve()
    assert opts.destination is None
    assert opts.photos and not opts.videos
    assert not opts.dry_run
    assert opts.use_secondary_date
    assert not opts.write_notes


def test_parse_args_all_switches(tmp_path):
    args = main_module.parse_args([
        "--source-folder", str(tmp_path / "in"), "--destination-folder", str(tmp_path / "out"),
        "-p", "-v", "-t", "-m", "-c", "-k", "--no-secondary-date", "--write-notes",
    ])
    opts = main_module.build_options(args)

    assert opts.destination == (tmp_path / "out").resolve()
    assert opts.videos and opts.dry_run and opts.metadata_only
    assert opts.use_camera_name and opts.keep_duplicates and opts.write_notes
    assert not opts.use_secondary_date


def test_photos_or_videos_required(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main_module.parse_args(["-s", str(tmp_path)])
    assert exc.value.code == 2


def test_setup_logging_names_file_after_start_time(tmp_path):
    log_file = main_module.setup_logging(tmp_path / "logs", verbose=True,
                                         started=datetime(2024, 5, 6, 7, 8, 9))
    logging.info("hello log")
    logging.getLogger().handlers[0].flush()

    assert log_file == tmp_path / "logs" / "MediaSorter-2024-05-06_07-08-09.log"
    assert "[INFO] hello log" in log_file.read_text(encoding="utf-8")
    assert logging.getLogger().level == logging.DEBUG


def test_main_end_to_end(tmp_path, monkeypatch):
    src = tmp_path / "card"
    (src / "DCIM").mkdir(parents=True)
    (src / "DCIM" / "IMG_0001.JPG").write_bytes(b"jpeg")
    (src / "DCIM" / "Thumbs.db").write_bytes(b"junk")
    dest = tmp_path / "library"
    logs = tmp_path / "logs"

    monkeypatch.setattr(MetadataExtractor, "photo_metadata",
                        lambda self, p: CaptureMetadata(original=datetime(2022, 8, 9, 10, 11, 12)))

    main_module.main(["-s", str(src), "-d", str(dest), "-p", "--log-dir", str(logs)])

    assert (dest / "2022" / "2022-08-09" / "IMG_0001.JPG").read_bytes() == b"jpeg"
    assert not (src / "DCIM").exists()

    log_text = next(logs.glob("MediaSorter-*.log")).read_text(encoding="utf-8")
    assert "Processed 2 files in 1 folders" in log_text
    assert "Deleting file" in log_text
    assert "Details in log file" in log_text


def test_main_exits_on_fatal_error(tmp_path):
    logs = tmp_path / "logs"
    with pytest.raises(SystemExit) as exc:
        main_module.main(["-s", str(tmp_path / "missing"), "-v", "--log-dir", str(logs)])

    assert exc.value.code == 1
    log_text = next(logs.glob("MediaSorter-*.log")).read_text(encoding="utf-8")
    assert "Fatal error during sorting." in log_text
    assert "Processed" not in log_text

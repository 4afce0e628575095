"""
Configuration constants for the media sorter.
"""

# --- File Type Definitions ---
PHOTO_EXTS = {'.jpg', '.jpeg', '.jpe', '.tif', '.tiff', '.cr2', '.nef', '.arw', '.orf', '.rw2', '.dng', '.heic'}
VIDEO_EXTS = {'.mov', '.mp4', '.m4v', '.mpg', '.mpeg', '.avi', '.mts', '.m2ts', '.3gp'}

# Platform-generated thumbnail/cache files. Always deleted.
CLEANUP_NAMES = {'Thumbs.db', 'ZbThumbnail.info'}
CLEANUP_EXTS = {'.thm'}

# --- Metadata Parsing ---
ORIGINAL_DATE_TAGS = [
    'EXIF DateTimeOriginal',
]
SECONDARY_DATE_TAGS = [
    'EXIF DateTimeDigitized',
    'Image DateTime',
]
MAKE_TAG = 'Image Make'
MODEL_TAG = 'Image Model'

# MediaInfo "General" track fields holding the container creation time
VIDEO_DATE_FIELDS = [
    'encoded_date',
    'recorded_date',
]
# QuickTime stores seconds since 1904; a zero value means "not set"
QUICKTIME_EPOCH_YEAR = 1904

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Organization ---
YEAR_FORMAT = "%Y"
DATE_FORMAT = "%Y-%m-%d"
DUPLICATES_FOLDER = "ms-duplicates"
NOTE_EXT = ".txt"

# --- Logging ---
LOG_FILE_PATTERN = "MediaSorter-{started:%Y-%m-%d_%H-%M-%S}.log"

"""
Candidate-title extraction from release-style filenames.
"""
import re

RELEASE_TAGS = (
    "720p",
    "1080p",
    "2160p",
    "4k",
    "BluRay",
    "WEBRip",
    "x264",
    "x265",
    "HDR",
    "DVDRip",
    "BRRip",
    "AAC",
    "MP3",
    "H264",
    "HEVC",
)

# Token boundaries: anything but an ASCII letter or digit, so "_" separates words too.
_START = r"(?<![A-Za-z0-9])"
_END = r"(?![A-Za-z0-9])"

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_YEAR_RE = re.compile(_START + r"(?:19|20)\d{2}" + _END)
_TAG_RE = re.compile(_START + r"(?:" + "|".join(RELEASE_TAGS) + r")" + _END, re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[._]")
_WHITESPACE_RE = re.compile(r"\s+")


def extract_title(filename: str) -> str:
    """
    Derive a human-readable title from a filename.

    "Movie.Title.2019.1080p.x264.mkv" -> "Movie Title"

    Only the first year-like token is removed, so titles such as "2001" keep
    a later year. The result may be empty when the name is nothing but tags.
    """
    title = _EXTENSION_RE.sub("", filename or "")
    title = _YEAR_RE.sub("", title, count=1)
    title = _TAG_RE.sub("", title)
    title = _SEPARATOR_RE.sub(" ", title)
    return _WHITESPACE_RE.sub(" ", title).strip()


def display_title(filename: str) -> str:
    """Extracted title, or the raw filename when nothing usable is left."""
    return extract_title(filename) or filename

"""Movie library listing."""
from .catalog_cache import CatalogCache
from .models import CatalogRecord, MovieRecord
from .prober import DurationProber
from .service import LibraryService, merge_record
from .title import RELEASE_TAGS, display_title, extract_title

__all__ = [
    "CatalogCache",
    "CatalogRecord",
    "MovieRecord",
    "DurationProber",
    "LibraryService",
    "merge_record",
    "RELEASE_TAGS",
    "display_title",
    "extract_title",
]

"""Public package surface for drop-in override discovery and writing.

Exports the composition-root helpers from :mod:`lib_unit_dropin.core`, the
domain error taxonomy and the logging hooks so ``import lib_unit_dropin`` is
enough for most consumers.
"""

from __future__ import annotations

from .core import (
    DROPIN_DIR_SUFFIX,
    DROPIN_FILE_SUFFIX,
    DefaultLookupPaths,
    DropInError,
    DropInPaths,
    DropInResolver,
    DropInSearchResult,
    DropInWriter,
    InvalidLevel,
    InvalidName,
    InvalidUnitName,
    ListingError,
    TemplateDerivationError,
    build_unit_path_cache,
    drop_in_file,
    find_dropin_paths,
    find_unit_dropin_paths,
    write_drop_in,
    write_drop_in_format,
)
from .observability import bind_trace_id, get_logger

__all__ = [
    "DROPIN_DIR_SUFFIX",
    "DROPIN_FILE_SUFFIX",
    "DefaultLookupPaths",
    "DropInError",
    "DropInPaths",
    "DropInResolver",
    "DropInSearchResult",
    "DropInWriter",
    "InvalidLevel",
    "InvalidName",
    "InvalidUnitName",
    "ListingError",
    "TemplateDerivationError",
    "bind_trace_id",
    "build_unit_path_cache",
    "drop_in_file",
    "find_dropin_paths",
    "find_unit_dropin_paths",
    "get_logger",
    "write_drop_in",
    "write_drop_in_format",
]

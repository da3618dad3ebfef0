"""Loading of JSON (and YAML) data files, with optional schema validation and caching."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import regex
import yaml

from xtrax.exceptions import DataLoadError, DataValidationError

from .json_validator import validate_data_with_schema
from .models import FileLoadOptions, LoadMetadata, LoadResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_CACHE_SIZE = 100
YAML_SUFFIXES = (".yaml", ".yml")


def _parse(content: str, path: Path) -> Any:  # noqa: ANN401
    if path.suffix.lower() in YAML_SUFFIXES:
        return yaml.safe_load(content)
    return json.loads(content)


def load_json_file(file_path: str | Path, options: FileLoadOptions | None = None) -> Any:  # noqa: ANN401
    """
    Load and parse a data file.

    Files ending in ``.yaml`` or ``.yml`` are parsed as YAML; everything else
    as JSON.

    Args:
        file_path: Path to the file.
        options: Encoding and size limit.

    Returns:
        The parsed data.

    Raises:
        DataLoadError: If the file is missing, too large, or cannot be parsed.

    """
    options = options or FileLoadOptions()
    path = Path(file_path)
    try:
        size = path.stat().st_size
    except OSError as e:
        msg = f"Failed to load data file {path}: {e}"
        raise DataLoadError(msg) from e

    if options.max_size and size > options.max_size:
        msg = f"File {path} exceeds maximum size of {options.max_size} bytes"
        raise DataLoadError(msg)

    try:
        content = path.read_text(encoding=options.encoding)
        return _parse(content, path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        msg = f"Failed to load data file {path}: {e}"
        raise DataLoadError(msg) from e


def load_json_file_with_metadata(file_path: str | Path, options: FileLoadOptions | None = None) -> LoadResult[Any]:
    """Load a data file and report its absolute path, size and load time."""
    start = time.perf_counter()
    path = Path(file_path).resolve()
    data = load_json_file(path, options)
    return LoadResult(
        data=data,
        metadata=LoadMetadata(
            file_path=str(path),
            load_time_ms=(time.perf_counter() - start) * 1000,
            file_size=path.stat().st_size,
        ),
    )


def load_data_with_schema(data_path: str | Path, schema_path: str | Path, options: FileLoadOptions | None = None) -> Any:  # noqa: ANN401
    """
    Load a data file and validate it against a JSON Schema file.

    Raises:
        DataLoadError: If either file cannot be loaded.
        DataValidationError: If the data does not conform to the schema.

    """
    data = load_json_file(data_path, options)
    result = validate_data_with_schema(data, schema_path)
    if not result.is_valid:
        raise DataValidationError(result.errors)
    logger.debug("Validated %s against %s", data_path, schema_path)
    return result.data


def load_json_files(dir_path: str | Path, file_pattern: str = r"\.json$", options: FileLoadOptions | None = None) -> dict[str, Any]:
    """
    Load every matching file in a directory, keyed by file name without extension.

    Raises:
        DataLoadError: If the directory cannot be listed or any file fails to load.

    """
    directory = Path(dir_path)
    matcher = regex.compile(file_pattern)
    try:
        candidates = sorted(p for p in directory.iterdir() if p.is_file() and matcher.search(p.name))
    except OSError as e:
        msg = f"Failed to load JSON files from {directory}: {e}"
        raise DataLoadError(msg) from e

    results = {path.stem: load_json_file(path, options) for path in candidates}
    logger.debug("Loaded %d file(s) from %s", len(results), directory)
    return results


@dataclass
class _CacheEntry:
    data: Any
    mtime_ns: int


class JSONFileCache:
    """
    An in-memory cache of parsed data files.

    Entries are keyed by absolute path and reloaded when the file's
    modification time changes. Once full, the oldest entry is evicted.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_CACHE_SIZE) -> None:
        """
        Initialize the cache.

        Args:
            max_size: The maximum number of files kept.

        """
        self.max_size = max_size
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def load(self, file_path: str | Path, options: FileLoadOptions | None = None) -> Any:  # noqa: ANN401
        """Return the parsed file, from the cache when it is still current."""
        options = options or FileLoadOptions()
        path = Path(file_path).resolve()
        key = str(path)

        if not options.cache:
            return load_json_file(path, options)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                try:
                    if path.stat().st_mtime_ns == entry.mtime_ns:
                        logger.debug("Cache hit for %s", key)
                        return entry.data
                except OSError:
                    logger.debug("Cached file disappeared: %s", key)
                del self._entries[key]

        # Stat before reading, so a write during the read leaves the entry stale.
        try:
            mtime_ns = path.stat().st_mtime_ns
        except OSError as e:
            msg = f"Failed to load data file {path}: {e}"
            raise DataLoadError(msg) from e
        data = load_json_file(path, options)

        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %s from the file cache", evicted)
            self._entries[key] = _CacheEntry(data=data, mtime_ns=mtime_ns)
        return data

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, Any]:
        """Return the number of entries and their paths, oldest first."""
        with self._lock:
            return {"size": len(self._entries), "entries": list(self._entries)}


_default_cache = JSONFileCache()


def load_json_file_with_cache(file_path: str | Path, options: FileLoadOptions | None = None) -> Any:  # noqa: ANN401
    """Load a data file through the shared module-level cache."""
    return _default_cache.load(file_path, options)


def clear_file_cache() -> None:
    """Clear the shared module-level cache."""
    _default_cache.clear()


def get_cache_stats() -> dict[str, Any]:
    """Return statistics for the shared module-level cache."""
    return _default_cache.stats()

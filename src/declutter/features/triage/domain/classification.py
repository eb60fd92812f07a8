"""Summary: Map file names to coarse file types and spot hidden entries.
Why: Filtering and the local file source must agree on one extension table."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from .models import FileType

_EXTENSIONS: Final[dict[FileType, frozenset[str]]] = {
    FileType.IMAGE: frozenset(
        {"png", "jpg", "jpeg", "gif", "heic", "heif", "tiff", "tif", "bmp", "webp", "svg", "ico"}
    ),
    FileType.VIDEO: frozenset({"mov", "mp4", "m4v", "avi", "mkv", "webm", "wmv", "flv", "3gp"}),
    FileType.AUDIO: frozenset({"mp3", "wav", "aiff", "m4a", "flac", "aac", "ogg", "wma"}),
    FileType.DOCUMENT: frozenset(
        {
            "pdf",
            "doc",
            "docx",
            "xls",
            "xlsx",
            "ppt",
            "pptx",
            "rtf",
            "txt",
            "md",
            "pages",
            "numbers",
            "key",
        }
    ),
    FileType.ARCHIVE: frozenset({"zip", "rar", "7z", "tar", "gz", "bz2", "dmg", "iso"}),
}

_HIDDEN_PREFIXES: Final[tuple[str, ...]] = (".", "$")
_SYSTEM_NAMES: Final[frozenset[str]] = frozenset(
    {"desktop.ini", "thumbs.db", "icon\r", "$recycle.bin"}
)


def classify(path: Path, *, is_directory: bool) -> FileType:
    """Return the ``FileType`` for ``path``.

    Application bundles are directories on macOS, so the ``.app`` suffix wins
    over the directory flag.
    """

    extension = path.suffix.lower().lstrip(".")
    if extension == "app":
        return FileType.APP
    if is_directory:
        return FileType.FOLDER
    for file_type, extensions in _EXTENSIONS.items():
        if extension in extensions:
            return file_type
    return FileType.OTHER


def is_hidden_or_system(name: str) -> bool:
    """True for dot files, ``$``-prefixed entries and well-known OS droppings."""

    return name.startswith(_HIDDEN_PREFIXES) or name.lower() in _SYSTEM_NAMES


__all__ = ["classify", "is_hidden_or_system"]

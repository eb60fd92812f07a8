"""
Summary: Package marker for triage adapters.
Why: Keep filesystem, trash, relocation and preview implementations discoverable.
"""

from .cloud_mover import FolderCloudMover
from .folder_mover import LocalFolderMover
from .local_source import LocalFileSource
from .thumbnails import PillowThumbnailProvider
from .trash_mover import TrashFileMover

__all__ = [
    "FolderCloudMover",
    "LocalFileSource",
    "LocalFolderMover",
    "PillowThumbnailProvider",
    "TrashFileMover",
]

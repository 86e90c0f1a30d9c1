import os
import logging
import uuid
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from ..settings import settings

logger = logging.getLogger("recipe_voyage.storage")

# Use settings or default
MEDIA_ROOT = Path(settings.media_root) if settings.media_root else (Path(os.getcwd()) / "media")


@runtime_checkable
class AudioFileStore(Protocol):
    """The part of the audio service the repository depends on."""

    def delete_file(self, filename: str) -> bool:
        ...


@runtime_checkable
class AudioService(AudioFileStore, Protocol):
    """Device audio wrapper (capture and playback live outside this package)."""

    def record_start(self) -> Any:
        ...

    def record_stop(self, handle: Any) -> tuple[str, float]:
        ...

    def play(self, filename: str) -> None:
        ...

    def stop(self) -> None:
        ...


@runtime_checkable
class PhotoStore(Protocol):
    def store(self, data: bytes) -> str:
        ...

    def delete(self, ref: str) -> bool:
        ...


def _is_safe_name(name: str) -> bool:
    return bool(name) and ".." not in name and "/" not in name and "\\" not in name


class LocalAudioStore:
    """Audio recordings as flat files under MEDIA_ROOT/audio."""

    def __init__(self, root: Optional[Path] = None):
        self.root = root or (MEDIA_ROOT / settings.audio_dir)
        if not self.root.exists():
            self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def new_recording_name() -> str:
        return f"recording_{str(uuid.uuid4()).upper()}.m4a"

    def path_for(self, filename: str) -> Path:
        if not _is_safe_name(filename):
            raise ValueError(f"Invalid audio filename: {filename!r}")
        return self.root / filename

    def exists(self, filename: str) -> bool:
        return _is_safe_name(filename) and (self.root / filename).exists()

    def delete_file(self, filename: str) -> bool:
        """
        Delete a recording from local disk.
        Returns True if deleted or didn't exist, False on error.
        """
        if not _is_safe_name(filename):
            logger.warning(f"Invalid audio delete name: {filename!r}")
            return False

        file_path = self.root / filename
        try:
            if file_path.exists():
                file_path.unlink()
                logger.info(f"Deleted audio file {file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to delete {file_path}: {e}")
            return False


class LocalPhotoStore:
    """Opaque photo blobs under MEDIA_ROOT/photos. No image processing."""

    def __init__(self, root: Optional[Path] = None):
        self.root = root or (MEDIA_ROOT / settings.photo_dir)
        if not self.root.exists():
            self.root.mkdir(parents=True, exist_ok=True)

    def store(self, data: bytes) -> str:
        """Save bytes and return the key used to reference them."""
        key = f"{uuid.uuid4().hex}.bin"
        file_path = self.root / key
        with open(file_path, "wb") as f:
            f.write(data)

        logger.info(f"Saved {len(data)} bytes to {file_path}")
        return key

    def load(self, ref: str) -> bytes:
        if not _is_safe_name(ref):
            raise ValueError("Invalid photo key")
        return (self.root / ref).read_bytes()

    def delete(self, ref: str) -> bool:
        if not _is_safe_name(ref):
            logger.warning(f"Invalid photo delete key: {ref!r}")
            return False

        file_path = self.root / ref
        try:
            if file_path.exists():
                file_path.unlink()
                logger.info(f"Deleted photo {file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to delete {file_path}: {e}")
            return False


def format_duration(seconds: float) -> str:
    """Render a clip length as m:ss."""
    total = int(max(seconds, 0))
    return f"{total // 60}:{total % 60:02d}"

"""
ZIP packages for standalone reports.
"""

import zipfile
from pathlib import Path
from typing import Union

from ..core.exceptions import ArchiveError
from ..utils.logger import get_logger

logger = get_logger("mrreports.storage.archive")


def create_zip_archive(source_dir: Union[str, Path], archive_path: Union[str, Path]) -> Path:
    """
    Zip the contents of a directory (paths stored relative to it).

    Raises:
        ArchiveError: If the directory is missing or the archive can't be written.
    """
    source_dir = Path(source_dir)
    archive_path = Path(archive_path)
    if not source_dir.is_dir():
        raise ArchiveError(f"Package directory not found: {source_dir}")

    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path in sorted(source_dir.rglob("*")):
                if path.is_file():
                    archive.write(path, path.relative_to(source_dir).as_posix())
    except OSError as e:
        raise ArchiveError(
            f"Failed to create {archive_path}: {e}", {"source": str(source_dir)}
        ) from e

    logger.info(f"Created package {archive_path}")
    return archive_path


def extract_zip_archive(archive_path: Union[str, Path], target_dir: Union[str, Path]) -> list[Path]:
    """
    Extract a package, refusing members that would land outside target_dir.

    Returns:
        Paths of the extracted files.
    """
    archive_path = Path(archive_path)
    target_dir = Path(target_dir)
    root = target_dir.resolve()

    try:
        with zipfile.ZipFile(archive_path) as archive:
            for member in archive.namelist():
                destination = (root / member).resolve()
                if root not in destination.parents:
                    raise ArchiveError(
                        f"Unsafe path in {archive_path}: {member}",
                        {"archive": str(archive_path)},
                    )
            archive.extractall(root)
            names = [name for name in archive.namelist() if not name.endswith("/")]
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(f"Failed to extract {archive_path}: {e}") from e

    logger.info(f"Extracted {len(names)} files from {archive_path}")
    return [root / name for name in names]

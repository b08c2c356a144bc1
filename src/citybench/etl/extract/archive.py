# src/citybench/etl/extract/archive.py

import logging
import zipfile
from pathlib import Path
from typing import List

from citybench.errors import ExtractError

logger = logging.getLogger(__name__)


def extract_archive(archive_path: str | Path, dest_dir: str | Path = "./") -> List[Path]:
    """
    Extracts every member of a zip archive into dest_dir,
    overwriting files that are already there.

    Args:
        archive_path : Path to the .zip file
        dest_dir : Directory the members are extracted under
                   (member paths are kept, e.g. data/cities.txt)

    Returns:
        List[Path]: The extracted file paths
    """

    archive = Path(archive_path)
    if not archive.is_file():
        raise ExtractError(f"can't open cities file, expected location {archive_path}")

    dest = Path(dest_dir)
    try:
        with zipfile.ZipFile(archive) as zf:
            members = [m for m in zf.infolist() if not m.is_dir()]
            zf.extractall(dest)
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractError(f"can't extract {archive}: {e}") from e

    paths = [dest / m.filename for m in members]
    logger.info("Extracted %d file(s) from %s into %s", len(paths), archive, dest)
    return paths

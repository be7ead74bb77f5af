# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Locate the resources directory of a previously generated app.

Users point ``--upgrade`` at whatever they have at hand: the app folder, the
.app bundle, the executable, or the resources directory itself. The
resources directory is the one that holds the sidecar file
(``sitewrap.json``), so the locator searches the tree below the given path
for it.

Search Rules:
    - A file path starts the search in its parent directory.
    - Depth-first. The current directory is checked for sitewrap.json
      before any subdirectory is visited; the first hit wins.
    - Subdirectories are visited in lexicographic name order, so the result
      does not depend on the operating system's listing order.
    - Each real directory is visited at most once, which stops symlink
      loops (e.g. a link pointing back to an ancestor).
    - No sidecar anywhere returns None. That is a normal outcome, not an
      error.
    - Filesystem errors (missing start directory, permission denied)
      propagate as OSError.
"""

from __future__ import annotations

from pathlib import Path

SIDECAR_FILENAME = "sitewrap.json"


def _search(directory: Path, visited: set[Path]) -> Path | None:
    real = directory.resolve()
    if real in visited:
        return None
    visited.add(real)

    if (directory / SIDECAR_FILENAME).is_file():
        return directory

    children = sorted(
        (child for child in directory.iterdir() if child.is_dir()),
        key=lambda child: child.name,
    )
    for child in children:
        found = _search(child, visited)
        if found is not None:
            return found
    return None


def find_app_resources_dir(start: str | Path) -> Path | None:
    """Find the directory holding sitewrap.json at or below start.

    Args:
        start: A directory, a file inside it, or any ancestor.

    Returns:
        Absolute path of the first directory (depth-first, lexicographic)
            containing sitewrap.json, or None if there is none.

    Raises:
        FileNotFoundError: If start does not exist. A missing path never falls
            back to searching its parent.
        PermissionError: If a directory in the tree cannot be listed.

    Example:
        >>> find_app_resources_dir("dist/Example-linux-x64")
        PosixPath('/home/me/dist/Example-linux-x64/resources/app')
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    start_path = Path(start).expanduser()
    if not start_path.exists():
        raise FileNotFoundError(f"upgrade path not found: {start_path}")
    # Only an existing file moves the search up to its folder
    search_dir = start_path if start_path.is_dir() else start_path.parent

    search_dir = search_dir.resolve()
    logger.verbose("UPGRADE", f"Searching for {SIDECAR_FILENAME} in {search_dir}")

    found = _search(search_dir, set())
    if found is None:
        logger.verbose("UPGRADE", f"No {SIDECAR_FILENAME} found in {search_dir}")
    else:
        logger.verbose("UPGRADE", f"Found app resources in {found}")
    return found

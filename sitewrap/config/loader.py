"""
Options file loading for sitewrap.

Teams that wrap many sites keep shared defaults (window size, internal URL
patterns, packaging flags, ...) in a YAML file and pass it with
``--config``. The file is a flat mapping of option names to values:

    # defaults.yaml
    width: 1280
    height: 800
    internalUrls: ".*?\\.example\\.com.*?"
    single_instance: true

Keys may be written in camelCase (as in sitewrap.json) or snake_case.

Layering
--------
The options file is the weakest layer of the resolution pipeline:

    options file  <  CLI options  <  recovered app (upgrade)  <  explicit overrides

Path Resolution
---------------
Relative paths in the file are resolved against the FILE's directory, so a
defaults file can sit next to its icons and injected scripts. Currently
resolved fields:
  - icon
  - bookmarks_menu
  - inject (each entry)

Error Handling
--------------
- ConfigError: file missing, YAML parse error, empty file, non-mapping top
  level, unknown option names
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from pathlib import Path
    >>> from sitewrap.config import load_options_file
    >>> fragment = load_options_file(Path("defaults.yaml"))
    >>> fragment["width"]
    1280
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from sitewrap.exceptions import ConfigError
from sitewrap.options.model import OptionsFragment, is_option_field, to_snake_case

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Load a YAML file and return the parsed Python object.

    Raises:
        ConfigError: When the file does not exist, is not valid YAML, or is
            empty.
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


# -------------------------------
# Path resolution
# -------------------------------

_PATH_FIELDS = ("icon", "bookmarks_menu")


def _resolve_path(raw_path: str, base_dir: Path) -> str:
    p = Path(raw_path).expanduser()
    if p.is_absolute():
        return str(p)
    return str((base_dir / p).resolve())


def _resolve_known_paths(values: dict[str, Any], base_dir: Path) -> None:
    """Resolve relative path fields against base_dir. Modifies values in place."""
    for name in _PATH_FIELDS:
        raw_path = values.get(name)
        if isinstance(raw_path, str) and raw_path:
            values[name] = _resolve_path(raw_path, base_dir)

    inject = values.get("inject")
    if isinstance(inject, str):
        inject = [inject]
    if isinstance(inject, list):
        values["inject"] = [
            _resolve_path(item, base_dir) if isinstance(item, str) else item
            for item in inject
        ]


# -------------------------------
# Public API
# -------------------------------


def load_options_file(path: Path) -> OptionsFragment:
    """Load an options YAML file into a fragment.

    Args:
        path: Path to the YAML file.

    Returns:
        Fragment with every option set in the file.

    Raises:
        ConfigError: On a missing, empty or unparsable file, a top level that
            is not a mapping, or an unknown option name.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    path = Path(path).expanduser().resolve()
    logger.verbose("CONFIG", f"Loading options file: {path}")

    data = _load_yaml_file(path)
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {path}")

    values: dict[str, Any] = {}
    unknown: list[str] = []
    for key, value in data.items():
        name = to_snake_case(str(key))
        if is_option_field(name):
            values[name] = value
        else:
            unknown.append(str(key))
    if unknown:
        raise ConfigError(f"Unknown option(s) in {path}: {', '.join(sorted(unknown))}")

    _resolve_known_paths(values, path.parent)
    logger.verbose("CONFIG", f"Options file set {len(values)} option(s)")
    logger.debug("CONFIG", f"Options from {path.name}: {values}")
    return OptionsFragment(values)

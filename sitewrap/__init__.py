"""
sitewrap - wrap a website into a desktop app

A Python-based CLI tool and library that prepares Electron app wrappers for
websites, and upgrades previously generated wrappers without losing their
identity (and with it the user's cookies, logins and settings).

sitewrap provides:
  - A flat, validated options model with camelCase sidecar serialization
  - Recovery of a generated app's options from its sidecar file,
    Info.plist, executable and directory conventions
  - Deterministic "last present value wins" option merging
  - A frozen identity slug (name + URL hash) for the app's data directory
  - YAML options files for shared defaults
  - User-agent inference from the Electron version

Quick Start
-----------
Show what an existing app was built with:

    $ sitewrap inspect ~/Apps/Example-linux-x64

Compute an app's identity slug:

    $ sitewrap slug "Example" https://example.com/

For full CLI documentation:

    $ sitewrap --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level option resolution.
naming : module
    Identity slug (frozen contract).
options : package
    Options model, merging and user-agent resolution.
upgrade : package
    Locating and reading previously generated apps.
config : package
    YAML options files.
build : package
    Stamping an app template with its options.

Public API
----------
    from sitewrap.core import resolve_app_options
    from sitewrap.upgrade import find_upgrade_app
    from sitewrap.options import OptionsFragment, merge_fragments
    from sitewrap.naming import normalize_app_name
    from sitewrap.build import prepare_app

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "sitewrap - wrap websites into desktop apps and upgrade them in place"

# Re-export commonly used functions for convenience
from sitewrap.build import prepare_app
from sitewrap.core import resolve_app_options
from sitewrap.exceptions import (
    ConfigError,
    MalformedSourceError,
    PackagingError,
    SitewrapError,
)
from sitewrap.naming import normalize_app_name
from sitewrap.options import OptionsFragment, merge_fragments
from sitewrap.results import PrepareResult, UpgradeAppInfo
from sitewrap.upgrade import find_upgrade_app

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "ConfigError",
    "MalformedSourceError",
    "OptionsFragment",
    "PackagingError",
    "PrepareResult",
    "SitewrapError",
    "UpgradeAppInfo",
    "find_upgrade_app",
    "merge_fragments",
    "normalize_app_name",
    "prepare_app",
    "resolve_app_options",
]

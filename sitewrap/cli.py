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

"""Command-line interface for sitewrap.

Commands:

    inspect: Show the options a previously generated app was built with
    slug: Print the identity slug for an app name and URL
    resolve: Resolve the options for a new build or an upgrade
    prepare: Resolve options and stamp a copied app template with them

Example:
    Inspect an existing app:
        ```bash
        $ sitewrap inspect ~/Apps/Example-linux-x64
        ```

    Resolve options for an upgrade, changing only the width:
        ```bash
        $ sitewrap resolve --upgrade ~/Apps/Example-linux-x64 --width 1440
        ```

    Prepare a staged app template:
        ```bash
        $ sitewrap prepare staging/app https://example.com/ --name Example
        ```

Exit Codes:

- 0: Success
- 1: Error (invalid options, no app to upgrade, corrupt app files)

Note:
    The CLI uses argparse for command parsing. Each command has its own
    handler function (cmd_<command>). Option flags default to None so that
    only flags the user actually typed become explicit overrides.
    Verbose mode shows full tracebacks on errors for debugging.
"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import json
from pathlib import Path
import sys
from typing import Any

from sitewrap.build import prepare_app
from sitewrap.core import resolve_app_options
from sitewrap.exceptions import SitewrapError
from sitewrap.logging import get_logger, set_global_logger
from sitewrap.naming import normalize_app_name
from sitewrap.options.model import OptionsFragment
from sitewrap.upgrade import find_upgrade_app

# (flag, field, argparse kwargs) for options settable from the command line
_OPTION_FLAGS: tuple[tuple[str, str, dict[str, Any]], ...] = (
    ("--name", "name", {"help": "App display name"}),
    ("--out", "out", {"help": "Output directory for the built app"}),
    ("--icon", "icon", {"help": "Path to the app icon"}),
    (
        "--inject",
        "inject",
        {"action": "append", "help": "CSS/JS file to inject (repeatable)"},
    ),
    ("--app-version", "app_version", {"help": "App version"}),
    ("--app-copyright", "app_copyright", {"help": "Copyright string"}),
    ("--user-agent", "user_agent", {"help": "User agent to send"}),
    ("--electron-version", "electron_version", {"help": "Electron version"}),
    ("--platform", "platform", {"help": "Target platform (darwin, mas, win32, linux)"}),
    ("--arch", "arch", {"help": "Target architecture"}),
    ("--width", "width", {"type": int, "help": "Window width"}),
    ("--height", "height", {"type": int, "help": "Window height"}),
    ("--internal-urls", "internal_urls", {"help": "Regex of URLs kept in the app"}),
    (
        "--single-instance",
        "single_instance",
        {
            "action": argparse.BooleanOptionalAction,
            "help": "Allow only one running instance",
        },
    ),
    (
        "--darwin-dark-mode-support",
        "darwin_dark_mode_support",
        {
            "action": argparse.BooleanOptionalAction,
            "help": "Follow the macOS dark mode setting",
        },
    ),
)


def _package_version() -> str:
    try:
        return version("sitewrap")
    except PackageNotFoundError:
        from sitewrap import __version__

        return __version__


def _configure_logger(args: argparse.Namespace, machine_output: bool = False) -> None:
    # Keep stdout clean for JSON output
    stream = sys.stderr if machine_output else None
    debug = getattr(args, "debug", False)
    set_global_logger(get_logger(verbose=args.verbose, debug=debug, stream=stream))


def _report_error(err: Exception, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if args.verbose or getattr(args, "debug", False):
        import traceback

        traceback.print_exc()
    return 1


def _overrides_from_args(args: argparse.Namespace) -> OptionsFragment:
    """Collect the option flags the user actually passed."""
    values = {}
    for _flag, field, _kwargs in _OPTION_FLAGS:
        value = getattr(args, field)
        if value is not None:
            values[field] = value
    return OptionsFragment(values)


def _raw_from_args(
    args: argparse.Namespace, overrides: OptionsFragment
) -> OptionsFragment:
    if args.target_url:
        return overrides.with_fields(target_url=args.target_url)
    return overrides


def _resolve_from_args(args: argparse.Namespace) -> OptionsFragment:
    overrides = _overrides_from_args(args)
    return resolve_app_options(
        _raw_from_args(args, overrides),
        overrides=overrides,
        defaults_file=Path(args.config) if args.config else None,
        upgrade_from=args.upgrade,
        infer_user_agent=not args.no_infer_user_agent,
    )


def cmd_inspect(args: argparse.Namespace) -> int:
    """Handler for 'sitewrap inspect' command.

    Locates a previously generated app below the given path and prints the
    options recovered from it.

    Args:
        args: Parsed command-line arguments containing the app path, the
            json flag and verbosity flags.

    Returns:
        Exit code (0 if an app was found, 1 otherwise).
    """
    _configure_logger(args, machine_output=args.json)

    try:
        old_app = find_upgrade_app(args.path)
    except (SitewrapError, OSError) as err:
        return _report_error(err, args)

    if old_app is None:
        print(f"No previously generated app found in {args.path}")
        return 1

    if args.json:
        payload = {
            "app_resources_dir": str(old_app.app_resources_dir),
            "options": old_app.options.to_dict(),
        }
        print(json.dumps(payload, indent=2))
        return 0

    options = old_app.options
    print("=" * 70)
    print("APP OPTIONS")
    print("=" * 70)
    print(f"Resources Dir:   {old_app.app_resources_dir}")
    if options.get("name") and options.get("target_url"):
        slug = normalize_app_name(str(options["name"]), str(options["target_url"]))
        print(f"Identity Slug:   {slug}")
    print("-" * 70)
    for name, value in options.items():
        print(f"{name:<30} {json.dumps(value)}")
    print("=" * 70)
    return 0


def cmd_slug(args: argparse.Namespace) -> int:
    """Handler for 'sitewrap slug' command."""
    print(normalize_app_name(args.name, args.url))
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handler for 'sitewrap resolve' command.

    Resolves the options a build would use and prints them as JSON.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    _configure_logger(args, machine_output=True)

    try:
        options = _resolve_from_args(args)
    except (SitewrapError, OSError) as err:
        return _report_error(err, args)

    print(json.dumps(options.to_dict(), indent=2))
    return 0


def cmd_prepare(args: argparse.Namespace) -> int:
    """Handler for 'sitewrap prepare' command.

    Resolves options, then writes sitewrap.json and the package.json name
    into a staged copy of the app template.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    _configure_logger(args)
    app_dir = Path(args.app_dir).resolve()

    try:
        options = _resolve_from_args(args)
        result = prepare_app(app_dir, options)
    except (SitewrapError, OSError) as err:
        return _report_error(err, args)

    print("=" * 70)
    print("PREPARE RESULTS")
    print("=" * 70)
    print(f"App Directory:   {result.app_dir}")
    print(f"App Config:      {result.config_path}")
    print(f"Package Name:    {result.package_name}")
    print(f"Status:          {result.status}")
    print("=" * 70)
    print()
    print("[SUCCESS] App prepared successfully!")
    return 0


def _add_verbosity(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def _add_option_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--upgrade",
        metavar="PATH",
        default=None,
        help="Path of a previously generated app to upgrade",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        default=None,
        help="YAML file with default options",
    )
    parser.add_argument(
        "--no-infer-user-agent",
        action="store_true",
        help="Do not look up a Chrome user agent for the Electron version",
    )
    for flag, field, kwargs in _OPTION_FLAGS:
        parser.add_argument(flag, dest=field, default=None, **kwargs)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the sitewrap CLI."""
    parser = argparse.ArgumentParser(
        prog="sitewrap",
        description="sitewrap - wrap websites into desktop apps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"sitewrap {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'inspect' command
    parser_inspect = subparsers.add_parser(
        "inspect",
        help="Show the options of a previously generated app",
        description="Find a generated app at or below PATH and print the options recovered from it.",
    )
    parser_inspect.add_argument("path", help="App folder, executable, or any ancestor")
    parser_inspect.add_argument("--json", action="store_true", help="Print JSON")
    _add_verbosity(parser_inspect)
    parser_inspect.set_defaults(func=cmd_inspect)

    # 'slug' command
    parser_slug = subparsers.add_parser(
        "slug",
        help="Print the identity slug for an app",
        description="Print the name used for the app's data directory.",
    )
    parser_slug.add_argument("name", help="App display name")
    parser_slug.add_argument("url", help="App target URL")
    parser_slug.set_defaults(func=cmd_slug, verbose=False)

    # 'resolve' command
    parser_resolve = subparsers.add_parser(
        "resolve",
        help="Resolve the options for a build or an upgrade",
        description="Merge options file, flags and (when upgrading) the previous app, then print the result.",
    )
    parser_resolve.add_argument("target_url", nargs="?", help="URL of the site to wrap")
    _add_option_flags(parser_resolve)
    _add_verbosity(parser_resolve)
    parser_resolve.set_defaults(func=cmd_resolve)

    # 'prepare' command
    parser_prepare = subparsers.add_parser(
        "prepare",
        help="Stamp a staged app template with its options",
        description="Resolve options, then write sitewrap.json and the package.json name into APP_DIR.",
    )
    parser_prepare.add_argument("app_dir", help="Staged copy of the app template")
    parser_prepare.add_argument("target_url", nargs="?", help="URL of the site to wrap")
    _add_option_flags(parser_prepare)
    _add_verbosity(parser_prepare)
    parser_prepare.set_defaults(func=cmd_prepare)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the sitewrap CLI.

    This function is registered as the 'sitewrap' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

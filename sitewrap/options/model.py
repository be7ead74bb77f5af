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

"""Options model for sitewrap.

An app is generated from a flat set of named options (target URL, name,
window geometry, packaging flags, ...). Options arrive from several places:
an options YAML file, CLI flags, the sidecar file of a previously generated
app, the app's Info.plist or executable, and plain directory conventions.
Each source yields an OptionsFragment.

Fragment Semantics:
    - A field is either present or absent. Absent means "this source has no
      opinion"; it is NOT the same as False, None, 0 or an empty list.
    - A present field may hold any JSON-compatible value, including None.
    - Values are replaced wholesale when fragments are merged (see
      sitewrap.options.merge); nested values are never merged.
    - Iteration order is always the canonical OPTION_FIELDS order, so two
      fragments with the same content serialize identically no matter how
      they were built.

Key Naming:
    Python code uses snake_case field names. The sidecar file (sitewrap.json)
    uses camelCase keys, as does the Electron side of the app. to_camel_case
    and to_snake_case convert between the two.

Example:
    Build and inspect a fragment:

        from sitewrap.options import OptionsFragment

        fragment = OptionsFragment({"name": "Example", "width": 1280})
        fragment.get("name")          # "Example"
        "height" in fragment          # False (absent)
        fragment.to_sidecar()         # {"name": "Example", "width": 1280}
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
import re
from types import MappingProxyType
from typing import Any

from sitewrap.exceptions import ConfigError

OPTION_FIELDS: tuple[str, ...] = (
    "accessibility_prompt",
    "always_on_top",
    "app_bundle_id",
    "app_category_type",
    "app_copyright",
    "app_version",
    "arch",
    "asar",
    "background_color",
    "basic_auth_password",
    "basic_auth_username",
    "block_external_urls",
    "bookmarks_menu",
    "bounce",
    "browserwindow_options",
    "build_date",
    "build_version",
    "clear_cache",
    "counter",
    "crash_reporter",
    "darwin_dark_mode_support",
    "deref_symlinks",
    "disable_context_menu",
    "disable_dev_tools",
    "disable_gpu",
    "disable_old_build_warning",
    "disk_cache_size",
    "download",
    "electron_version",
    "electron_version_used",
    "enable_es3_apis",
    "executable_name",
    "fast_quit",
    "file_download_options",
    "flash_plugin_dir",
    "full_screen",
    "global_shortcuts",
    "height",
    "helper_bundle_id",
    "hide_window_frame",
    "icon",
    "ignore_certificate",
    "ignore_gpu_blacklist",
    "inject",
    "insecure",
    "internal_urls",
    "is_upgrade",
    "junk",
    "lang",
    "max_height",
    "max_width",
    "maximize",
    "min_height",
    "min_width",
    "name",
    "old_build_warning_text",
    "osx_notarize",
    "osx_sign",
    "out",
    "overwrite",
    "platform",
    "portable",
    "process_envs",
    "protocols",
    "proxy_rules",
    "prune",
    "quiet",
    "show_menu_bar",
    "single_instance",
    "sitewrap_version",
    "target_url",
    "title_bar_style",
    "tray",
    "upgrade",
    "usage_description",
    "user_agent",
    "user_agent_overriden",
    "version_string",
    "widevine",
    "width",
    "win32metadata",
    "x",
    "y",
    "zoom",
)

_FIELD_ORDER: dict[str, int] = {name: i for i, name in enumerate(OPTION_FIELDS)}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(key: str) -> str:
    """Convert a camelCase option key to snake_case.

    Keys that are already snake_case are returned unchanged.

    Example:
        >>> to_snake_case("darwinDarkModeSupport")
        'darwin_dark_mode_support'
        >>> to_snake_case("enableEs3Apis")
        'enable_es3_apis'
    """
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def to_camel_case(name: str) -> str:
    """Convert a snake_case field name to the camelCase sidecar key.

    Example:
        >>> to_camel_case("app_copyright")
        'appCopyright'
        >>> to_camel_case("win32metadata")
        'win32metadata'
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def is_option_field(name: str) -> bool:
    """Return True if name is one of the known snake_case option fields."""
    return name in _FIELD_ORDER


class OptionsFragment(Mapping[str, Any]):
    """Partial, read-only set of app options produced by a single source.

    Behaves as a Mapping of present fields to values. Constructing a
    fragment validates field names and fixes the canonical order; the
    fragment cannot be modified afterwards (use with_fields / without to
    derive new ones).

    Args:
        data: Present fields and their values (snake_case names).
        **fields: Additional present fields, applied after data.

    Raises:
        ConfigError: If a name outside OPTION_FIELDS is given.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None, **fields: Any) -> None:
        merged = {**(data or {}), **fields}
        unknown = sorted(k for k in merged if k not in _FIELD_ORDER)
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")
        names = sorted(merged, key=_FIELD_ORDER.__getitem__)
        self._data: Mapping[str, Any] = MappingProxyType(
            {k: merged[k] for k in names}
        )

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._data) == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"OptionsFragment({dict(self._data)!r})"

    @classmethod
    def from_sidecar(cls, data: Mapping[str, Any]) -> OptionsFragment:
        """Build a fragment from a camelCase sidecar mapping.

        Keys that do not name a known option are dropped, so sidecar files
        written by newer or older releases still load.

        Args:
            data: Parsed JSON object from a sitewrap.json file.

        Returns:
            Fragment holding every recognized key that is present in data.
        """
        values = {}
        for key, value in data.items():
            name = to_snake_case(key)
            if name in _FIELD_ORDER:
                values[name] = value
        return cls(values)

    def with_fields(self, **fields: Any) -> OptionsFragment:
        """Return a copy with the given fields set (present)."""
        return OptionsFragment(self._data, **fields)

    def without(self, *names: str) -> OptionsFragment:
        """Return a copy with the given fields removed (absent)."""
        kept = {k: v for k, v in self._data.items() if k not in names}
        return OptionsFragment(kept)

    def to_dict(self) -> dict[str, Any]:
        """Return the present fields as a plain snake_case dict."""
        return dict(self._data)

    def to_sidecar(self) -> dict[str, Any]:
        """Return the present fields as a camelCase dict for sitewrap.json."""
        return {to_camel_case(k): v for k, v in self._data.items()}

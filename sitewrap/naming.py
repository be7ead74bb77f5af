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

"""App identity slug for sitewrap.

The slug is written to the generated app's package.json ``name`` field.
Electron derives the app's user-data directory (cookies, local storage,
settings) from that name, so an upgraded app finds its old data only if it
gets exactly the same slug as the original build.

Format:
    <normalized-name>-sitewrap-<first 6 hex chars of md5(url)>

Normalization:
    1. Lower-case the name.
    2. Remove every ``,``, ``:`` and ``.``.
    3. Replace each run of whitespace and/or underscores with one ``-``.

Warning:
    This is a frozen contract. Changing the hash function, the prefix
    length, the separator or the normalization rules gives every existing
    app a new data directory on its next upgrade, logging users out of all
    of them.

Example:
    >>> normalize_app_name("My App", "https://example.com/")
    'my-app-sitewrap-182cce'
"""

from __future__ import annotations

import hashlib
import re

SLUG_SEPARATOR = "-sitewrap-"
HASH_PREFIX_LENGTH = 6

_STRIPPED_CHARS = re.compile(r"[,:.]")
_SEPARATOR_RUNS = re.compile(r"[\s_]+")


def url_hash_prefix(url: str) -> str:
    """Return the first six hex characters of the URL's MD5 digest.

    MD5 is used for determinism only, not security.
    """
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()
    return digest[:HASH_PREFIX_LENGTH]


def normalize_name(app_name: str) -> str:
    """Apply the slug normalization rules to a display name."""
    normalized = _STRIPPED_CHARS.sub("", app_name.lower())
    return _SEPARATOR_RUNS.sub("-", normalized)


def normalize_app_name(app_name: str, url: str) -> str:
    """Build the identity slug for an app.

    Args:
        app_name: Human-readable app name (e.g., "Google Calendar").
        url: The app's target URL, exactly as stored in its options.

    Returns:
        The slug, e.g. "google-calendar-sitewrap-3526be" for
            "https://calendar.google.com".
    """
    return f"{normalize_name(app_name)}{SLUG_SEPARATOR}{url_hash_prefix(url)}"

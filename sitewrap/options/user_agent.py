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

"""User-agent resolution for generated apps.

Some sites refuse or degrade Electron's default user agent, so apps are
given the user agent of the plain Chrome release that their Electron version
embeds.

Resolution:
    1. An explicit ``user_agent`` option is used as-is (no network).
    2. Without ``electron_version`` nothing is inferred; Electron's own
       default applies.
    3. Otherwise the Electron releases feed is queried for the bundled
       Chrome version and a platform-specific Chrome user agent is built.

Network Behavior:
    The feed is fetched with a retrying requests.Session (transient 429/5xx
    are retried with exponential backoff). Any failure, an unparsable body
    or an Electron version missing from the feed falls back to
    DEFAULT_CHROME_VERSION with a warning; resolution never fails a build.

Example:
    from sitewrap.options import OptionsFragment, resolve_user_agent

    options = OptionsFragment(electron_version="25.9.8", platform="linux")
    resolve_user_agent(options)
    # 'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko)
    #  Chrome/114.0.5735.289 Safari/537.36'
"""

from __future__ import annotations

import sys
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .model import OptionsFragment

ELECTRON_RELEASES_URL = "https://releases.electronjs.org/releases.json"
DEFAULT_CHROME_VERSION = "114.0.5735.289"
REQUEST_TIMEOUT = 10

_PLATFORM_TOKENS = {
    "darwin": "Macintosh; Intel Mac OS X 10_15_7",
    "mas": "Macintosh; Intel Mac OS X 10_15_7",
    "win32": "Windows NT 10.0; Win64; x64",
    "linux": "X11; Linux x86_64",
}


def make_session() -> requests.Session:
    """Create a requests.Session with retry/backoff defaults.

    - Retries on common transient status codes.
    - Applies exponential backoff.
    - Identifies sitewrap in the User-Agent header.
    """
    s = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    s.headers.update({"User-Agent": "sitewrap (+https://github.com/RogerCibrian/sitewrap)"})
    s.mount("http://", HTTPAdapter(max_retries=retries))
    s.mount("https://", HTTPAdapter(max_retries=retries))
    return s


def _current_platform() -> str:
    if sys.platform.startswith("win"):
        return "win32"
    if sys.platform == "darwin":
        return "darwin"
    return "linux"


def format_chrome_user_agent(chrome_version: str, platform: str | None) -> str:
    """Build a desktop Chrome user-agent string.

    Args:
        chrome_version: Full Chrome version, e.g. "114.0.5735.289".
        platform: Target platform ("darwin", "mas", "win32", "linux").
            Unknown values and None use the Linux token.
    """
    token = _PLATFORM_TOKENS.get(platform or "", _PLATFORM_TOKENS["linux"])
    return (
        f"Mozilla/5.0 ({token}) AppleWebKit/537.36 (KHTML, like Gecko) "
        f"Chrome/{chrome_version} Safari/537.36"
    )


def _find_chrome_version(releases: Any, electron_version: str) -> str | None:
    if not isinstance(releases, list):
        return None
    for release in releases:
        if not isinstance(release, dict):
            continue
        if release.get("version") == electron_version:
            chrome = release.get("chrome")
            return chrome if isinstance(chrome, str) and chrome else None
    return None


def infer_user_agent(
    electron_version: str,
    platform: str | None = None,
    *,
    session: requests.Session | None = None,
    url: str = ELECTRON_RELEASES_URL,
) -> str:
    """Infer a Chrome user agent for an Electron version.

    Args:
        electron_version: Electron version, with or without a leading "v".
        platform: Target platform. Default is the current platform.
        session: Session to use. Default is make_session().
        url: Releases feed URL.

    Returns:
        Chrome user-agent string. Falls back to DEFAULT_CHROME_VERSION when
            the lookup fails.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    version = electron_version.lstrip("v")
    target_platform = platform or _current_platform()
    http = session or make_session()

    logger.verbose("USERAGENT", f"Looking up Chrome version for Electron {version}")
    chrome_version: str | None = None
    try:
        response = http.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        chrome_version = _find_chrome_version(response.json(), version)
    except requests.exceptions.RequestException as err:
        logger.warning("USERAGENT", f"Could not fetch Electron releases: {err}")
    except ValueError as err:
        logger.warning("USERAGENT", f"Invalid JSON from {url}: {err}")

    if chrome_version is None:
        logger.warning(
            "USERAGENT",
            f"No Chrome version known for Electron {version}; "
            f"using {DEFAULT_CHROME_VERSION}",
        )
        chrome_version = DEFAULT_CHROME_VERSION
    else:
        logger.verbose("USERAGENT", f"Electron {version} bundles Chrome {chrome_version}")

    return format_chrome_user_agent(chrome_version, target_platform)


def resolve_user_agent(
    options: OptionsFragment, *, session: requests.Session | None = None
) -> str | None:
    """Return the user agent the app should use.

    Args:
        options: Resolved app options.
        session: Session passed to infer_user_agent().

    Returns:
        The explicit user_agent option, an inferred Chrome user agent, or
            None when there is no electron_version to infer from.
    """
    explicit = options.get("user_agent")
    if explicit:
        return explicit
    electron_version = options.get("electron_version")
    if not electron_version:
        return None
    return infer_user_agent(
        str(electron_version), options.get("platform"), session=session
    )

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

"""Core orchestration for sitewrap.

This module turns the inputs of one invocation into the final app options
handed to the build pipeline.

Resolution Steps:
    1. Load the options file (if any) and merge the raw options on top.
    2. If upgrading, find the previous app and merge its recovered options
       over the raw options; explicit overrides go on top of both.
    3. Otherwise merge the explicit overrides over the raw options.
    4. Fill in the user agent (explicit, or inferred from the Electron
       version).
    5. Check that a target URL is known.

Raw vs. Override Options:
    "Raw" options are everything the invocation would use for a fresh build,
    defaults included. "Overrides" are only the options the user typed on
    this invocation. On upgrade the recovered app beats raw options (so
    defaults never clobber the old app's settings) but loses to overrides
    (so the user can still change anything).

Example:
    from pathlib import Path
    from sitewrap.core import resolve_app_options
    from sitewrap.options import OptionsFragment

    options = resolve_app_options(
        OptionsFragment(target_url="dist/Example-linux-x64"),
        overrides=OptionsFragment(width=1440),
        upgrade_from=Path("dist/Example-linux-x64"),
    )
    print(options["target_url"], options["width"])
"""

from __future__ import annotations

from pathlib import Path

import requests

from sitewrap.config import load_options_file
from sitewrap.exceptions import ConfigError
from sitewrap.options.merge import merge_fragments, use_old_app_options
from sitewrap.options.model import OptionsFragment
from sitewrap.options.user_agent import resolve_user_agent
from sitewrap.upgrade import find_upgrade_app


def resolve_app_options(
    raw: OptionsFragment,
    *,
    overrides: OptionsFragment | None = None,
    defaults_file: Path | None = None,
    upgrade_from: str | Path | None = None,
    infer_user_agent: bool = True,
    session: requests.Session | None = None,
) -> OptionsFragment:
    """Resolve the final options for generating (or regenerating) an app.

    Args:
        raw: Options of this invocation, defaults included.
        overrides: Options the user explicitly set on this invocation.
        defaults_file: Optional YAML options file, weaker than raw.
        upgrade_from: Path of a previously generated app to upgrade.
        infer_user_agent: If True, fill user_agent from the Electron
            version when it is not set. Default is True.
        session: HTTP session for user-agent inference.

    Returns:
        The resolved options.

    Raises:
        ConfigError: If the options file is invalid, upgrade_from holds no
            generated app, or no target URL is known.
        MalformedSourceError: If the previous app's sidecar or Info.plist is
            corrupt.
        OSError: On filesystem errors while reading the previous app.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    total = 3 if upgrade_from is not None else 2
    step = 1

    base = raw
    if defaults_file is not None:
        base = merge_fragments([load_options_file(defaults_file), raw])

    if upgrade_from is not None:
        logger.step(step, total, f"Looking for the app to upgrade in {upgrade_from}")
        step += 1
        old_app = find_upgrade_app(upgrade_from)
        if old_app is None:
            raise ConfigError(
                f"Could not find a previously generated app in {upgrade_from!s}"
            )
        logger.verbose("CORE", f"Upgrading app found in {old_app.app_resources_dir}")
        options = use_old_app_options(base, old_app, overrides).with_fields(
            upgrade=True
        )
    else:
        options = merge_fragments([base, overrides])

    logger.step(step, total, "Resolving user agent")
    step += 1
    if infer_user_agent:
        user_agent = resolve_user_agent(options, session=session)
        if user_agent is not None and user_agent != options.get("user_agent"):
            options = options.with_fields(user_agent=user_agent)

    logger.step(step, total, "Checking options")
    if not options.get("target_url"):
        raise ConfigError("No target URL given. Pass the URL of the site to wrap.")

    logger.debug("CORE", f"Resolved options: {options.to_dict()}")
    return options

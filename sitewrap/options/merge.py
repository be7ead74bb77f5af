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

"""Options merging for sitewrap.

Fragments are combined with a left fold using "last present value wins"
semantics:

  - A field present in a later fragment replaces the accumulated value.
  - A field absent in a later fragment leaves the accumulated value alone.
  - Values are replaced wholesale. Lists and dicts (e.g. inject,
    win32metadata) are NOT merged element-wise.

The merge is shallow: each option is an opaque value owned by whichever
source spoke last.

Precedence for an upgrade, earliest (weakest) first:

  1. Raw options of the new invocation (after normalize_raw_options)
  2. Options recovered from the previously generated app
  3. Explicit overrides the user passed on the new invocation

Example:
    from sitewrap.options import OptionsFragment
    from sitewrap.options.merge import merge_fragments

    merged = merge_fragments([
        OptionsFragment({"name": "Old", "width": 800}),
        OptionsFragment({"name": "New"}),
    ])
    merged.to_dict()  # {"name": "New", "width": 800}
"""

from __future__ import annotations

from collections.abc import Iterable
import os
from typing import TYPE_CHECKING, Any

from .model import OptionsFragment

if TYPE_CHECKING:
    from sitewrap.results import UpgradeAppInfo


def merge_fragments(fragments: Iterable[OptionsFragment | None]) -> OptionsFragment:
    """Fold fragments left to right, later present fields winning.

    None entries are skipped, which lets callers pass optional fragments
    without filtering them first.

    Args:
        fragments: Fragments in precedence order (weakest first).

    Returns:
        A new fragment. Inputs are not modified.
    """
    merged: dict[str, Any] = {}
    for fragment in fragments:
        if fragment is None:
            continue
        for name, value in fragment.items():
            merged[name] = value
    return OptionsFragment(merged)


def normalize_raw_options(raw: OptionsFragment) -> OptionsFragment:
    """Reinterpret a directory passed as the target URL as the output dir.

    When upgrading, users often run ``sitewrap <path-to-old-app> --upgrade``
    out of habit, so the positional "URL" is really a folder. In that case
    the folder becomes ``out``. ``target_url`` is left as-is; the recovered
    app's own target_url replaces it later in the merge.

    Args:
        raw: Raw options of the current invocation.

    Returns:
        raw unchanged, or a copy with ``out`` set to the directory.
    """
    target_url = raw.get("target_url")
    if isinstance(target_url, str) and target_url and os.path.isdir(target_url):
        return raw.with_fields(out=target_url)
    return raw


def use_old_app_options(
    raw: OptionsFragment,
    old_app: UpgradeAppInfo,
    overrides: OptionsFragment | None = None,
) -> OptionsFragment:
    """Combine the current invocation's options with a recovered app.

    Args:
        raw: Raw options of the current invocation (defaults included).
        old_app: Result of find_upgrade_app() for the app being upgraded.
        overrides: Options the user explicitly set on this invocation; these
            win over everything recovered from the old app.

    Returns:
        The merged options.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    normalized = normalize_raw_options(raw)
    if "out" in normalized and "out" not in raw:
        logger.verbose("OPTIONS", f"Using {normalized['out']} as output directory")

    merged = merge_fragments([normalized, old_app.options, overrides])
    logger.debug(
        "OPTIONS",
        f"Merged {len(merged)} option(s) from current invocation and "
        f"{old_app.app_resources_dir}",
    )
    return merged

"""
App preparation for sitewrap.

This package stamps a copied Electron app template with the resolved
options before it is handed to the packaging toolchain.

Public API:

prepare_app : function
    Write sitewrap.json and set the package.json name to the identity slug.
pick_app_args : function
    Select the options persisted in sitewrap.json.

Example:
    from pathlib import Path
    from sitewrap.build import prepare_app

    result = prepare_app(Path("staging/app"), options)
    print(f"Config: {result.config_path}")
"""

from .prepare import pick_app_args, prepare_app

__all__ = ["pick_app_args", "prepare_app"]

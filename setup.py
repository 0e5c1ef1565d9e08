"""
Build script for razorfmt.

Project metadata lives in pyproject.toml; this file only decides whether the
scanning modules are compiled with mypyc.

    pip install .                          # pure Python
    RAZORFMT_USE_MYPYC=1 pip install .     # compiled
"""

import os
import sys
from pathlib import Path

from setuptools import setup

USE_MYPYC = os.environ.get("RAZORFMT_USE_MYPYC", "0") == "1"

# Every character of a document passes through these; formatter.py stays interpreted
MYPYC_MODULES = [
    "src/razorfmt/scanner.py",
    "src/razorfmt/attributes.py",
    "src/razorfmt/directives.py",
]


def mypyc_extensions() -> list:
    """Return the mypyc extension modules, or exit when mypyc is unavailable."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        sys.exit("ERROR: RAZORFMT_USE_MYPYC=1 needs mypyc: pip install razorfmt[mypyc]")

    missing = [path for path in MYPYC_MODULES if not Path(path).is_file()]
    if missing:
        sys.exit(f"ERROR: modules not found: {', '.join(missing)}")

    print(f"Compiling {len(MYPYC_MODULES)} modules with mypyc:")
    for path in MYPYC_MODULES:
        print(f"  {path}")

    return mypycify(
        MYPYC_MODULES,
        opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"),
        debug_level=os.environ.get("MYPYC_DEBUG_LEVEL", "0"),
        separate=False,
        multi_file=False,
    )


if __name__ == "__main__":
    setup(ext_modules=mypyc_extensions() if USE_MYPYC else [])

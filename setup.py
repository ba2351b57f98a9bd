"""
Build script for truncatehtml with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    python -m build

    # Compiled with mypyc
    TRUNCATEHTML_USE_MYPYC=1 pip install .
"""

import os

from setuptools import find_packages, setup

# Determine if we should use mypyc
USE_MYPYC = os.environ.get("TRUNCATEHTML_USE_MYPYC", "0") == "1"

# Hot path modules: the scan loop and the token sink.
# Note: __main__.py is excluded, argparse entry points gain nothing from compilation
MYPYC_MODULES = [
    "src/truncatehtml/tokenizer.py",
    "src/truncatehtml/truncator.py",
]


def _mypyc_extensions():
    # Raises ImportError without the "mypyc" extra installed.
    from mypyc.build import mypycify

    return mypycify(MYPYC_MODULES, opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"))


if __name__ == "__main__":
    ext_modules = []

    if USE_MYPYC:
        ext_modules = _mypyc_extensions()

    setup(
        name="truncatehtml",
        version="0.1.0",
        description="Truncate HTML to a number of visible characters while keeping it well-formed",
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages("src"),
        extras_require={
            "mypyc": ["mypy"],
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": ["truncatehtml = truncatehtml.__main__:cli"],
        },
        ext_modules=ext_modules,
    )

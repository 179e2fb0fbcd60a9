"""Checkout shim: resolve ``marginalia.*`` submodules from ``src/marginalia``.

Lets ``python -m marginalia.cli.parse_clippings`` and the test suite run
without installing the distribution first.
"""

from __future__ import annotations

from pathlib import Path

_SRC_PACKAGE = Path(__file__).resolve().parent.parent / "src" / "marginalia"

if _SRC_PACKAGE.is_dir() and str(_SRC_PACKAGE) not in __path__:
    __path__.append(str(_SRC_PACKAGE))

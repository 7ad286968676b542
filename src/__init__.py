"""Top-level src package for the take-home service.

Expose a lightweight `core` attribute by importing the minimal
`src.core` package so string-based patch targets work in tests
(e.g. "src.core.config.config.os.getenv").
"""

from __future__ import annotations

import importlib
from types import ModuleType

core: ModuleType = importlib.import_module("src.core")

__all__: list[str] = ["core"]

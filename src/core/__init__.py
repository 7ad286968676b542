"""src.core package (lightweight).

This file avoids importing submodules at package import time so that the
build tooling in `src.core.image` can run without the service's third-party
dependencies installed. Import submodules explicitly where needed.
"""

from __future__ import annotations

__all__: list[str] = []

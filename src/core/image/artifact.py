"""Single-file executable builder.

Freezes the service entry script with PyInstaller in one-file mode, so the
interpreter, the project and its dependencies end up in one self-extracting
binary and the runtime image needs no Python. PyInstaller works in a scratch
directory next to the output; the binary is moved into place only once the
build has succeeded.
"""

from __future__ import annotations

import argparse
import os
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path

from src.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

SRC_DIR = Path(__file__).resolve().parents[2]
PROJECT_ROOT = SRC_DIR.parent
DEFAULT_ENTRY_SCRIPT = SRC_DIR / "main.py"
DEFAULT_OUTPUT = PROJECT_ROOT / "dist" / "take-home"


class ArtifactError(RuntimeError):
    """Raised when the executable cannot be built."""


def pyinstaller_args(
    entry_script: Path,
    name: str,
    dist_dir: Path,
    work_dir: Path,
    search_paths: Sequence[Path] = (),
) -> list[str]:
    """Command line for a one-file, non-interactive PyInstaller build."""
    args = [
        str(entry_script),
        "--onefile",
        "--name",
        name,
        "--distpath",
        str(dist_dir),
        "--workpath",
        str(work_dir),
        "--specpath",
        str(work_dir),
        "--noconfirm",
        "--clean",
        "--log-level",
        "WARN",
    ]
    for path in search_paths:
        args.extend(["--paths", str(path)])
    return args


def _run_pyinstaller(args: list[str]) -> None:
    import PyInstaller.__main__

    try:
        PyInstaller.__main__.run(args)
    except SystemExit as e:
        # PyInstaller exits on fatal analysis errors
        if e.code not in (None, 0):
            raise ArtifactError(f"PyInstaller failed with exit status {e.code}") from e


def build_executable(
    output: str | Path = DEFAULT_OUTPUT,
    entry_script: str | Path = DEFAULT_ENTRY_SCRIPT,
    search_paths: Sequence[str | Path] | None = None,
) -> Path:
    """Build the one-file executable.

    Args:
        output: Path of the executable to create. Its file name is also the
            program name PyInstaller embeds.
        entry_script: Script run as `__main__` when the executable starts.
        search_paths: Extra import roots for the analysis. Defaults to the
            project root, so `src.*` imports resolve.

    Returns:
        Path of the written executable.

    Raises:
        ArtifactError: If the input is unusable or PyInstaller fails.
    """
    target = Path(output)
    script = Path(entry_script)
    paths = [Path(p) for p in (search_paths if search_paths is not None else [PROJECT_ROOT])]

    if not script.is_file():
        raise ArtifactError(f"Entry script not found: {script}")
    if script.suffix != ".py":
        raise ArtifactError(f"Entry script must be a .py file: {script}")
    if target.is_dir():
        raise ArtifactError(f"Output path is a directory: {target}")

    target.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix=".pyinstaller-", dir=target.parent) as scratch:
        dist_dir = Path(scratch) / "dist"
        work_dir = Path(scratch) / "work"
        _run_pyinstaller(pyinstaller_args(script, target.name, dist_dir, work_dir, paths))

        built = sorted(dist_dir.iterdir()) if dist_dir.is_dir() else []
        if len(built) != 1 or not built[0].is_file():
            raise ArtifactError(
                f"expected one executable from PyInstaller, found {[p.name for p in built]}"
            )
        os.chmod(built[0], 0o755)
        os.replace(built[0], target)

    logger.info("Built %s from %s (%d bytes)", target, script, target.stat().st_size)
    return target


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Freeze the service into one self-contained executable"
    )
    parser.add_argument(
        "--output", default=str(DEFAULT_OUTPUT), help=f"Executable to create (default: {DEFAULT_OUTPUT})"
    )
    parser.add_argument(
        "--entry-script",
        default=str(DEFAULT_ENTRY_SCRIPT),
        help="Script run when the executable starts",
    )
    parser.add_argument(
        "--paths",
        action="append",
        help="Extra import root for the analysis (repeatable; default: project root)",
    )
    args = parser.parse_args(argv)

    setup_logging(level="INFO", colored=False)
    try:
        build_executable(args.output, args.entry_script, args.paths)
    except (ArtifactError, OSError) as e:
        logger.error("Artifact build failed: %s", e)
        return 1
    return 0


__all__ = ["ArtifactError", "build_executable", "main", "pyinstaller_args"]


if __name__ == "__main__":
    sys.exit(main())

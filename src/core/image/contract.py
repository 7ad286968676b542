"""Build-and-deploy contract checks for two-stage images.

The contract: a builder stage that installs dependencies from a manifest
before copying sources, and a minimal runtime stage that receives exactly
one artifact from the builder, keeps no package-manager cache, declares a
single `PORT` variable whose default matches the single exposed port, and
launches the artifact directly.
"""

from __future__ import annotations

import logging
import posixpath
import re

from src.core.image.dockerfile import DockerfileParseError, parse_command
from src.core.image.models import ImageDefinition, Instruction, Stage

logger = logging.getLogger(__name__)

MANIFEST_FILES = frozenset(
    {
        "pyproject.toml",
        "requirements.txt",
        "requirements.lock",
        "poetry.lock",
        "uv.lock",
        "setup.cfg",
        "Cargo.toml",
        "Cargo.lock",
    }
)

TOOLCHAIN_PACKAGES = frozenset({"build-essential", "gcc", "g++", "make", "cargo", "rustc"})

PATH_DIRS = ("/usr/local/sbin", "/usr/local/bin", "/usr/sbin", "/usr/bin", "/sbin", "/bin")

PORT_VARIABLE = "PORT"

_DECIMAL_RE = re.compile(r"[0-9]+")


def _sources(instruction: Instruction) -> list[str]:
    return instruction.operands()[:-1]


def _is_manifest_copy(instruction: Instruction) -> bool:
    sources = _sources(instruction)
    return bool(sources) and all(posixpath.basename(s) in MANIFEST_FILES for s in sources)


def _check_builder(builder: Stage) -> list[str]:
    issues = []
    context_copies = [c for c in builder.copies if "from" not in c.flags()]

    manifest_index = next((i for i, c in enumerate(context_copies) if _is_manifest_copy(c)), None)
    source_index = next(
        (i for i, c in enumerate(context_copies) if not _is_manifest_copy(c)), None
    )

    if manifest_index is None:
        issues.append("builder stage never copies a dependency manifest")
    elif source_index is not None and source_index < manifest_index:
        line = context_copies[source_index].line
        issues.append(f"builder copies sources (line {line}) before the dependency manifest")

    if not builder.find("RUN"):
        issues.append("builder stage has no build step")
    return issues


def _artifact_copy(runtime: Stage, builder_name: str | None) -> tuple[list[str], str | None]:
    issues = []
    copies = runtime.copies
    if len(copies) != 1:
        issues.append(f"runtime stage must copy exactly one artifact, found {len(copies)} copies")

    artifact = None
    for copy in copies:
        origin = copy.flags().get("from")
        if origin is None:
            issues.append(f"runtime copies from the build context (line {copy.line})")
            continue
        if origin not in {builder_name, "0"}:
            issues.append(f"runtime copies from {origin!r} instead of the builder stage")
        sources = _sources(copy)
        if len(sources) != 1:
            issues.append(f"runtime copy on line {copy.line} moves {len(sources)} paths, expected 1")
        artifact = copy.operands()[-1]
    return issues, artifact


def _check_packages(runtime: Stage) -> list[str]:
    issues = []
    for run in runtime.find("RUN"):
        text = run.arguments
        if "apt-get install" in text or "apt install" in text:
            if "rm -rf /var/lib/apt/lists" not in text:
                issues.append(f"package install on line {run.line} keeps the apt index cache")
            installed = set(text.replace("&&", " ").split()) & TOOLCHAIN_PACKAGES
            if installed:
                issues.append(f"runtime installs toolchain packages: {', '.join(sorted(installed))}")
        if "pip install" in text and "--no-cache-dir" not in text:
            issues.append(f"pip install on line {run.line} keeps the pip cache")
    return issues


def _check_network(runtime: Stage) -> list[str]:
    issues = []
    try:
        env = runtime.env
        ports = runtime.exposed_ports
    except DockerfileParseError as e:
        return [str(e)]

    if list(env) != [PORT_VARIABLE]:
        issues.append(f"runtime must declare only {PORT_VARIABLE}, found {sorted(env) or 'none'}")

    default = env.get(PORT_VARIABLE)
    default_port = int(default) if default is not None and _DECIMAL_RE.fullmatch(default) else None
    if default is not None and default_port is None:
        issues.append(f"{PORT_VARIABLE} default {default!r} is not a port number")

    if len(ports) != 1:
        issues.append(f"runtime must expose exactly one port, found {ports}")
    elif default_port is not None and ports[0] != default_port:
        issues.append(f"exposed port {ports[0]} differs from {PORT_VARIABLE} default {default_port}")
    return issues


def _check_entrypoint(runtime: Stage, artifact: str | None) -> list[str]:
    command = runtime.command
    if command is None:
        return ["runtime stage defines no entry point"]

    exec_form, argv = parse_command(command)
    if not exec_form:
        return [f"entry point on line {command.line} uses shell form"]
    if len(argv) != 1:
        return [f"entry point must launch the artifact without arguments, got {argv}"]

    if artifact is not None:
        accepted = {artifact}
        if posixpath.dirname(artifact) in PATH_DIRS:
            accepted.add(posixpath.basename(artifact))
        if argv[0] not in accepted:
            return [f"entry point {argv[0]!r} does not launch the copied artifact {artifact!r}"]
    return []


def find_artifact(definition: ImageDefinition) -> str | None:
    """Return the runtime path the builder artifact is copied to, if any."""
    runtime = definition.runtime
    if runtime is None:
        return None
    for copy in runtime.copies:
        if "from" in copy.flags():
            return copy.operands()[-1]
    return None


def check_build_contract(definition: ImageDefinition) -> list[str]:
    """Validate a parsed image definition and return a list of issues.

    An empty list means the definition honours the contract.
    """
    if len(definition.stages) != 2:
        return [f"expected a builder and a runtime stage, found {len(definition.stages)} stage(s)"]

    builder, runtime = definition.stages

    issues: list[str] = []
    if builder.name is None:
        issues.append("builder stage has no name to copy from")

    issues.extend(_check_builder(builder))
    copy_issues, artifact = _artifact_copy(runtime, builder.name)
    issues.extend(copy_issues)
    issues.extend(_check_packages(runtime))
    issues.extend(_check_network(runtime))
    issues.extend(_check_entrypoint(runtime, artifact))

    for issue in issues:
        logger.debug("Contract issue: %s", issue)
    return issues


__all__ = ["MANIFEST_FILES", "check_build_contract", "find_artifact"]

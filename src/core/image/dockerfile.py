"""Minimal Dockerfile parser.

Understands what the build contract checks need: comments, line
continuations, stage boundaries with aliases, instruction flags, ENV and
EXPOSE arguments and exec/shell form commands. It does not evaluate
variables or build anything.
"""

from __future__ import annotations

import json
import logging
import shlex
from pathlib import Path

from src.core.image.models import ImageDefinition, Instruction, Stage

logger = logging.getLogger(__name__)


class DockerfileParseError(ValueError):
    """Raised when a Dockerfile cannot be understood."""


def _logical_lines(text: str) -> list[tuple[int, str]]:
    """Join continuation lines and drop comments.

    Returns:
        (starting line number, joined line) pairs.
    """
    lines: list[tuple[int, str]] = []
    buffer: list[str] = []
    start = 0

    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        # Comments and blank lines are dropped even inside a continuation
        if not stripped or stripped.startswith("#"):
            continue
        if not buffer:
            start = number
        if stripped.endswith("\\"):
            buffer.append(stripped[:-1].strip())
            continue
        buffer.append(stripped)
        lines.append((start, " ".join(part for part in buffer if part)))
        buffer = []

    if buffer:
        lines.append((start, " ".join(part for part in buffer if part)))
    return lines


def _parse_from(arguments: str, line: int) -> Stage:
    tokens = [t for t in arguments.split() if not t.startswith("--")]
    if len(tokens) == 1:
        return Stage(base_image=tokens[0])
    if len(tokens) == 3 and tokens[1].upper() == "AS":
        return Stage(base_image=tokens[0], name=tokens[2])
    raise DockerfileParseError(f"line {line}: malformed FROM: {arguments!r}")


def parse_dockerfile(text: str) -> ImageDefinition:
    """Parse Dockerfile text into an ImageDefinition.

    Raises:
        DockerfileParseError: On instructions before the first FROM (other
            than ARG) or a malformed FROM line.
    """
    definition = ImageDefinition()
    current: Stage | None = None

    for line, content in _logical_lines(text):
        keyword, _, arguments = content.partition(" ")
        keyword = keyword.upper()
        arguments = arguments.strip()

        if keyword == "FROM":
            current = _parse_from(arguments, line)
            definition.stages.append(current)
            continue

        if current is None:
            if keyword == "ARG":
                continue
            raise DockerfileParseError(f"line {line}: {keyword} before the first FROM")

        current.instructions.append(Instruction(keyword=keyword, arguments=arguments, line=line))

    logger.debug("Parsed Dockerfile with %d stage(s)", len(definition.stages))
    return definition


def load_dockerfile(path: str | Path) -> ImageDefinition:
    """Read and parse a Dockerfile from disk."""
    return parse_dockerfile(Path(path).read_text(encoding="utf-8"))


def parse_env(arguments: str) -> dict[str, str]:
    """Parse ENV arguments in either `K=V K2=V2` or legacy `K value` form."""
    try:
        tokens = shlex.split(arguments)
    except ValueError as e:
        raise DockerfileParseError(f"malformed ENV: {arguments!r}") from e
    if not tokens:
        raise DockerfileParseError("ENV without arguments")

    if "=" not in tokens[0]:
        key, _, value = arguments.partition(" ")
        return {key: value.strip()}

    declared: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key:
            raise DockerfileParseError(f"malformed ENV pair: {token!r}")
        declared[key] = value
    return declared


def parse_expose(arguments: str) -> list[int]:
    """Parse EXPOSE arguments such as `3000`, `3000/tcp` or `8000-8002`."""
    ports: list[int] = []
    for token in arguments.split():
        spec = token.split("/", 1)[0]
        first, _, last = spec.partition("-")
        try:
            low = int(first)
            high = int(last) if last else low
        except ValueError as e:
            raise DockerfileParseError(f"unresolvable EXPOSE value: {token!r}") from e
        ports.extend(range(low, high + 1))
    return ports


def parse_command(instruction: Instruction) -> tuple[bool, list[str]]:
    """Split a CMD/ENTRYPOINT into (is_exec_form, argv).

    Shell form is reported as the argv the runtime would actually use.
    """
    text = instruction.arguments
    if text.startswith("["):
        try:
            argv = json.loads(text)
        except json.JSONDecodeError:
            argv = None
        if isinstance(argv, list) and all(isinstance(a, str) for a in argv):
            return True, argv
    return False, ["/bin/sh", "-c", text]


__all__ = [
    "DockerfileParseError",
    "load_dockerfile",
    "parse_command",
    "parse_dockerfile",
    "parse_env",
    "parse_expose",
]

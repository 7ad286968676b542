"""Data models for parsed container build definitions.

Provides Instruction, Stage and ImageDefinition dataclasses used by the
Dockerfile parser and the build contract checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Instruction:
    """One Dockerfile instruction after line continuations are joined.

    Attributes:
        keyword: Upper-cased instruction name (FROM, RUN, COPY, ...).
        arguments: Raw argument text following the keyword.
        line: 1-based line number where the instruction starts.
    """

    keyword: str
    arguments: str
    line: int = 0

    def flags(self) -> dict[str, str]:
        """Return leading `--name=value` flags (e.g. COPY --from=builder)."""
        result: dict[str, str] = {}
        for token in self.arguments.split():
            if not token.startswith("--"):
                break
            name, _, value = token[2:].partition("=")
            result[name] = value
        return result

    def operands(self) -> list[str]:
        """Return arguments after any leading flags."""
        tokens = self.arguments.split()
        while tokens and tokens[0].startswith("--"):
            tokens.pop(0)
        return tokens


@dataclass
class Stage:
    """One build stage, from its FROM line to the next one."""

    base_image: str
    name: str | None = None
    instructions: list[Instruction] = field(default_factory=list)

    def find(self, keyword: str) -> list[Instruction]:
        keyword = keyword.upper()
        return [i for i in self.instructions if i.keyword == keyword]

    @property
    def copies(self) -> list[Instruction]:
        return self.find("COPY") + self.find("ADD")

    @property
    def env(self) -> dict[str, str]:
        """Environment variables declared with ENV, in declaration order."""
        from src.core.image.dockerfile import parse_env

        declared: dict[str, str] = {}
        for instruction in self.find("ENV"):
            declared.update(parse_env(instruction.arguments))
        return declared

    @property
    def exposed_ports(self) -> list[int]:
        from src.core.image.dockerfile import parse_expose

        ports: list[int] = []
        for instruction in self.find("EXPOSE"):
            ports.extend(parse_expose(instruction.arguments))
        return ports

    @property
    def command(self) -> Instruction | None:
        """Effective entry instruction: the last ENTRYPOINT, else the last CMD."""
        entrypoints = self.find("ENTRYPOINT")
        if entrypoints:
            return entrypoints[-1]
        commands = self.find("CMD")
        return commands[-1] if commands else None


@dataclass
class ImageDefinition:
    """A whole multi-stage build definition."""

    stages: list[Stage] = field(default_factory=list)

    @property
    def builder(self) -> Stage | None:
        """First stage when the build has more than one."""
        return self.stages[0] if len(self.stages) > 1 else None

    @property
    def runtime(self) -> Stage | None:
        """The last stage is the one that ends up as the shipped image."""
        return self.stages[-1] if self.stages else None

    def stage(self, name: str) -> Stage | None:
        for candidate in self.stages:
            if candidate.name == name:
                return candidate
        return None


__all__ = ["ImageDefinition", "Instruction", "Stage"]

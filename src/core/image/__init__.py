"""Container image build tooling.

Parses Dockerfiles and checks the two-stage build contract. The release
executable is built by `src.core.image.artifact`, which is run as a module
and is not imported here.
"""

from src.core.image.contract import check_build_contract, find_artifact
from src.core.image.dockerfile import DockerfileParseError, load_dockerfile, parse_dockerfile
from src.core.image.models import ImageDefinition, Instruction, Stage

__all__ = [
    "DockerfileParseError",
    "ImageDefinition",
    "Instruction",
    "Stage",
    "check_build_contract",
    "find_artifact",
    "load_dockerfile",
    "parse_dockerfile",
]

#!/usr/bin/env python3
"""Check a Dockerfile against the two-stage build-and-deploy contract.

Usage:
    python scripts/check_image_contract.py [path/to/Dockerfile]

Exits 1 and lists the problems when the contract is broken.
"""
from __future__ import annotations

import argparse
from pathlib import Path

from src.core.image import (
    DockerfileParseError,
    check_build_contract,
    find_artifact,
    load_dockerfile,
)

ROOT = Path(__file__).resolve().parents[1]


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("dockerfile", nargs="?", default=str(ROOT / "Dockerfile"))
    args = parser.parse_args()

    try:
        definition = load_dockerfile(args.dockerfile)
    except (OSError, DockerfileParseError) as e:
        print(f"Cannot read {args.dockerfile}: {e}")
        return 1

    issues = check_build_contract(definition)
    if issues:
        print(f"{args.dockerfile} breaks the build contract:")
        for issue in issues:
            print(f" - {issue}")
        return 1

    runtime = definition.runtime
    print(f"{args.dockerfile}: OK")
    print(f"  artifact: {find_artifact(definition)}")
    if runtime is not None:
        print(f"  PORT default: {runtime.env.get('PORT')}  exposed: {runtime.exposed_ports}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

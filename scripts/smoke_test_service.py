"""Smoke test a running take-home container over HTTP.

Usage:
    docker build -t take-home .
    docker run --rm -p 3000:3000 take-home
    python scripts/smoke_test_service.py --base-url http://localhost:3000

Run with `-e PORT=8080 -p 8080:8080` and `--base-url http://localhost:8080`
to check that the PORT override is honoured.
"""

from __future__ import annotations

import argparse
import os

import requests

PAYLOAD = {
    "name": "John Doe",
    "age": 30,
    "contact": {"email": "john@example.com", "phone": "123-456-7890"},
}


def run(base_url: str, timeout: float) -> list[str]:
    failures: list[str] = []

    encrypted = requests.post(f"{base_url}/encrypt", json=PAYLOAD, timeout=timeout)
    encrypted.raise_for_status()
    if set(encrypted.json()) != set(PAYLOAD):
        failures.append("encrypt did not preserve keys")

    decrypted = requests.post(f"{base_url}/decrypt", json=encrypted.json(), timeout=timeout)
    decrypted.raise_for_status()
    if decrypted.json() != PAYLOAD:
        failures.append("decrypt did not restore the payload")

    signed = requests.post(f"{base_url}/sign", json=PAYLOAD, timeout=timeout)
    signed.raise_for_status()
    signature = signed.json().get("signature", "")

    ok = requests.post(
        f"{base_url}/verify", json={"signature": signature, "data": PAYLOAD}, timeout=timeout
    )
    if ok.status_code != 204:
        failures.append(f"verify of a valid signature returned {ok.status_code}")

    tampered = requests.post(
        f"{base_url}/verify",
        json={"signature": signature, "data": {**PAYLOAD, "age": 31}},
        timeout=timeout,
    )
    if tampered.status_code != 400:
        failures.append(f"verify of tampered data returned {tampered.status_code}")

    return failures


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--base-url",
        default=f"http://localhost:{os.getenv('PORT', '3000')}",
        help="Service base URL (default: http://localhost:$PORT)",
    )
    parser.add_argument("--timeout", type=float, default=10.0)
    args = parser.parse_args()

    try:
        failures = run(args.base_url.rstrip("/"), args.timeout)
    except requests.RequestException as e:
        print(f"Service unreachable or failing at {args.base_url}: {e}")
        return 1

    if failures:
        print("Smoke test FAILED:")
        for failure in failures:
            print(f" - {failure}")
        return 1

    print(f"Smoke test passed against {args.base_url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

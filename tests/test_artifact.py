"""Tests for the one-file executable builder."""

import os
import socket
import sys
import subprocess
import time
from pathlib import Path

import pytest

from src.core.image import artifact
from src.core.image.artifact import ArtifactError, build_executable, pyinstaller_args


def _option(args, name):
    return args[args.index(name) + 1]


@pytest.fixture
def entry_script(tmp_path):
    script = tmp_path / "app" / "run.py"
    script.parent.mkdir()
    script.write_text("print('hello')\n")
    return script


@pytest.fixture
def fake_pyinstaller(monkeypatch):
    """Replace PyInstaller with a stand-in that writes one file into --distpath."""
    calls = []

    def run(args):
        calls.append(args)
        dist_dir = Path(_option(args, "--distpath"))
        dist_dir.mkdir(parents=True)
        (dist_dir / _option(args, "--name")).write_bytes(b"\x7fELF frozen")

    monkeypatch.setattr(artifact, "_run_pyinstaller", run)
    return calls


def test_pyinstaller_args_request_one_file_build(tmp_path):
    args = pyinstaller_args(
        tmp_path / "main.py", "take-home", tmp_path / "dist", tmp_path / "work", [tmp_path]
    )

    assert args[0] == str(tmp_path / "main.py")
    assert "--onefile" in args
    assert "--noconfirm" in args
    assert _option(args, "--name") == "take-home"
    assert _option(args, "--distpath") == str(tmp_path / "dist")
    assert _option(args, "--specpath") == str(tmp_path / "work")
    assert _option(args, "--paths") == str(tmp_path)


def test_default_build_freezes_service_entry_point(project_root):
    assert artifact.DEFAULT_ENTRY_SCRIPT == project_root.resolve() / "src" / "main.py"
    assert artifact.PROJECT_ROOT == project_root.resolve()


def test_build_places_one_executable_at_output(entry_script, tmp_path, fake_pyinstaller):
    output = tmp_path / "dist" / "take-home"

    result = build_executable(output, entry_script, search_paths=[tmp_path])

    assert result == output
    assert [p.name for p in output.parent.iterdir()] == ["take-home"]
    assert os.access(output, os.X_OK)
    assert output.read_bytes() == b"\x7fELF frozen"
    (args,) = fake_pyinstaller
    assert _option(args, "--name") == "take-home"
    assert _option(args, "--paths") == str(tmp_path)


def test_build_searches_project_root_by_default(entry_script, tmp_path, fake_pyinstaller):
    build_executable(tmp_path / "out" / "app", entry_script)
    assert _option(fake_pyinstaller[0], "--paths") == str(artifact.PROJECT_ROOT)


def test_failed_build_leaves_no_artifact(entry_script, tmp_path, monkeypatch):
    output = tmp_path / "dist" / "take-home"

    def fail(args):
        Path(_option(args, "--workpath")).mkdir(parents=True)
        raise ArtifactError("PyInstaller failed with exit status 1")

    monkeypatch.setattr(artifact, "_run_pyinstaller", fail)

    with pytest.raises(ArtifactError):
        build_executable(output, entry_script)

    assert list(output.parent.iterdir()) == []


def test_unexpected_build_output_is_rejected(entry_script, tmp_path, monkeypatch):
    def one_dir_build(args):
        bundle = Path(_option(args, "--distpath")) / _option(args, "--name")
        bundle.mkdir(parents=True)
        (bundle / "take-home").write_bytes(b"")

    monkeypatch.setattr(artifact, "_run_pyinstaller", one_dir_build)

    with pytest.raises(ArtifactError, match="expected one executable"):
        build_executable(tmp_path / "dist" / "take-home", entry_script)
    assert list((tmp_path / "dist").iterdir()) == []


def test_pyinstaller_exit_status_becomes_artifact_error(monkeypatch):
    pyinstaller_main = pytest.importorskip("PyInstaller.__main__")

    def exit_with(args):
        raise SystemExit(1)

    monkeypatch.setattr(pyinstaller_main, "run", exit_with)

    with pytest.raises(ArtifactError, match="exit status 1"):
        artifact._run_pyinstaller(["main.py"])


def test_missing_entry_script_raises(tmp_path):
    with pytest.raises(ArtifactError, match="not found"):
        build_executable(tmp_path / "app", tmp_path / "missing.py")


def test_non_python_entry_script_raises(tmp_path):
    script = tmp_path / "run.sh"
    script.write_text("echo hi\n")
    with pytest.raises(ArtifactError, match=r"\.py"):
        build_executable(tmp_path / "app", script)


def test_output_directory_is_rejected(entry_script, tmp_path):
    with pytest.raises(ArtifactError, match="directory"):
        build_executable(tmp_path, entry_script)


def test_cli_builds_artifact(entry_script, tmp_path, fake_pyinstaller):
    output = tmp_path / "cli-app"
    code = artifact.main(
        ["--output", str(output), "--entry-script", str(entry_script), "--paths", str(tmp_path)]
    )
    assert code == 0
    assert output.exists()


def test_cli_reports_failure(tmp_path):
    code = artifact.main(["--output", str(tmp_path / "x"), "--entry-script", str(tmp_path / "missing.py")])
    assert code == 1
    assert not (tmp_path / "x").exists()


def test_module_cli_runs_without_reimport_warning(project_root):
    completed = subprocess.run(
        [sys.executable, "-W", "error::RuntimeWarning", "-m", "src.core.image.artifact", "--help"],
        cwd=project_root,
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert completed.returncode == 0, completed.stderr
    assert "RuntimeWarning" not in completed.stderr


# ── the real service, frozen ─────────────────────────────────────


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _wait_until_serving(process, port, timeout=60.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if process.poll() is not None:
            return False
        try:
            with socket.create_connection(("127.0.0.1", port), timeout=1):
                return True
        except OSError:
            time.sleep(0.5)
    return False


@pytest.mark.slow
def test_frozen_service_starts_and_serves(tmp_path):
    pytest.importorskip("PyInstaller")
    requests = pytest.importorskip("requests")

    executable = build_executable(tmp_path / "dist" / "take-home")
    port = _free_port()
    env = {**os.environ, "PORT": str(port), "HOST": "127.0.0.1", "LOG_TO_FILE": "false"}

    # Run from an empty directory so the frozen binary cannot see the source tree
    process = subprocess.Popen(
        [str(executable)],
        cwd=tmp_path,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
    )
    try:
        if not _wait_until_serving(process, port):
            process.kill()
            output = process.communicate()[0].decode(errors="replace")
            pytest.fail(f"frozen service did not start:\n{output}")

        base = f"http://127.0.0.1:{port}"
        resp = requests.post(f"{base}/encrypt", json={"hello": "world"}, timeout=10)
        assert resp.status_code == 200
        assert resp.json() == {"hello": "IndvcmxkIg=="}

        signature = requests.post(f"{base}/sign", json={"a": 1}, timeout=10).json()["signature"]
        resp = requests.post(f"{base}/verify", json={"signature": signature, "data": {"a": 1}}, timeout=10)
        assert resp.status_code == 204
    finally:
        process.terminate()
        try:
            process.wait(timeout=10)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

"""Entry point for the take-home service.

Started with no arguments: everything comes from the environment, or a
`.env` file found from the working directory (or next to the executable
when running as a PyInstaller build).
"""

import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from src.utils.logging_config import get_logger, setup_logging


def _find_env_file() -> str:
    env_path = find_dotenv(usecwd=True)
    if not env_path and getattr(sys, "frozen", False):
        candidate = Path(sys.executable).parent / ".env"
        if candidate.is_file():
            env_path = str(candidate)
    return env_path


# Load environment variables once at startup; real env wins over .env
_env_file = _find_env_file()
if _env_file:
    load_dotenv(_env_file, override=False)

setup_logging(colored=True)

logger = get_logger(__name__)


def main() -> None:
    """Serve the HTTP API on HOST:PORT until the process is stopped."""
    from src.core.config import config
    from src.web_app import app

    config.reload()
    for issue in config.validate():
        logger.warning(f"Configuration issue: {issue}")

    port = config.port
    logger.info("Starting take-home on %s:%d (pid=%s)", config.host, port, os.getpid())
    print(f"Server running on http://localhost:{port}", flush=True)

    app.run(host=config.host, port=port, debug=False, threaded=True)


if __name__ == "__main__":
    main()

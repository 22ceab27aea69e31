"""Web server entry point for the RhythmFlow server"""

import sys

import uvicorn

# Load environment variables from .env file BEFORE importing anything else
from dotenv import load_dotenv
load_dotenv()

from rhythmflow.utils.config import load_settings
from rhythmflow.utils.exceptions import ConfigError


def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    # Let uvicorn build the app so every worker gets its own stores and catalog session
    uvicorn.run(
        "rhythmflow_web.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()

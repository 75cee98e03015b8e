import argparse
import os
from functools import lru_cache
from pathlib import Path


@lru_cache
def get_cli_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pollframe",
        description=(
            "Start a pollframe server.\n\n"
            "pollframe turns a web browser into the display and keyboard of a\n"
            "native process: the page polls the server over one kept-alive\n"
            "HTTP connection, sending its key state and receiving a freshly\n"
            "rendered frame on every round trip."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a pollframe configuration file"
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        help="TCP port to listen on, overrides the configuration file"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity for the server.\n"
            "Choose among: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n\n"
            "DEBUG    → one line per frame and per connection.\n"
            "INFO     → startup, peer shutdowns and errors (default).\n"
            "WARNING  → only warnings and errors.\n"
            "ERROR    → only errors.\n"
            "CRITICAL → only critical failures.\n\n"
            "Example:\n"
            "  --log-level DEBUG"
        ),
    )

    return parser.parse_args()


@lru_cache
def get_configfile() -> Path | None:
    args = get_cli_args()

    # Priority: CLI > ENV > default file in current working directory
    raw = args.config or os.getenv("POLLFRAMECONFIG")

    if raw is None:
        file = Path.cwd() / "pollframe.yaml"
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the POLLFRAMECONFIG environment variable\n"
            "  - Or place a 'pollframe.yaml' file in the current working directory."
        )

    return file

from pathlib import Path
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from guild.bootstrap import autosave_interval_ms, create_guild_service, save_path
from guild.presentation.cli import run_cli

load_dotenv()


def _print_help_surface() -> None:
    print("\nHelp:")
    print("- Type 'help' at the guild> prompt for the command list.")
    print("- Saves go to GUILD_SAVE_PATH, or to GUILD_DATABASE_URL when that is set.")
    print("- A damaged save file can be moved aside to start a new guild.")


def _configure_logging() -> None:
    level_name = os.getenv("GUILD_LOG_LEVEL", "WARNING").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    _configure_logging()
    try:
        service = create_guild_service()
        run_cli(service, autosave_ms=autosave_interval_ms(), default_save_path=save_path())
    except KeyboardInterrupt:
        print("\nSession ended.")
    except Exception as exc:
        logging.getLogger("guild").exception("Guild session crashed")
        print("An unexpected error occurred. The game closed safely.")
        print(f"Reason: {exc}")
        _print_help_surface()


if __name__ == "__main__":
    main()

"""CLI entry point for the labor-law helper.

Feeds terminal input straight into the intent resolver, without LINE, for
testing and development.  For production, use the FastAPI server
(laborbot/server.py).

Usage:
    uv run python -m laborbot.main            # normal mode (quiet)
    uv run python -m laborbot.main --debug    # debug mode (shows API calls)
"""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool = False) -> None:
    """Set up logging: WARNING by default, DEBUG when --debug is passed."""
    root_level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=root_level,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )

    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("laborbot").setLevel(logging.DEBUG if debug else logging.INFO)


def main():
    """Run the interactive CLI chat loop."""
    parser = argparse.ArgumentParser(description="Labor Standards Act helper CLI")
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including HTTP requests",
    )
    args = parser.parse_args()

    load_dotenv()
    _configure_logging(debug=args.debug)

    # Imported late so logging is configured before reference data loads.
    from laborbot.resolver import IntentResolver
    from laborbot.server import build_context

    print("\n" + "=" * 60)
    print("  勞基法小幫手 - CLI")
    print("=" * 60)
    print("  Type a question and press Enter. 'quit' to exit.")
    print("=" * 60 + "\n")

    resolver = IntentResolver(build_context())

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nBye!")
            break

        if not user_input:
            continue

        if user_input.lower() in ("exit", "quit", "q"):
            print("\nBye!")
            break

        try:
            reply = resolver.resolve(user_input)
            print(f"\nBot: {reply.text}\n")
            if reply.quick_replies:
                print("     [" + " | ".join(q.label for q in reply.quick_replies) + "]\n")
        except KeyboardInterrupt:
            print("\n\nBye!")
            break
        except Exception:
            logger.exception("Error processing message")
            print("\nBot: 抱歉，處理訊息時發生錯誤，請再試一次。\n")


if __name__ == "__main__":
    main()

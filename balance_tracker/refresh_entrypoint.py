"""Balance refresh entrypoint - run one refresh pass outside the API process.

Usage:
    python -m balance_tracker.refresh_entrypoint              # Every active wallet
    python -m balance_tracker.refresh_entrypoint <user_id>    # One user's wallets
"""

import asyncio
import sys

from balance_tracker.core.logging import get_logger
from balance_tracker.main import run_balance_refresh

logger = get_logger("refresh_entrypoint")


def main():
    """Main entry point for a one-off balance refresh."""
    user_id = sys.argv[1] if len(sys.argv) > 1 else None
    logger.info(f"Balance refresh starting (user: {user_id or 'all'})")

    summary = asyncio.run(run_balance_refresh(user_id))
    logger.info(f"Balance refresh completed: {summary}")

    if summary.get("failed"):
        sys.exit(1)
    return summary


if __name__ == "__main__":
    main()

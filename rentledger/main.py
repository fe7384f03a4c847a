"""Main application entry point."""

import logging

import uvicorn
from dotenv import load_dotenv

from rentledger.config import settings
from rentledger.services.logging import setup_server_logging

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the ledger API server."""
    import argparse

    parser = argparse.ArgumentParser(description="Rent Ledger API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    args = parser.parse_args()

    setup_server_logging(settings.log_level, settings.log_file)
    logger.info("Starting Rent Ledger API on %s:%d", args.host, args.port)

    from rentledger.api.app import app

    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()

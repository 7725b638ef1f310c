# =============================================================================
# main.py  —  Entry Point for the FMP curated tool server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py        (or: fmp-mcp, once installed)
#
# WHAT HAPPENS:
#   1. Loads .env (FMP_API_KEY, optional FMP_BASE_URL / LOG_LEVEL ...)
#   2. Configures logging to STDERR
#   3. Builds Settings → FMPClient → FastMCP server
#   4. Serves tools over stdio until the client disconnects
#
# A missing API key is the only fatal error: it is logged and the process
# exits with status 1.  Everything after startup is reported to the model as
# tool content instead.
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

from core.config import ConfigError, load_settings
from core.fmp_client import FMPClient
from tools.mcp_server import create_server

logger = logging.getLogger("fmp")


def configure_logging(level: str) -> None:
    # STDOUT is the MCP transport; logs must go to STDERR.
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def main() -> None:
    load_dotenv()

    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging("INFO")
        logger.error(f"FATAL ERROR: {e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    client = FMPClient(
        api_key=settings.fmp_api_key,
        base_url=settings.fmp_base_url,
        timeout=settings.request_timeout,
    )
    server = create_server(client)
    logger.info(f"Starting '{server.name}' tool server against {settings.fmp_base_url}")
    server.run()


if __name__ == "__main__":
    main()

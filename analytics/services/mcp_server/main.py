"""
Time Registration Generator MCP Server

Exposes synthetic time registration generation as MCP tools so an assistant
can produce labelled benchmark datasets for anomaly detectors.
"""

import logging
import sys
from contextlib import asynccontextmanager

import structlog

# Configure structlog to write to stderr, not stdout (to avoid interfering with MCP JSON protocol)
logging.basicConfig(
    format="%(message)s",
    stream=sys.stderr,
    level=logging.INFO,
)

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def app_lifespan(app):
    """Log startup and shutdown; the pattern cache is dropped on exit."""
    from analytics.services.mcp_server.instance import VERSION
    from analytics.services.mcp_server.state import get_shared_state

    logger.info("mcp_server_starting", version=VERSION)

    yield

    get_shared_state().clear()
    logger.info("mcp_server_stopping")


# Import MCP server instance (must be imported before tools to avoid circular imports)
from analytics.services.mcp_server.instance import mcp  # noqa: E402

mcp.lifespan = app_lifespan

# These imports MUST happen before mcp.run() is called
# Each module registers its tools using the @mcp.tool() decorator
from analytics.services.mcp_server.tools import generation  # noqa: E402, F401

logger.info(
    "mcp_server_initialized",
    tools_registered=3,
    tools=[
        "generate_time_registrations",
        "export_time_registrations",
        "clear_work_patterns",
    ],
)


if __name__ == "__main__":
    mcp.run()

"""Main entry point for jumpmcp MCP server."""

import argparse
import logging
import sys
from pathlib import Path

from fastmcp import FastMCP

from jump_mcp.config import Config
from jump_mcp.ranking import RankingOrchestrator, RecencyCache
from jump_mcp.resources import register_resources
from jump_mcp.rules import load_rules
from jump_mcp.tools import register_tools
from jump_mcp.vault import Vault

logger = logging.getLogger(__name__)


def create_server(config: Config) -> FastMCP:
    """Create and configure the MCP server with all components.

    Args:
        config: Configuration instance with all settings.
    """
    mcp = FastMCP(
        name="jumpMCP",
        instructions=(
            "jumpMCP suggests documents of a markdown vault to jump to. Use the "
            "switch tool to list or search documents ranked by their relationship "
            "to the current document, and open_document to record visits."
        ),
    )

    logger.info("Loading rules from %s", config.jump_rules)
    rules = load_rules(config.jump_rules)

    logger.info("Scanning vault at %s", config.jump_root)
    vault = Vault(config.jump_root)
    added, _, _ = vault.refresh()
    logger.info("Vault loaded: %d documents", added)

    recency = RecencyCache(config.max_recent)
    engine = RankingOrchestrator(vault, recency)

    logger.info("Registering resources...")
    register_resources(mcp, recency, rules)

    logger.info("Registering tools...")
    register_tools(mcp, vault, engine, rules, config)

    logger.info("Server configured successfully")
    return mcp


def main() -> None:
    """Main function - starts the MCP server."""
    # Configure logging here to avoid side effects on import
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="jumpMCP - document switcher for markdown vaults")
    parser.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="Path to the rules file (overrides JUMP_RULES)",
    )
    args = parser.parse_args()

    config = Config.from_env(rules_override=args.rules)

    logger.info("=" * 50)
    logger.info("jumpMCP starting...")
    logger.info("  JUMP_ROOT:  %s", config.jump_root)
    logger.info("  JUMP_PORT:  %s", config.jump_port)
    logger.info("  JUMP_RULES: %s", config.jump_rules)
    logger.info("  RECENT:     %d", config.max_recent)
    logger.info("=" * 50)

    try:
        mcp = create_server(config)
        logger.info("Starting MCP server on port %s...", config.jump_port)
        mcp.run(transport="sse", host="0.0.0.0", port=config.jump_port)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()

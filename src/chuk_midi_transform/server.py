#!/usr/bin/env python3
"""
Entry point for the CHUK MIDI Transform MCP Server.

Supports stdio and HTTP transports. Output and project pipeline
directories default to ./output and ./pipelines and can be moved with
--output-dir / --pipelines-dir (or CHUK_MIDI_OUTPUT_DIR /
CHUK_MIDI_PIPELINES_DIR).
"""

import argparse
import asyncio
import logging
import os

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, configure paths and run the server."""
    parser = argparse.ArgumentParser(description="CHUK MIDI Transform MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--output-dir",
        help="Directory for transformed MIDI files (default: ./output)",
    )
    parser.add_argument(
        "--pipelines-dir",
        help="Project pipelines directory (default: ./pipelines)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # async_server reads these at import time
    if args.output_dir:
        os.environ["CHUK_MIDI_OUTPUT_DIR"] = args.output_dir
    if args.pipelines_dir:
        os.environ["CHUK_MIDI_PIPELINES_DIR"] = args.pipelines_dir

    from chuk_midi_transform.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting CHUK MIDI Transform MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK MIDI Transform MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()

"""
Script Sentinel Main Entry Point

Run the Script Sentinel API server.
"""

import argparse
import os
from pathlib import Path

from script_sentinel.core.config import CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH, load_config, set_config
from script_sentinel.core.env_loader import get_gemini_api_key
from script_sentinel.core.exceptions import ConfigurationError
from script_sentinel.core.logging_config import LogLevel, get_logger, setup_logging


def main():
    """Main entry point for the Script Sentinel server."""
    parser = argparse.ArgumentParser(
        description="Script Sentinel - AI-Powered Script Analysis"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to configuration file"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host for the API server (default: from config)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for the API server (default: from config)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload the server on code changes"
    )

    args = parser.parse_args()

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        parser.error(str(e))
    set_config(config)
    os.environ[CONFIG_PATH_ENV] = str(config_path.resolve())

    log_level = LogLevel.DEBUG if args.debug else LogLevel.from_name(config.log_level)
    setup_logging(level=log_level, log_file=config.logs_dir / "script_sentinel.log", verbose=args.debug)

    logger = get_logger("main")
    logger.info(f"Starting Script Sentinel (config: {config_path})")

    if not get_gemini_api_key():
        logger.warning("No Gemini API key found. Projects will work, generation requests will fail.")

    from script_sentinel.api.main import start_server
    start_server(host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()

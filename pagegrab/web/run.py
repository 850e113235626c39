"""
Run script for the scrape service.
"""

import sys
from typing import Any, Dict

import uvicorn
from loguru import logger

from ..config import load_config
from ..errors import ConfigurationError
from .app import create_app

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(config: Dict[str, Any]) -> None:
    """Replace loguru's default sink with the service sinks."""
    logging_config = config.get('logging', {})
    level = str(logging_config.get('level', 'INFO')).upper()

    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)

    log_file = logging_config.get('file')
    if log_file:
        logger.add(log_file, rotation=logging_config.get('rotation', '10 MB'), level=level)


def main():
    """Load config, build the app and serve it."""
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"Fatal configuration error: {e}")
        sys.exit(1)

    configure_logging(config)

    app = create_app(config)
    host = config['server']['host']
    port = config['server']['port']

    logger.info(f"Starting scrape service on http://{host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=str(config['logging'].get('level', 'INFO')).lower()
    )


if __name__ == "__main__":
    main()

"""
Logging configuration.
"""
import logging
import sys

from sitesentinel.config import settings

# Create logger
logger = logging.getLogger("sitesentinel")
logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))

# Console handler
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)

# Formatter
formatter = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
console_handler.setFormatter(formatter)

# Add handler
if not logger.handlers:
    logger.addHandler(console_handler)

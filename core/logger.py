import logging

from core.config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL):
    """Configure root logging once for the API process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
    )

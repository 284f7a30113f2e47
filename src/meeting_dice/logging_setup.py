import logging


def configure_logging(level: str = "WARNING") -> None:
    """Configure the root logger from the settings level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

import logging
import os

from rich.logging import RichHandler


class CenteredFormatter(logging.Formatter):
    longest_name_length = 12

    def format(self, record):
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(record.name)
        )
        record.name = record.name.center(CenteredFormatter.longest_name_length)
        return super().format(record)


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger configured with RichHandler for rich output.
    """
    if name is None:
        name = "oilseals"
    logger = logging.getLogger(name)
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        console_handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        console_handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

        logger.propagate = False
        logger.debug(f"Logger for '{name}' initialized with RichHandler.")

    return logger

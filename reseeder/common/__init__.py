# Common utilities
from reseeder.common.duration import parse_duration as parse_duration
from reseeder.common.logging_utils import setup_logger as setup_logger

__all__ = ["parse_duration", "setup_logger"]

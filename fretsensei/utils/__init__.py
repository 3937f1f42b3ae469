"""Utilities Subpackage - logging setup for the command line."""

from fretsensei.utils.logger import setup_logger

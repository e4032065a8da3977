import sys
import os
import time
import logging
from importlib.metadata import version, PackageNotFoundError

from . import LOGGER as MODULELOGGER

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(threadName)-10s %(name)s : %(message)s"


def _log_levels(options):
    """(console, file) log levels for the verbosity flags of a run."""
    if options.debug:
        return logging.DEBUG, logging.DEBUG
    if options.verbose:
        return logging.INFO, logging.INFO
    return logging.WARNING, logging.INFO


def _add_handler(handler, level):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    MODULELOGGER.addHandler(handler)


def setup_logging(options, filename):
    """Send atomsite log records to stdout and to a log file.

    The log file is appended to in ``options.directory``; warnings always
    reach the console, progress messages only with --verbose or --debug.
    """
    console_level, file_level = _log_levels(options)
    _add_handler(logging.StreamHandler(stream=sys.stdout), console_level)
    _add_handler(
        logging.FileHandler(os.path.join(options.directory, filename), mode="a"),
        file_level,
    )
    MODULELOGGER.setLevel(min(console_level, file_level))


def log_run_info(options, logger):
    """Log the package version, command line and conversion options."""
    try:
        atomsite_version = version("atomsite")
    except PackageNotFoundError:
        atomsite_version = "unknown"

    logger.info(f"atomsite {atomsite_version}, {time.strftime('%c %Z')}")
    logger.info(" ".join(sys.argv))
    for key, value in sorted(vars(options).items()):
        logger.info(f"  {key}: {value}")

"""
Extensible multipart/form-data encoding: a chain of writers, one per kind of field value.
"""
import logging

from os import environ
from rich.console import Console

VERSION = "0.4.0"

# Create application logger (for when things go wrong)
log = logging.getLogger('multiform')
log.setLevel(environ.get('MULTIFORM_LOG_LEVEL', environ.get("LOG_LEVEL", "WARN")).upper())

if environ.get('LOG_FILE'):
    logging.basicConfig(filename=environ['LOG_FILE'], filemode="a")
else:
    log.addHandler(logging.NullHandler())


# Console logger is for displaying updates to user - normal
# events.
console = Console(emoji=False, log_path=False, stderr=True)
clog = console.log


class ConfigException(Exception):
    """
    Base class for any configuration based errors (bad config file, unknown
    charset, unknown writer names etc).
    """
    pass


class EncodingError(Exception):
    """
    Raised when a writer accepted a value but could not serialize it. Always
    raised `from` the underlying error.
    """

    def __init__(self, message: str, key: str = None):
        super().__init__(message)
        self.key = key

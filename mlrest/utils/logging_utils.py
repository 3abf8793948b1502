import logging
import logging.config
import sys

from mlrest.environment_variables import MLREST_LOGGING_LEVEL

# Logging format example:
# 2018/11/20 12:36:37 INFO mlrest.tracking.client: Run 6f0c... terminated with status FINISHED
LOGGING_LINE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOGGING_DATETIME_FORMAT = "%Y/%m/%d %H:%M:%S"


class MlrestLoggingStream:
    """
    A Python stream for use with event logging APIs throughout mlrest (`eprint()`,
    `logger.info()`, etc.). This stream wraps `sys.stderr`, forwarding `write()` and
    `flush()` calls to the stream referred to by `sys.stderr` at the time of the call.
    It also provides capabilities for disabling the stream to silence event logs.
    """

    def __init__(self):
        self._enabled = True

    def write(self, text):
        if self._enabled:
            sys.stderr.write(text)

    def flush(self):
        if self._enabled:
            sys.stderr.flush()

    @property
    def enabled(self):
        return self._enabled

    @enabled.setter
    def enabled(self, value):
        self._enabled = value


MLREST_LOGGING_STREAM = MlrestLoggingStream()


def disable_logging():
    """
    Disables the `MlrestLoggingStream` used by event logging APIs throughout mlrest,
    silencing all subsequent event logs.
    """
    MLREST_LOGGING_STREAM.enabled = False


def enable_logging():
    """
    Enables the `MlrestLoggingStream` used by event logging APIs throughout mlrest,
    emitting all subsequent event logs. This reverses the effects of `disable_logging()`.
    """
    MLREST_LOGGING_STREAM.enabled = True


def _configure_mlrest_loggers(root_module_name):
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "mlrest_formatter": {
                    "format": LOGGING_LINE_FORMAT,
                    "datefmt": LOGGING_DATETIME_FORMAT,
                },
            },
            "handlers": {
                "mlrest_handler": {
                    "formatter": "mlrest_formatter",
                    "class": "logging.StreamHandler",
                    "stream": MLREST_LOGGING_STREAM,
                },
            },
            "loggers": {
                root_module_name: {
                    "handlers": ["mlrest_handler"],
                    "level": (MLREST_LOGGING_LEVEL.get() or "INFO").upper(),
                    "propagate": False,
                },
            },
        }
    )


def eprint(*args, **kwargs):
    print(*args, file=MLREST_LOGGING_STREAM, **kwargs)


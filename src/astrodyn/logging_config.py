"""
Logging configuration for astrodyn.

Library modules only create loggers with ``logging.getLogger(__name__)`` and
never attach handlers themselves. An application calls :func:`setup_logging`
once to send records to the console and to two rotating files under
``log_dir``: ``simulation.log`` receives everything from DEBUG up, while
``error.log`` keeps only failures (corrector divergence, degenerate monodromy
matrices, and so on).

    ```python
    from astrodyn.logging_config import setup_logging
    setup_logging(log_dir="runs/logs")
    ```
"""

import logging
import logging.config
from pathlib import Path

# Sub-packages whose records are routed to the handlers at DEBUG level
PACKAGE_LOGGERS = ("astrodyn.orbits", "astrodyn.manifolds")

_DATEFMT = '%Y-%m-%d %H:%M:%S'
_MAX_BYTES = 10 * 1024 * 1024


def _rotating_file(path, level):
    return {
        'class': 'logging.handlers.RotatingFileHandler',
        'level': level,
        'formatter': 'detailed',
        'filename': str(path),
        'maxBytes': _MAX_BYTES,
        'backupCount': 5,
        'encoding': 'utf8',
    }


def setup_logging(default_level=logging.INFO, log_dir="logs", console_level=logging.INFO):
    """
    Configure console and rotating-file logging for astrodyn.

    Parameters
    ----------
    default_level : int, optional
        Level of the root logger. Default is logging.INFO.
    log_dir : str or Path, optional
        Directory for ``simulation.log`` and ``error.log``; created if
        missing. Default is "logs".
    console_level : int, optional
        Threshold of the stdout handler. Default is logging.INFO.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    handlers = ['console', 'file', 'error_file']
    package_loggers = {
        name: {'handlers': handlers, 'level': 'DEBUG', 'propagate': False}
        for name in PACKAGE_LOGGERS
    }

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': _DATEFMT,
            },
            'detailed': {
                'format': '%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s',
                'datefmt': _DATEFMT,
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': console_level,
                'formatter': 'standard',
                'stream': 'ext://sys.stdout',
            },
            'file': _rotating_file(log_path / 'simulation.log', 'DEBUG'),
            'error_file': _rotating_file(log_path / 'error.log', 'ERROR'),
        },
        'root': {'handlers': handlers, 'level': default_level},
        'loggers': package_loggers,
    })

    logging.getLogger(__name__).debug(f"Logging to {log_path.resolve()}")

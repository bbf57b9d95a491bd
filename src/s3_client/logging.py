import logging
import sys

from pythonjsonlogger.json import JsonFormatter


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configures structured JSON logging for applications using the s3 client.

    Installs a JSON formatter that includes timestamp, level, logger name and
    message on a stdout stream handler for the root logger. The minio and
    urllib3 loggers are routed through the same handler so that transport
    warnings share the format.

    Args:
        level: Log level applied to the root logger.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in ["minio", "urllib3"]:
        transport_logger = logging.getLogger(logger_name)
        transport_logger.setLevel(logging.WARNING)

        transport_logger.handlers = []

        transport_logger.addHandler(stream_handler)

        transport_logger.propagate = False

    return root_logger

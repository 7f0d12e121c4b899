import logging.config

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
        },
    },
    "loggers": {
        "tracker": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
    },
}


def configure_logging(level: str = "INFO") -> None:
    """Route the ``tracker`` loggers through a rich console handler."""
    config = {**LOGGING_CONFIG, "loggers": {"tracker": {**LOGGING_CONFIG["loggers"]["tracker"], "level": level.upper()}}}
    logging.config.dictConfig(config)

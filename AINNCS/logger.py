import logging


class Logger:
    _loggers = {}
    log_level = logging.WARNING

    @classmethod
    def set_logger_level(cls, verbosity: int):
        """Set the level of every logger created so far."""
        if verbosity <= 0:
            cls.log_level = logging.WARNING
        elif verbosity == 1:
            cls.log_level = logging.INFO
        else:
            cls.log_level = logging.DEBUG

        for logger in cls._loggers.values():
            logger.setLevel(cls.log_level)

    @classmethod
    def setup_logger(cls, name):
        """Return a logger with the given name."""
        logger = logging.getLogger(name)
        logger.setLevel(cls.log_level)

        if not logger.handlers:
            ch = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            ch.setFormatter(formatter)
            logger.addHandler(ch)

        cls._loggers[name] = logger
        return logger

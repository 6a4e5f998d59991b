from __future__ import annotations

import logging

from notes.config import NotesConfig

LOGGER_NAME = "notes"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(config: NotesConfig) -> logging.Logger:
    """Configure the ``notes`` logger to append to ``config.log_path``.

    Meant to be called once at start-up; the returned logger is handed to
    :class:`notes.store.NoteStore`.  A second call swaps the file handler so
    the logger follows the new storage directory.
    """
    config.storage_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    # file only, the console front-end prints its own messages
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fh = logging.FileHandler(config.log_path, mode="a", encoding="utf-8")
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(fh)

    logger.info("Logging initialized. log_file=%s", config.log_path)
    return logger

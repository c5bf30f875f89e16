# SPDX-License-Identifier: GPL-2.0-or-later
import logging
import os
import pathlib
from logging.handlers import RotatingFileHandler

from qtpy.QtCore import QStandardPaths

LOG_NAME = "userdata.log"

_file_handler = None


def init_logger(directory=None):
    """
    Log file setup for applications embedding the compiler (the package has no
    entry point of its own). Compile warnings go to <directory>/userdata.log,
    by default in the app-local data location. Calling it again moves the log.
    """
    global _file_handler

    logging.basicConfig(level=logging.INFO)
    if directory is None:
        directory = QStandardPaths.writableLocation(QStandardPaths.AppLocalDataLocation)
    pathlib.Path(directory).mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    if _file_handler is not None:
        root.removeHandler(_file_handler)
        _file_handler.close()
    _file_handler = RotatingFileHandler(os.path.join(directory, LOG_NAME), maxBytes=5 * 1024 * 1024, backupCount=5)
    _file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"))
    root.addHandler(_file_handler)
    return _file_handler

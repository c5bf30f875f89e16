# SPDX-License-Identifier: GPL-2.0-or-later
"""Persisted settings."""
import os

from qtpy.QtCore import QSettings, QStandardPaths

ORGANIZATION = "GK6X"
APPLICATION = "UserData"

DATA_ROOT_KEY = "data_root"

_settings = None


def settings():
    global _settings
    if _settings is None:
        _settings = QSettings(QSettings.IniFormat, QSettings.UserScope, ORGANIZATION, APPLICATION)
    return _settings


def reset():
    """Drops the cached QSettings, the next access reopens them (tests move the settings path)."""
    global _settings
    _settings = None


def get(key, default=None):
    return settings().value(key, default)


def set(key, value):
    settings().setValue(key, value)
    settings().sync()


def data_root():
    """Directory holding the lighting/ effect files."""
    root = get(DATA_ROOT_KEY)
    if root:
        return str(root)
    return os.path.join(QStandardPaths.writableLocation(QStandardPaths.AppDataLocation), "Data")

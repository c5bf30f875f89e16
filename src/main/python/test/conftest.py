# SPDX-License-Identifier: GPL-2.0-or-later
"""Pytest configuration - runs before any tests."""

import json
import os

import pytest
from qtpy.QtCore import QSettings

import storage
from keyboard_state import KeyboardState
from keycodes.driver_values import DriverValue


# location codes of the fake keyboard used by the tests
TEST_KEYS = {
    "Esc": 0,
    "F1": 1,
    "A": 10,
    "B": 11,
    "C": 12,
    "Space": 20,
    "LCtrl": 30,
    "LShift": 31,
}


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path):
    """Keep QSettings away from the real user settings."""
    settings_dir = tmp_path / "settings"
    settings_dir.mkdir()
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(settings_dir))
    storage.reset()
    yield settings_dir
    storage.reset()


@pytest.fixture
def keyboard():
    return KeyboardState(0x12345678, [(DriverValue.resolve(name), code) for name, code in TEST_KEYS.items()])


@pytest.fixture
def data_root(tmp_path):
    root = tmp_path / "data"
    (root / "lighting").mkdir(parents=True)
    return root


@pytest.fixture
def write_effect(data_root):
    """Writes <data_root>/lighting/<name>.le, dicts are dumped as JSON."""

    def write(name, content):
        path = os.path.join(str(data_root), "lighting", name + ".le")
        with open(path, "w", encoding="utf-8") as outf:
            if isinstance(content, str):
                outf.write(content)
            else:
                json.dump(content, outf)
        return path
    return write


@pytest.fixture
def write_profile(tmp_path):
    def write(text, name="profile.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write

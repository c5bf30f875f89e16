# SPDX-License-Identifier: GPL-2.0-or-later
"""Closed enums used by user data files, and their text parsing."""
from enum import Enum, IntEnum


class KeyboardLayer(IntEnum):
    Base = 1
    Layer1 = 2
    Layer2 = 3
    Layer3 = 4


class MacroRepeatType(IntEnum):
    RepeatXTimes = 1
    ReleaseKeyToStop = 2
    PressKeyAgainToStop = 3


class MacroKeyState(IntEnum):
    Down = 0
    Up = 1


class MacroKeyType(IntEnum):
    Key = 1
    Mouse = 2


class LightingEffectType(IntEnum):
    Static = 0
    Dynamic = 1


class LightingEffectColorType(IntEnum):
    Monochrome = 0
    RGB = 1
    Breathing = 2


class GroupType(Enum):
    NONE = "none"
    LAYER = "layer"
    MACRO = "macro"
    LIGHTING = "lighting"


# extra spellings accepted on top of the member names
ENUM_ALIASES = {
    LightingEffectColorType: {"rainbow": LightingEffectColorType.RGB},
}

_name_tables = dict()


def _name_table(enum_cls):
    table = _name_tables.get(enum_cls)
    if table is None:
        table = {
            "exact": {m.name: m for m in enum_cls},
            "lower": {m.name.lower(): m for m in enum_cls},
        }
        for alias, member in ENUM_ALIASES.get(enum_cls, {}).items():
            table["exact"].setdefault(alias, member)
            table["lower"].setdefault(alias.lower(), member)
        _name_tables[enum_cls] = table
    return table


def parse_enum(enum_cls, value, default=None, ignore_case=True):
    """
    Parses a member name (or an ordinal, as int or numeric string) into a member of enum_cls.

    Ordinals must name a defined member. Anything else returns default.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        try:
            return enum_cls(value)
        except ValueError:
            return default
    if not isinstance(value, str):
        return default

    text = value.strip()
    table = _name_table(enum_cls)
    if ignore_case:
        member = table["lower"].get(text.lower())
    else:
        member = table["exact"].get(text)
    if member is not None:
        return member

    try:
        return enum_cls(int(text))
    except ValueError:
        return default


def parse_layer(value, ignore_case=True):
    return parse_enum(KeyboardLayer, value, ignore_case=ignore_case)

# SPDX-License-Identifier: GPL-2.0-or-later
"""
Driver value encoding shared by the keymap, macro and lighting data.

A driver value is a 32-bit word:
    [type:8] [data1:8] [code:8] [data2:8]

    key:    type=0x02, data1 = modifier bits, code = HID usage
    mouse:  type=0x01, data1 = 0x01, data2 = button bit
    macro:  type=0x0A, data1 = 0x01, data2 = macro id

0xFFFFFFFF marks an unbound key.
"""
from enum import Enum, IntEnum

from keycodes.driver_values import DriverValueModifier

UNUSED_KEY_VALUE = 0xFFFFFFFF

MACRO_TAG = 0x0A010000
MACRO_TAG_MASK = 0xFFFFFF00
MAX_MACRO_ID = 0xFF
MACRO_ID_LIMIT = MAX_MACRO_ID + 1


class DriverValueType(IntEnum):
    NONE = 0x00
    MOUSE = 0x01
    KEY = 0x02
    MACRO = 0x0A


class DriverValueCategory(Enum):
    KEY = "key"
    MODIFIER = "modifier"
    MOUSE = "mouse"
    MACRO = "macro"
    UNUSED = "unused"


class DecodedValue:
    """ Result of classify(); fields not meaningful for the category are 0/None """

    def __init__(self, category, raw, modifiers=0, code=0, macro_id=None):
        self.category = category
        self.raw = raw
        self.modifiers = modifiers
        self.code = code
        self.macro_id = macro_id

    def __eq__(self, other):
        return isinstance(other, DecodedValue) and \
            (self.category, self.raw, self.modifiers, self.code, self.macro_id) == \
            (other.category, other.raw, other.modifiers, other.code, other.macro_id)

    def __repr__(self):
        return "DecodedValue<{} raw=0x{:08X} modifiers=0x{:02X} code=0x{:02X} macro_id={}>".format(
            self.category.value, self.raw, self.modifiers, self.code, self.macro_id)


def get_key_type(value):
    if value == UNUSED_KEY_VALUE:
        return DriverValueType.NONE
    try:
        return DriverValueType((value >> 24) & 0xFF)
    except ValueError:
        return DriverValueType.NONE


def get_key_data1(value):
    return (value >> 16) & 0xFF


def get_key_data2(value):
    return value & 0xFF


def get_short_driver_value(value):
    """ HID usage of a key value, as used by macro actions """
    return (value >> 8) & 0xFF


def get_modifiers(value):
    if get_key_type(value) != DriverValueType.KEY:
        return DriverValueModifier.NONE
    return DriverValueModifier(get_key_data1(value))


def make_macro_value(macro_id):
    if not 0 <= macro_id <= MAX_MACRO_ID:
        raise ValueError("macro id {} does not fit in a driver value".format(macro_id))
    return MACRO_TAG | macro_id


def get_macro_id(value, limit=MACRO_ID_LIMIT):
    """ Returns the macro id packed in value, or None if value isn't a macro reference below limit """
    if (value & MACRO_TAG_MASK) != MACRO_TAG:
        return None
    macro_id = get_key_data2(value)
    if macro_id >= limit:
        return None
    return macro_id


def is_macro_value(value, limit=MACRO_ID_LIMIT):
    return get_macro_id(value, limit) is not None


def classify(value, macro_limit=MACRO_ID_LIMIT):
    value &= 0xFFFFFFFF
    if value == UNUSED_KEY_VALUE:
        return DecodedValue(DriverValueCategory.UNUSED, value)

    macro_id = get_macro_id(value, macro_limit)
    if macro_id is not None:
        return DecodedValue(DriverValueCategory.MACRO, value, macro_id=macro_id)

    key_type = get_key_type(value)
    if key_type == DriverValueType.MOUSE:
        return DecodedValue(DriverValueCategory.MOUSE, value, code=get_key_data2(value))
    if key_type == DriverValueType.KEY:
        modifiers = get_key_data1(value)
        code = get_short_driver_value(value)
        if code == 0 and modifiers:
            return DecodedValue(DriverValueCategory.MODIFIER, value, modifiers=modifiers)
        return DecodedValue(DriverValueCategory.KEY, value, modifiers=modifiers, code=code)

    # anything else (including out of range macro ids) is passed through as a raw key value
    return DecodedValue(DriverValueCategory.KEY, value, code=get_short_driver_value(value))

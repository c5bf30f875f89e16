# coding: utf-8

# SPDX-License-Identifier: GPL-2.0-or-later

from enum import IntEnum, IntFlag


class DriverValueModifier(IntFlag):
    """ Modifier bits carried in data1 of a key driver value """

    NONE = 0x00
    LCtrl = 0x01
    LShift = 0x02
    LAlt = 0x04
    LWin = 0x08
    RCtrl = 0x10
    RShift = 0x20
    RAlt = 0x40
    RWin = 0x80


class DriverValueMouseButton(IntEnum):
    LButton = 0x01
    RButton = 0x02
    MButton = 0x04
    Back = 0x08
    Advance = 0x10


KEY_TAG = 0x02000000
MOUSE_TAG = 0x01010000


def key_value(usage):
    return KEY_TAG | (usage << 8)


def modifier_value(modifier):
    return KEY_TAG | (int(modifier) << 16)


def mouse_value(button):
    return MOUSE_TAG | int(button)


class DriverValue:

    name_to_driver_value = dict()
    lower_name_to_driver_value = dict()
    value_to_driver_value = dict()

    def __init__(self, name, value, alias=None, modifier=None, mouse_button=None):
        self.name = name
        self.value = value
        # set for the eight modifier keys and the five mouse buttons, macro actions need them
        self.modifier = modifier
        self.mouse_button = mouse_button

        self.alias = [self.name]
        if alias:
            self.alias += alias

        for n in self.alias:
            if n in self.name_to_driver_value:
                raise RuntimeError("Misconfigured: two driver values claim the same name {}".format(n))
            self.name_to_driver_value[n] = self
            self.lower_name_to_driver_value[n.lower()] = self
        # first registration wins so that name_of() reports the canonical name
        self.value_to_driver_value.setdefault(value, self)

    @classmethod
    def find(cls, name, ignore_case=False):
        """ Finds the entry registered under name (or one of its aliases) """
        if not isinstance(name, str):
            return None
        if ignore_case:
            return cls.lower_name_to_driver_value.get(name.strip().lower())
        return cls.name_to_driver_value.get(name.strip())

    @classmethod
    def resolve(cls, name, ignore_case=False):
        """ Translates a symbolic key name into its driver value, or None """
        entry = cls.find(name, ignore_case)
        if entry is None:
            return None
        return entry.value

    @classmethod
    def name_of(cls, value):
        entry = cls.value_to_driver_value.get(value)
        if entry is None:
            return "0x{:08X}".format(value)
        return entry.name

    def __repr__(self):
        return "DriverValue<{}=0x{:08X}>".format(self.name, self.value)


DV = DriverValue

DRIVER_VALUES_LETTERS = [DV(chr(ord("A") + x), key_value(0x04 + x)) for x in range(26)]

DRIVER_VALUES_DIGITS = [DV("D{}".format(x + 1), key_value(0x1E + x)) for x in range(9)] + [
    DV("D0", key_value(0x27)),
]

DRIVER_VALUES_BASIC = [
    DV("Enter", key_value(0x28), alias=["Return"]),
    DV("Esc", key_value(0x29), alias=["Escape"]),
    DV("Backspace", key_value(0x2A)),
    DV("Tab", key_value(0x2B)),
    DV("Space", key_value(0x2C)),
    DV("Subtract", key_value(0x2D), alias=["Minus"]),
    DV("Add", key_value(0x2E), alias=["Equals"]),
    DV("OpenSquareBrace", key_value(0x2F)),
    DV("CloseSquareBrace", key_value(0x30)),
    DV("Backslash", key_value(0x31)),
    DV("AltBackslash", key_value(0x32), alias=["NonUsHash"]),
    DV("Semicolon", key_value(0x33)),
    DV("Quotes", key_value(0x34), alias=["Quote"]),
    DV("BackTick", key_value(0x35), alias=["Grave"]),
    DV("Comma", key_value(0x36)),
    DV("Period", key_value(0x37)),
    DV("Slash", key_value(0x38)),
    DV("CapsLock", key_value(0x39)),
]

DRIVER_VALUES_FUNCTION = [DV("F{}".format(x + 1), key_value(0x3A + x)) for x in range(12)] + \
    [DV("F{}".format(x + 13), key_value(0x68 + x)) for x in range(12)]

DRIVER_VALUES_NAV = [
    DV("PrintScreen", key_value(0x46)),
    DV("ScrollLock", key_value(0x47)),
    DV("Pause", key_value(0x48), alias=["Break"]),
    DV("Insert", key_value(0x49)),
    DV("Home", key_value(0x4A)),
    DV("PageUp", key_value(0x4B)),
    DV("Delete", key_value(0x4C)),
    DV("End", key_value(0x4D)),
    DV("PageDown", key_value(0x4E)),
    DV("Right", key_value(0x4F)),
    DV("Left", key_value(0x50)),
    DV("Down", key_value(0x51)),
    DV("Up", key_value(0x52)),
    DV("Menu", key_value(0x65), alias=["Application"]),
    DV("Backslash2", key_value(0x64), alias=["NonUsBackslash"]),
]

DRIVER_VALUES_NUMPAD = [
    DV("NumLock", key_value(0x53)),
    DV("NumPadSlash", key_value(0x54)),
    DV("NumPadAsterisk", key_value(0x55)),
    DV("NumPadSubtract", key_value(0x56)),
    DV("NumPadAdd", key_value(0x57)),
    DV("NumPadEnter", key_value(0x58)),
] + [DV("NumPad{}".format(x + 1), key_value(0x59 + x)) for x in range(9)] + [
    DV("NumPad0", key_value(0x62)),
    DV("NumPadPeriod", key_value(0x63)),
]

DRIVER_VALUES_MODIFIERS = [
    DV("LCtrl", modifier_value(DriverValueModifier.LCtrl), modifier=DriverValueModifier.LCtrl),
    DV("LShift", modifier_value(DriverValueModifier.LShift), modifier=DriverValueModifier.LShift),
    DV("LAlt", modifier_value(DriverValueModifier.LAlt), modifier=DriverValueModifier.LAlt),
    DV("LWin", modifier_value(DriverValueModifier.LWin), modifier=DriverValueModifier.LWin),
    DV("RCtrl", modifier_value(DriverValueModifier.RCtrl), modifier=DriverValueModifier.RCtrl),
    DV("RShift", modifier_value(DriverValueModifier.RShift), modifier=DriverValueModifier.RShift),
    DV("RAlt", modifier_value(DriverValueModifier.RAlt), modifier=DriverValueModifier.RAlt),
    DV("RWin", modifier_value(DriverValueModifier.RWin), modifier=DriverValueModifier.RWin),
]

DRIVER_VALUES_MOUSE = [
    DV("MouseLClick", mouse_value(DriverValueMouseButton.LButton), mouse_button=DriverValueMouseButton.LButton),
    DV("MouseRClick", mouse_value(DriverValueMouseButton.RButton), mouse_button=DriverValueMouseButton.RButton),
    DV("MouseMClick", mouse_value(DriverValueMouseButton.MButton), mouse_button=DriverValueMouseButton.MButton),
    DV("MouseBack", mouse_value(DriverValueMouseButton.Back), mouse_button=DriverValueMouseButton.Back),
    DV("MouseAdvance", mouse_value(DriverValueMouseButton.Advance), mouse_button=DriverValueMouseButton.Advance),
]

DRIVER_VALUES = (DRIVER_VALUES_LETTERS + DRIVER_VALUES_DIGITS + DRIVER_VALUES_BASIC + DRIVER_VALUES_FUNCTION +
                 DRIVER_VALUES_NAV + DRIVER_VALUES_NUMPAD + DRIVER_VALUES_MODIFIERS + DRIVER_VALUES_MOUSE)

DV = None

# SPDX-License-Identifier: GPL-2.0-or-later
"""Resolution of key tokens to driver values and key location codes."""
import re

from keycodes.driver_values import DriverValue

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DECIMAL = re.compile(r"[+-]?[0-9]+")


def parse_hex_uint32(text):
    """ Parses bare hex digits (no prefix) into a uint32, or None """
    text = text.strip()
    if not _HEX_DIGITS.fullmatch(text):
        return None
    value = int(text, 16)
    if value > 0xFFFFFFFF:
        return None
    return value


def parse_hex_literal(token):
    """ Parses a "0x"-prefixed hex literal, or None if token isn't one """
    token = token.strip()
    if not token.startswith("0x"):
        return None
    return parse_hex_uint32(token[2:])


def parse_int(text, minimum, maximum):
    """ Integer parse constrained to [minimum, maximum], or None """
    text = text.strip()
    if not _DECIMAL.fullmatch(text):
        return None
    try:
        value = int(text)
    except ValueError:
        # digit count beyond the interpreter's int conversion limit
        return None
    if not minimum <= value <= maximum:
        return None
    return value


def resolve_driver_value(token):
    """
    Resolves a key token from a profile line: a hex literal, else a
    case-sensitive driver value name. Returns None when neither applies.
    """
    token = token.strip()
    if token.startswith("0x"):
        return parse_hex_literal(token)
    return DriverValue.resolve(token)


def resolve_location_code(keyboard, token):
    """
    Resolves a key reference from a lighting file into a key location code.

    Strings are tried as "0x" driver value, plain integer location code, then
    driver value name (any case). JSON integers are location codes already.
    Returns None when the key can't be resolved.
    """
    if isinstance(token, bool):
        return None
    if isinstance(token, int):
        return token
    if not isinstance(token, str):
        return None

    token = token.strip()
    if token.startswith("0x"):
        driver_value = parse_hex_uint32(token[2:])
        if driver_value is None:
            return None
        return keyboard.get_location_code(driver_value)

    location_code = parse_int(token, -0x80000000, 0x7FFFFFFF)
    if location_code is not None:
        return location_code

    driver_value = DriverValue.resolve(token, ignore_case=True)
    if driver_value is None:
        return None
    return keyboard.get_location_code(driver_value)

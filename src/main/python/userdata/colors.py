# SPDX-License-Identifier: GPL-2.0-or-later
"""
Lighting colors.

Files use AARRGGBB text ("0xAARRGGBB" or "#AARRGGBB"); the keyboard wants
R | G << 8 | B << 16 | A << 24.
"""
from userdata.key_resolver import parse_hex_uint32

# what a Param gets when its color is present but has no 0x/# prefix
INVALID_COLOR = 0xFFFFFFFF


def pack_color(r, g, b, a):
    return (r & 0xFF) | ((g & 0xFF) << 8) | ((b & 0xFF) << 16) | ((a & 0xFF) << 24)


def unpack_color(color):
    """ Splits a packed color into (r, g, b, a) """
    return color & 0xFF, (color >> 8) & 0xFF, (color >> 16) & 0xFF, (color >> 24) & 0xFF


def parse_color(text, fixup_alpha=False):
    """
    Parses an AARRGGBB color string into a packed RGBA value, or None.

    With fixup_alpha, a zero alpha on a non-black color becomes 0xFF: static
    lighting keys are usually written without alpha but must stay visible.
    """
    if not isinstance(text, str) or not text:
        return None
    if text.startswith("0x"):
        argb = parse_hex_uint32(text[2:])
    elif text.startswith("#"):
        argb = parse_hex_uint32(text[1:])
    else:
        return None
    if argb is None:
        return None

    a = (argb >> 24) & 0xFF
    r = (argb >> 16) & 0xFF
    g = (argb >> 8) & 0xFF
    b = argb & 0xFF
    if fixup_alpha and a == 0 and (r or g or b):
        a = 0xFF
    return pack_color(r, g, b, a)

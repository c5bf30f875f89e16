# SPDX-License-Identifier: GPL-2.0-or-later
"""
Lighting effect files (<data root>/lighting/<name>.le).

Static effect:
    {"Type": "Static", "Data": {"<key>": "#AARRGGBB", ...}}

Dynamic effect:
    {"Type": "Dynamic",
     "Frames": [{"Count": 3, "Data": ["<key>", ...]}, ...],
     "LEConfigs": [{"Type": "RGB", "Color": "0xAARRGGBB", "Count": 360, "StayCount": 0,
                    "UseRawValues": false, "Keys": ["<key>", ...]}, ...]}

A <key> is a "0x" driver value, a location code, or a driver value name.
"""
import json
import logging
import os

from userdata.colors import INVALID_COLOR, parse_color
from userdata.enums import LightingEffectColorType, LightingEffectType, parse_enum
from userdata.key_resolver import resolve_location_code
from userdata.models import Frame, LightingEffect, Param

LIGHTING_DIR = "lighting"
LIGHTING_EXT = ".le"


class LightingLoadResult:

    def __init__(self, effect=None, error=None):
        self.effect = effect
        self.error = error

    @property
    def ok(self):
        return self.effect is not None

    @classmethod
    def failed(cls, message):
        return cls(error=message)

    def __repr__(self):
        if self.ok:
            return "LightingLoadResult<ok {}>".format(self.effect)
        return "LightingLoadResult<failed: {}>".format(self.error)


def lighting_effect_path(data_root, name):
    return os.path.join(data_root, LIGHTING_DIR, name + LIGHTING_EXT)


def _get_int(obj, *names):
    """ First of names present in obj holding a JSON integer """
    for name in names:
        value = obj.get(name)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _parse_type(json_obj, enum_cls, default):
    return parse_enum(enum_cls, json_obj.get("Type"), default=default)


def _load_static(keyboard, effect, json_obj):
    data = json_obj.get("Data")
    if not isinstance(data, dict):
        return
    for key, color_str in data.items():
        location_code = resolve_location_code(keyboard, key)
        color = parse_color(color_str, fixup_alpha=True)
        if location_code is not None and color is not None:
            effect.key_colors[location_code] = color


def _load_frame(keyboard, frame_obj):
    count = _get_int(frame_obj, "Count")
    frame = Frame(count if count is not None and count > 0 else 1)

    data = frame_obj.get("Data")
    if isinstance(data, dict):
        # values hold a per-key color which the keyboard never gets sent (DIY lighting leftover?)
        keys = data.keys()
    elif isinstance(data, list):
        keys = data
    else:
        keys = []
    for key in keys:
        location_code = resolve_location_code(keyboard, key)
        if location_code is not None:
            frame.key_codes.add(location_code)
    return frame


def _load_param(keyboard, config):
    param = Param()
    param.color_type = _parse_type(config, LightingEffectColorType, LightingEffectColorType.Monochrome)

    color_str = config.get("Color")
    if isinstance(color_str, str):
        color = parse_color(color_str, fixup_alpha=False)
        if color is None:
            # bad digits after a 0x/# prefix read as black, other text is invalid
            color = 0 if color_str.startswith(("0x", "#")) else INVALID_COLOR
        param.color = color

    val1 = _get_int(config, "Count", "Val1")
    if val1 is not None:
        param.val1 = val1
    val2 = _get_int(config, "StayCount", "Val2")
    if val2 is not None:
        param.val2 = val2

    use_raw_values = config.get("UseRawValues")
    if isinstance(use_raw_values, bool):
        param.use_raw_values = use_raw_values
    elif isinstance(use_raw_values, int):
        # older files store 0/1
        param.use_raw_values = use_raw_values == 1

    keys = config.get("Keys")
    if isinstance(keys, list):
        for key in keys:
            location_code = resolve_location_code(keyboard, key)
            if location_code is not None:
                param.keys.add(location_code)
    return param


def _load_dynamic(keyboard, effect, json_obj):
    frames = json_obj.get("Frames")
    if isinstance(frames, list):
        for frame_obj in frames:
            if not isinstance(frame_obj, dict):
                continue
            frame = _load_frame(keyboard, frame_obj)
            effect.frames.append(frame)
            effect.total_frames += frame.count

    configs = json_obj.get("LEConfigs")
    if isinstance(configs, list):
        for config in configs:
            if not isinstance(config, dict):
                continue
            param = _load_param(keyboard, config)
            if param.keys:
                effect.params.append(param)


def load_lighting_effect(keyboard, name, data_root):
    """
    Loads the named lighting effect. Never raises: any problem (missing file,
    bad JSON) comes back as a failed LightingLoadResult.
    """
    if not name:
        return LightingLoadResult.failed("no lighting effect name")
    path = lighting_effect_path(data_root, name)
    if not os.path.isfile(path):
        return LightingLoadResult.failed("file not found: {}".format(path))

    try:
        with open(path, "r", encoding="utf-8-sig") as inf:
            json_obj = json.load(inf)
        if not isinstance(json_obj, dict):
            return LightingLoadResult.failed("{} doesn't hold a JSON object".format(path))

        effect = LightingEffect(name)
        effect.type = _parse_type(json_obj, LightingEffectType, LightingEffectType.Dynamic)
        if effect.type == LightingEffectType.Static:
            _load_static(keyboard, effect, json_obj)
        else:
            _load_dynamic(keyboard, effect, json_obj)
    except (OSError, UnicodeDecodeError, ValueError, TypeError, RecursionError) as e:
        return LightingLoadResult.failed("unable to load {}: {}".format(path, e))

    logging.debug("Loaded lighting effect %s", effect)
    return LightingLoadResult(effect)

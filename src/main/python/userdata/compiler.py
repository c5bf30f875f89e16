# SPDX-License-Identifier: GPL-2.0-or-later
"""
User data file compiler.

The file is line based. "#" starts a comment line, "[...]" opens a group:

    [Base, FnLayer1]            key remaps, applied to every listed layer
    Esc: CapsLock
    F1: LCtrl+C
    F2: Macro(Copy)

    [Macro(Copy,20,RepeatXTimes,1,false)]   name, delay, repeat type, repeat count, trailing delay
    press: LCtrl+C
    down: A:100                 action: keys[:delay]

    [Lighting(Rainbow,Base,Layer1)]         effect name, then the layers using it
    [NoLighting(Layer2)]        no lighting on the listed layers
    [NoLighting]                clear all lighting

Lighting and macro groups are compiled before layers so that key remaps can
refer to macros defined anywhere in the file.
"""
import logging
import os

import storage
from keycodes.driver_values import DriverValue
from protocol.key_values import DriverValueType, get_key_type, get_short_driver_value, make_macro_value, \
    MACRO_ID_LIMIT
from userdata.enums import GroupType, KeyboardLayer, MacroKeyState, MacroKeyType, MacroRepeatType, parse_enum, \
    parse_layer
from userdata.key_resolver import parse_hex_literal, parse_int, resolve_driver_value
from userdata.lighting import load_lighting_effect
from userdata.models import CompiledProfile, LightingEffect, Macro, MacroAction
from userdata.registry import NameRegistry

FIRST_PASS = (GroupType.LIGHTING, GroupType.MACRO)
SECOND_PASS = (GroupType.LAYER,)

# group name -> (layer, fn)
LAYER_GROUPS = {
    "base": (KeyboardLayer.Base, False),
    "layer1": (KeyboardLayer.Layer1, False),
    "layer2": (KeyboardLayer.Layer2, False),
    "layer3": (KeyboardLayer.Layer3, False),
    "fnbase": (KeyboardLayer.Base, True),
    "fnlayer1": (KeyboardLayer.Layer1, True),
    "fnlayer2": (KeyboardLayer.Layer2, True),
    "fnlayer3": (KeyboardLayer.Layer3, True),
}

MACRO_KEY_STATES = {
    "press": (MacroKeyState.Down, MacroKeyState.Up),
    "down": (MacroKeyState.Down,),
    "up": (MacroKeyState.Up,),
}

UINT16_MAX = 0xFFFF
BYTE_MAX = 0xFF


def parse_bool(text):
    text = text.strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def split_entries(text, sep):
    """ Splits text on sep dropping empty entries """
    return [part for part in text.split(sep) if part]


class GroupHeader:
    """
    A parsed "[...]" line.

    "Kind(a, b, c)" gives names=["Kind"] and inner=["a", "b", "c"]; without
    parentheses the text is a comma separated list of names and inner is None.
    """

    def __init__(self, names, inner=None):
        self.names = names
        self.inner = inner

    @property
    def inner_name(self):
        if self.inner:
            return self.inner[0] or None
        return None

    @classmethod
    def parse(cls, line):
        end_brace = line.find("]")
        if end_brace <= 1:
            return None
        full_name = line[1:end_brace].strip()
        open_parenth = full_name.find("(")
        close_parenth = full_name.find(")")
        if 0 < open_parenth < close_parenth:
            inner = [part.strip() for part in split_entries(full_name[open_parenth + 1:close_parenth], ",")]
            return cls([full_name[:open_parenth].strip()], inner)
        return cls([part.strip() for part in split_entries(full_name, ",")])

    def __repr__(self):
        return "GroupHeader<{} {}>".format(self.names, self.inner)


class ProfileCompiler:
    """ Compiles the lines of a user data file into a CompiledProfile """

    def __init__(self, keyboard, data_root=None):
        self.keyboard = keyboard
        self.data_root = data_root if data_root is not None else storage.data_root()
        self.profile = CompiledProfile()
        self.macros = NameRegistry(limit=MACRO_ID_LIMIT)
        self.lighting_effects = NameRegistry()

    def compile(self, lines):
        lines = list(lines)
        self.compile_pass(lines, FIRST_PASS)
        self.compile_pass(lines, SECOND_PASS)
        return self.finalize()

    def finalize(self):
        self.profile.macros = dict(self.macros.finalize())
        self.profile.lighting_effects = dict(self.lighting_effects.finalize())
        if len(self.profile.lighting_effects) > LightingEffect.MAX_EFFECTS:
            logging.warning("%d lighting effects defined, the keyboard holds at most %d",
                            len(self.profile.lighting_effects), LightingEffect.MAX_EFFECTS)
        logging.info("Compiled user data: %s", self.profile)
        return self.profile

    def compile_pass(self, lines, groups):
        self.current_group = GroupType.NONE
        self.current_macro = None
        self.current_layers = []

        for line in lines:
            line = line.strip()
            if line.startswith("#"):
                continue
            if line.startswith("["):
                self.open_group(line, groups)
            elif self.current_group == GroupType.LAYER:
                self.compile_layer_line(line)
            elif self.current_group == GroupType.MACRO:
                self.compile_macro_line(line)

    def open_group(self, line, groups):
        self.current_group = GroupType.NONE
        self.current_layers = []

        header = GroupHeader.parse(line)
        if header is None:
            return
        for name in header.names:
            kind = name.lower()
            if kind in LAYER_GROUPS:
                if GroupType.LAYER in groups:
                    self.current_group = GroupType.LAYER
                    layer = self.profile.find_or_add_layer(*LAYER_GROUPS[kind])
                    if layer not in self.current_layers:
                        self.current_layers.append(layer)
            elif kind == "macro":
                if GroupType.MACRO in groups and header.inner_name:
                    self.current_group = GroupType.MACRO
                    self.current_macro = self.open_macro(header.inner)
            elif kind == "lighting":
                if GroupType.LIGHTING in groups and header.inner_name:
                    self.current_group = GroupType.LIGHTING
                    self.open_lighting(header.inner)
            elif kind == "nolighting":
                self.apply_no_lighting(header.inner)

    def open_macro(self, inner):
        name = inner[0]
        macro = self.macros.get(name)
        if macro is None:
            macro = self.macros.add(name, Macro(name))

        # a repeated header keeps the actions collected so far and takes the new settings
        macro.default_delay = 0
        macro.repeat_type = MacroRepeatType.RepeatXTimes
        macro.repeat_count = 1
        macro.use_trailing_delay = False
        if len(inner) > 1:
            macro.default_delay = parse_int(inner[1], 0, UINT16_MAX) or 0
        if len(inner) > 2:
            macro.repeat_type = parse_enum(MacroRepeatType, inner[2], default=MacroRepeatType.RepeatXTimes)
        if len(inner) > 3:
            macro.repeat_count = parse_int(inner[3], 0, BYTE_MAX) or 0
        if len(inner) > 4:
            macro.use_trailing_delay = bool(parse_bool(inner[4]))
        if macro.repeat_count == 0:
            # a macro which doesn't run at all is pointless
            macro.repeat_count = 1
        return macro

    def open_lighting(self, inner):
        name = inner[0]
        effect = self.lighting_effects.get(name)
        if effect is None:
            result = load_lighting_effect(self.keyboard, name, self.data_root)
            if not result.ok:
                logging.warning("Failed to load lighting effect '%s': %s", name, result.error)
                return
            effect = self.lighting_effects.add(name, result.effect)
            self.lighting_effects.reference(name)

        for layer_name in inner[1:]:
            layer = parse_layer(layer_name)
            if layer is not None:
                effect.layers.add(layer)

    def apply_no_lighting(self, inner):
        if inner is None:
            self.profile.no_lighting = True
            return
        for layer_name in inner:
            layer = parse_layer(layer_name)
            if layer is not None:
                self.profile.no_lighting_layers.add(layer)

    def resolve_source(self, tokens):
        src_value = 0
        for token in tokens:
            value = resolve_driver_value(token)
            if value is not None:
                src_value = value
        return src_value

    def resolve_macro_reference(self, token, src_value):
        """ Driver value for a "macro(name)" token, or None """
        open_parenth = token.find("(")
        close_parenth = token.find(")")
        if not 0 < open_parenth < close_parenth:
            return None
        name = token[open_parenth + 1:close_parenth].strip()
        if name not in self.macros:
            logging.warning("Failed to find macro '%s' bound to key %s", name, DriverValue.name_of(src_value))
            return None
        macro_id = self.macros.reference(name)
        if macro_id is None:
            logging.error("Too many macros, unable to bind macro '%s' to key %s",
                          name, DriverValue.name_of(src_value))
            return None
        return make_macro_value(macro_id)

    def resolve_destination(self, tokens, src_value):
        dst_value = 0
        for token in tokens:
            token = token.strip()
            if token.startswith("0x"):
                value = parse_hex_literal(token)
                if value is not None:
                    dst_value = value
            elif token.lower().startswith("macro"):
                value = self.resolve_macro_reference(token, src_value)
                if value is not None:
                    dst_value = value
            else:
                value = DriverValue.resolve(token)
                if value is None:
                    continue
                if get_key_type(value) == DriverValueType.KEY:
                    # modifiers combine with each other and with the key
                    dst_value |= value
                else:
                    dst_value = value
        return dst_value

    def compile_layer_line(self, line):
        parts = split_entries(line, ":")
        if len(parts) < 2:
            return
        src_value = self.resolve_source(split_entries(parts[0], "+"))
        if src_value == 0:
            return
        dst_value = self.resolve_destination(split_entries(parts[1], "+"), src_value)
        for layer in self.current_layers:
            layer.set_key(src_value, dst_value)

    def macro_action(self, state, token):
        """ MacroAction for a key token, or None when the token isn't a known key """
        entry = DriverValue.find(token)
        if entry is None:
            return None
        if entry.modifier is not None:
            return MacroAction(state, MacroKeyType.Key, modifier=entry.modifier)
        if entry.mouse_button is not None:
            return MacroAction(state, MacroKeyType.Mouse, key_code=int(entry.mouse_button))
        return MacroAction(state, MacroKeyType.Key, key_code=get_short_driver_value(entry.value))

    def compile_macro_line(self, line):
        parts = split_entries(line, ":")
        if len(parts) < 2:
            return
        states = MACRO_KEY_STATES.get(parts[0].strip().lower())
        if states is None:
            logging.warning("Unknown macro action '%s' in macro '%s'", parts[0].strip(), self.current_macro.name)
            return
        tokens = [token.strip() for token in split_entries(parts[1], "+")]

        delay = self.current_macro.default_delay
        if len(parts) > 2:
            line_delay = parse_int(parts[2], 0, UINT16_MAX)
            if line_delay is not None:
                delay = line_delay

        actions = []
        for state in states:
            for token in tokens:
                action = self.macro_action(state, token)
                if action is not None:
                    actions.append(action)
        # only the last action of a line waits
        if actions:
            actions[-1].delay = delay
        self.current_macro.actions.extend(actions)


def load_profile(keyboard, path, data_root=None):
    """
    Compiles the user data file at path. Returns None if there is no such file,
    malformed content never fails the load.
    """
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8-sig", errors="replace") as inf:
            lines = inf.read().splitlines()
    except OSError as e:
        logging.error("Unable to read user data %s: %s", path, e)
        return None
    if data_root is None:
        data_root = storage.data_root()
    logging.info("Loading user data %s (data root %s)", path, data_root)
    return ProfileCompiler(keyboard, data_root).compile(lines)

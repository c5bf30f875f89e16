# SPDX-License-Identifier: GPL-2.0-or-later
"""Compiled user data: key layers, macros and lighting effects."""
from typing import Dict, List, Optional, Set

from keycodes.driver_values import DriverValue, DriverValueModifier
from protocol.key_values import UNUSED_KEY_VALUE, get_macro_id
from userdata.enums import (
    KeyboardLayer, LightingEffectColorType, LightingEffectType, MacroKeyState, MacroKeyType, MacroRepeatType
)


class Layer:
    """Key remaps of one layer: source driver value -> destination driver value."""

    def __init__(self):
        self.keys: Dict[int, int] = dict()

    def get_key(self, key: int) -> int:
        return self.keys.get(key, UNUSED_KEY_VALUE)

    def set_key(self, key: int, value: int) -> bool:
        # zero means the source didn't resolve
        if key == 0:
            return False
        self.keys[key] = value
        return True

    def __len__(self):
        return len(self.keys)

    def __repr__(self):
        return "Layer<{}>".format(", ".join(
            "{}: 0x{:08X}".format(DriverValue.name_of(k), v) for k, v in self.keys.items()))


class MacroAction:

    def __init__(self, state: MacroKeyState, key_type: MacroKeyType = MacroKeyType.Key, key_code: int = 0,
                 modifier: DriverValueModifier = DriverValueModifier.NONE, delay: int = 0):
        self.state = state
        self.type = key_type
        # mouse button bits for mouse actions, HID usage for keys
        self.key_code = key_code
        self.modifier = modifier
        self.delay = delay

    def __eq__(self, other):
        return isinstance(other, MacroAction) and \
            (self.state, self.type, self.key_code, self.modifier, self.delay) == \
            (other.state, other.type, other.key_code, other.modifier, other.delay)

    def __repr__(self):
        return "MacroAction<{} {} code=0x{:02X} modifier={} delay={}>".format(
            self.state.name, self.type.name, self.key_code, int(self.modifier), self.delay)


class Macro:

    def __init__(self, name: str):
        self.name = name
        self.id: Optional[int] = None
        self.repeat_type = MacroRepeatType.RepeatXTimes
        self.repeat_count = 1
        self.default_delay = 0
        # delay the last action too, keeps timing even when the macro repeats
        self.use_trailing_delay = False
        self.actions: List[MacroAction] = []

    def __repr__(self):
        return "Macro<{} id={} repeat={}x{} delay={} trailing={} actions={}>".format(
            self.name, self.id, self.repeat_type.name, self.repeat_count, self.default_delay,
            self.use_trailing_delay, len(self.actions))


class Frame:

    def __init__(self, count: int = 1):
        # number of frames this frame is displayed for
        self.count = count
        self.key_codes: Set[int] = set()

    def __repr__(self):
        return "Frame<count={} keys={}>".format(self.count, sorted(self.key_codes))


class Param:

    def __init__(self):
        self.color = 0
        self.color_type = LightingEffectColorType.Monochrome
        self.keys: Set[int] = set()
        # "Count" (RGB, breathing)
        self.val1 = 0
        # "StayCount" (breathing)
        self.val2 = 0
        # effect files normally get val1/val2 scaled (360/val for RGB, 100/val for breathing val2)
        # before they are sent, raw values go out unmodified
        self.use_raw_values = False

    def __repr__(self):
        return "Param<{} color=0x{:08X} val1={} val2={} raw={} keys={}>".format(
            self.color_type.name, self.color, self.val1, self.val2, self.use_raw_values, sorted(self.keys))


class LightingEffect:

    # keys as seen by the lighting system
    NUM_KEYS = 132
    MAX_EFFECTS = 32
    # one uint color per key slot of static lighting
    NUM_STATIC_LIGHTING_BYTES = 704

    def __init__(self, name: str):
        self.id: Optional[int] = None
        self.name = name
        self.type = LightingEffectType.Dynamic
        self.frames: List[Frame] = []
        self.total_frames = 0
        self.params: List[Param] = []
        # static lighting: key location code -> packed RGBA
        self.key_colors: Dict[int, int] = dict()
        self.layers: Set[KeyboardLayer] = set()

    def __repr__(self):
        return "LightingEffect<{} id={} {} frames={}/{} params={} colors={} layers={}>".format(
            self.name, self.id, self.type.name, len(self.frames), self.total_frames, len(self.params),
            len(self.key_colors), sorted(layer.name for layer in self.layers))


class CompiledProfile:
    """
    Everything compiled out of one user data file. Built by ProfileCompiler,
    read-only for whoever sends it to the keyboard.
    """

    def __init__(self):
        self.layers: Dict[KeyboardLayer, Layer] = dict()
        self.fn_layers: Dict[KeyboardLayer, Layer] = dict()
        self.macros: Dict[str, Macro] = dict()
        self.lighting_effects: Dict[str, LightingEffect] = dict()
        # clear all lighting on the keyboard (not sending any lighting just leaves it alone)
        self.no_lighting = False
        self.no_lighting_layers: Set[KeyboardLayer] = set()

    def find_or_add_layer(self, layer: KeyboardLayer, fn: bool) -> Layer:
        layers = self.fn_layers if fn else self.layers
        result = layers.get(layer)
        if result is None:
            result = layers[layer] = Layer()
        return result

    def get_layer(self, layer: KeyboardLayer, fn: bool = False) -> Optional[Layer]:
        return (self.fn_layers if fn else self.layers).get(layer)

    def get_lighting_effects(self, layer: KeyboardLayer) -> List[LightingEffect]:
        return [effect for effect in self.lighting_effects.values() if layer in effect.layers]

    def is_lighting_disabled(self, layer: KeyboardLayer) -> bool:
        return self.no_lighting or layer in self.no_lighting_layers

    def _macro_ids(self, layer: KeyboardLayer) -> Set[int]:
        ids = set()
        for table in (self.layers.get(layer), self.fn_layers.get(layer)):
            if table is None:
                continue
            for value in table.keys.values():
                macro_id = get_macro_id(value)
                if macro_id is not None:
                    ids.add(macro_id)
        return ids

    def get_num_macros(self, layer: KeyboardLayer) -> int:
        """Distinct macros bound in the base and Fn tables of layer (sizes the device macro slots)."""
        return len(self._macro_ids(layer))

    def get_macro_by_id(self, macro_id: int) -> Optional[Macro]:
        for macro in self.macros.values():
            if macro.id == macro_id:
                return macro
        return None

    def get_macros(self, layer: KeyboardLayer) -> List[Macro]:
        result = []
        for macro_id in sorted(self._macro_ids(layer)):
            macro = self.get_macro_by_id(macro_id)
            if macro is not None:
                result.append(macro)
        return result

    def __repr__(self):
        return "CompiledProfile<layers={} fn_layers={} macros={} lighting={} no_lighting={}>".format(
            sorted(layer.name for layer in self.layers), sorted(layer.name for layer in self.fn_layers),
            len(self.macros), len(self.lighting_effects), self.no_lighting)

# SPDX-License-Identifier: GPL-2.0-or-later
"""Compilation of keyboard user data files (key layers, macros, lighting)."""
from .compiler import ProfileCompiler, load_profile
from .enums import (
    KeyboardLayer,
    LightingEffectColorType,
    LightingEffectType,
    MacroKeyState,
    MacroKeyType,
    MacroRepeatType,
)
from .lighting import LightingLoadResult, load_lighting_effect
from .models import CompiledProfile, Frame, Layer, LightingEffect, Macro, MacroAction, Param

__all__ = [
    'ProfileCompiler',
    'load_profile',
    'KeyboardLayer',
    'LightingEffectColorType',
    'LightingEffectType',
    'MacroKeyState',
    'MacroKeyType',
    'MacroRepeatType',
    'LightingLoadResult',
    'load_lighting_effect',
    'CompiledProfile',
    'Frame',
    'Layer',
    'LightingEffect',
    'Macro',
    'MacroAction',
    'Param',
]

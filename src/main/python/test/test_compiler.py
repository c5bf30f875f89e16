# SPDX-License-Identifier: GPL-2.0-or-later
"""Tests for the user data compiler."""
import logging

import pytest

import storage
from keycodes.driver_values import DriverValue, DriverValueModifier, DriverValueMouseButton
from protocol.key_values import UNUSED_KEY_VALUE, get_macro_id, make_macro_value
from userdata.compiler import GroupHeader, ProfileCompiler, load_profile
from userdata.enums import KeyboardLayer, MacroKeyState, MacroKeyType, MacroRepeatType
from userdata.models import MacroAction


def dv(name):
    return DriverValue.resolve(name)


@pytest.fixture
def compile_text(keyboard, data_root):
    def compile_text(text):
        return ProfileCompiler(keyboard, str(data_root)).compile(text.splitlines())
    return compile_text


class TestGroupHeader:

    def test_names(self):
        header = GroupHeader.parse("[Base, Layer1,,FnLayer2]")
        assert header.names == ["Base", "Layer1", "FnLayer2"]
        assert header.inner is None

    def test_inner(self):
        header = GroupHeader.parse("[Macro( Copy ,20)]")
        assert header.names == ["Macro"]
        assert header.inner == ["Copy", "20"]
        assert header.inner_name == "Copy"

    def test_malformed(self):
        assert GroupHeader.parse("[]") is None
        assert GroupHeader.parse("[Base") is None


class TestLayers:

    def test_simple_remap(self, compile_text):
        profile = compile_text("[Base]\nEsc: CapsLock\n")
        layer = profile.get_layer(KeyboardLayer.Base)
        assert layer.get_key(dv("Esc")) == dv("CapsLock")
        assert layer.get_key(dv("A")) == UNUSED_KEY_VALUE

    def test_multiple_layers(self, compile_text):
        profile = compile_text("[Base,Layer1]\nA: B\n")
        assert profile.get_layer(KeyboardLayer.Base).get_key(dv("A")) == dv("B")
        assert profile.get_layer(KeyboardLayer.Layer1).get_key(dv("A")) == dv("B")
        assert profile.get_layer(KeyboardLayer.Layer2) is None

    def test_fn_layers(self, compile_text):
        profile = compile_text("[FnBase, fnlayer3]\nF1: MouseLClick\n")
        assert profile.get_layer(KeyboardLayer.Base) is None
        assert profile.get_layer(KeyboardLayer.Base, fn=True).get_key(dv("F1")) == dv("MouseLClick")
        assert profile.get_layer(KeyboardLayer.Layer3, fn=True).get_key(dv("F1")) == dv("MouseLClick")

    def test_modifiers_combine(self, compile_text):
        profile = compile_text("[Base]\nF1: LCtrl+LShift+C\nF2: LCtrl+RAlt\n")
        layer = profile.get_layer(KeyboardLayer.Base)
        assert layer.get_key(dv("F1")) == 0x02030600
        # no base key, modifiers only
        assert layer.get_key(dv("F2")) == 0x02410000

    def test_non_key_destination_replaces(self, compile_text):
        profile = compile_text("[Base]\nF1: LCtrl+MouseRClick\n")
        assert profile.get_layer(KeyboardLayer.Base).get_key(dv("F1")) == dv("MouseRClick")

    def test_hex_values(self, compile_text):
        profile = compile_text("[Base]\n0x02002900: 0x02003900\n")
        assert profile.get_layer(KeyboardLayer.Base).get_key(dv("Esc")) == dv("CapsLock")

    def test_last_source_token_wins(self, compile_text):
        profile = compile_text("[Base]\nEsc+Tab: A\n")
        layer = profile.get_layer(KeyboardLayer.Base)
        assert layer.get_key(dv("Tab")) == dv("A")
        assert dv("Esc") not in layer.keys

    def test_unresolved_source_is_dropped(self, compile_text):
        profile = compile_text("[Base]\nNotAKey: A\nesc: A\n")
        assert len(profile.get_layer(KeyboardLayer.Base)) == 0

    def test_unresolved_destination_is_zero(self, compile_text):
        profile = compile_text("[Base]\nEsc: NotAKey\n")
        assert profile.get_layer(KeyboardLayer.Base).get_key(dv("Esc")) == 0

    def test_comments_and_noise(self, compile_text):
        profile = compile_text("# [Layer1]\n[Base]\n  # Esc: A\nEsc\n\nEsc: A\n")
        assert profile.get_layer(KeyboardLayer.Layer1) is None
        assert profile.get_layer(KeyboardLayer.Base).keys == {dv("Esc"): dv("A")}

    def test_unknown_group_ends_layer(self, compile_text):
        profile = compile_text("[Base]\nA: B\n[Whatever]\nC: D\n")
        assert profile.get_layer(KeyboardLayer.Base).keys == {dv("A"): dv("B")}


class TestMacros:

    def test_header(self, compile_text):
        profile = compile_text("[Macro(Caps,100,RepeatXTimes,3,true)]\npress: A\n[Base]\nEsc: Macro(Caps)\n")
        macro = profile.macros["Caps"]
        assert macro.default_delay == 100
        assert macro.repeat_type == MacroRepeatType.RepeatXTimes
        assert macro.repeat_count == 3
        assert macro.use_trailing_delay

    def test_header_defaults(self, compile_text):
        profile = compile_text("[Macro(Plain)]\n[Macro(Zero,5,ReleaseKeyToStop,0)]\n")
        plain = profile.macros["Plain"]
        assert (plain.default_delay, plain.repeat_type, plain.repeat_count, plain.use_trailing_delay) == \
            (0, MacroRepeatType.RepeatXTimes, 1, False)
        zero = profile.macros["Zero"]
        assert zero.repeat_type == MacroRepeatType.ReleaseKeyToStop
        assert zero.repeat_count == 1

    def test_repeat_type_ordinal_and_case(self, compile_text):
        profile = compile_text("[Macro(A,0,3)]\n[Macro(B,0,presskeyagaintostop)]\n[Macro(C,0,Bogus)]\n")
        assert profile.macros["A"].repeat_type == MacroRepeatType.PressKeyAgainToStop
        assert profile.macros["B"].repeat_type == MacroRepeatType.PressKeyAgainToStop
        assert profile.macros["C"].repeat_type == MacroRepeatType.RepeatXTimes

    def test_press_expands(self, compile_text):
        profile = compile_text("[Macro(Ab,25)]\npress: A+B\n")
        a, b = dv("A") >> 8 & 0xFF, dv("B") >> 8 & 0xFF
        assert profile.macros["Ab"].actions == [
            MacroAction(MacroKeyState.Down, MacroKeyType.Key, a),
            MacroAction(MacroKeyState.Down, MacroKeyType.Key, b),
            MacroAction(MacroKeyState.Up, MacroKeyType.Key, a),
            MacroAction(MacroKeyState.Up, MacroKeyType.Key, b, delay=25),
        ]

    def test_down_up_and_line_delay(self, compile_text):
        profile = compile_text("[Macro(M,10)]\ndown: LShift:200\nDOWN: MouseBack\nup: NotAKey\nup: LShift:abc\n")
        assert profile.macros["M"].actions == [
            MacroAction(MacroKeyState.Down, MacroKeyType.Key, modifier=DriverValueModifier.LShift, delay=200),
            MacroAction(MacroKeyState.Down, MacroKeyType.Mouse, int(DriverValueMouseButton.Back), delay=10),
            MacroAction(MacroKeyState.Up, MacroKeyType.Key, modifier=DriverValueModifier.LShift, delay=10),
        ]

    def test_huge_numbers(self, compile_text):
        huge = "1" * 5000
        profile = compile_text("[Macro(M,{0},RepeatXTimes,{0})]\ndown: A:{0}\n[Macro({0})]\n".format(huge))
        macro = profile.macros["M"]
        assert (macro.default_delay, macro.repeat_count) == (0, 1)
        assert macro.actions == [MacroAction(MacroKeyState.Down, MacroKeyType.Key, dv("A") >> 8 & 0xFF)]
        assert profile.macros[huge].repeat_type == MacroRepeatType.RepeatXTimes

    def test_unknown_action(self, compile_text, caplog):
        with caplog.at_level(logging.WARNING):
            profile = compile_text("[Macro(M)]\ntap: A\n")
        assert profile.macros["M"].actions == []
        assert "tap" in caplog.text

    def test_duplicate_header_merges(self, compile_text):
        profile = compile_text("[Macro(M,10)]\ndown: A\n[Macro(M,30,ReleaseKeyToStop)]\nup: A\n")
        macro = profile.macros["M"]
        assert macro.default_delay == 30
        assert macro.repeat_type == MacroRepeatType.ReleaseKeyToStop
        assert [action.state for action in macro.actions] == [MacroKeyState.Down, MacroKeyState.Up]
        assert [action.delay for action in macro.actions] == [10, 30]

    def test_ids_in_reference_order(self, compile_text):
        profile = compile_text(
            "[Macro(First)]\n[Macro(Second)]\n[Macro(Unused)]\n"
            "[Base]\nA: Macro(Second)\nB: Macro(First)\nC: macro( Second )\n"
        )
        assert profile.macros["Second"].id == 0
        assert profile.macros["First"].id == 1
        assert profile.macros["Unused"].id is None
        layer = profile.get_layer(KeyboardLayer.Base)
        assert layer.get_key(dv("A")) == make_macro_value(0)
        assert layer.get_key(dv("B")) == make_macro_value(1)
        assert layer.get_key(dv("C")) == make_macro_value(0)

    def test_ids_are_stable(self, compile_text):
        text = "[Base]\nA: Macro(X)\nB: Macro(Y)\n[Macro(Y)]\n[Macro(X)]\n"
        first = compile_text(text)
        second = compile_text(text)
        assert [(m.name, m.id) for m in first.macros.values()] == [(m.name, m.id) for m in second.macros.values()]

    def test_macro_defined_after_layer(self, compile_text):
        profile = compile_text("[Base]\nEsc: Macro(Later)\n[Macro(Later)]\npress: Enter\n")
        value = profile.get_layer(KeyboardLayer.Base).get_key(dv("Esc"))
        assert profile.get_macro_by_id(get_macro_id(value)).name == "Later"

    def test_undefined_macro(self, compile_text, caplog):
        with caplog.at_level(logging.WARNING):
            profile = compile_text("[Base]\nEsc: B+Macro(Nope)\n")
        assert profile.get_layer(KeyboardLayer.Base).get_key(dv("Esc")) == dv("B")
        records = [r for r in caplog.records if "Nope" in r.getMessage()]
        assert len(records) == 1
        assert "Esc" in records[0].getMessage()

    def test_too_many_macros(self, compile_text, caplog):
        count = 257
        text = "".join("[Macro(M{})]\n".format(x) for x in range(count))
        text += "[Base]\n" + "".join("0x{:08X}: Macro(M{})\n".format(0x02000000 | (x + 1), x) for x in range(count))
        with caplog.at_level(logging.ERROR):
            profile = compile_text(text)
        layer = profile.get_layer(KeyboardLayer.Base)
        assert len(layer) == count
        assert layer.get_key(0x02000001) == make_macro_value(0)
        assert layer.get_key(0x02000000 | (count - 1)) == make_macro_value(255)
        assert layer.get_key(0x02000000 | count) == 0
        assert profile.macros["M256"].id is None
        assert "M256" in caplog.text

    def test_macros_per_layer(self, compile_text):
        profile = compile_text(
            "[Macro(X)]\n[Macro(Y)]\n[Macro(Z)]\n"
            "[Base]\nA: Macro(Y)\nB: Macro(Y)\n"
            "[FnBase]\nA: Macro(X)\n"
            "[Layer1]\nA: Macro(Z)\n"
        )
        assert profile.get_num_macros(KeyboardLayer.Base) == 2
        assert [macro.name for macro in profile.get_macros(KeyboardLayer.Base)] == ["Y", "X"]
        assert profile.get_num_macros(KeyboardLayer.Layer1) == 1
        assert profile.get_num_macros(KeyboardLayer.Layer2) == 0
        assert profile.get_macros(KeyboardLayer.Layer2) == []


class TestLighting:

    def test_attach(self, compile_text, write_effect):
        write_effect("glow", {"Type": "Static", "Data": {"A": "#FFFF0000"}})
        write_effect("wave", {"Frames": [{"Count": 2, "Data": ["A"]}]})
        profile = compile_text("[Lighting(wave,Layer1)]\n[Lighting(glow,Base,layer2,Bogus)]\n[Lighting(wave,3)]\n")
        glow, wave = profile.lighting_effects["glow"], profile.lighting_effects["wave"]
        assert wave.id == 0
        assert glow.id == 1
        assert glow.layers == {KeyboardLayer.Base, KeyboardLayer.Layer2}
        assert wave.layers == {KeyboardLayer.Layer1, KeyboardLayer.Layer2}
        assert profile.get_lighting_effects(KeyboardLayer.Layer2) == [wave, glow]
        assert profile.get_lighting_effects(KeyboardLayer.Layer3) == []

    def test_missing_effect(self, compile_text, caplog):
        with caplog.at_level(logging.WARNING):
            profile = compile_text("[Lighting(nothing,Base)]\n")
        assert profile.lighting_effects == {}
        assert "nothing" in caplog.text

    def test_unloadable_effects(self, compile_text, write_effect, caplog):
        depth = 100000
        write_effect("deep", '{"Frames": [' + "[" * depth + "]" * depth + "]}")
        write_effect("huge", {"Type": "Static", "Data": {"1" * 5000: "#FFFF0000"}})
        write_effect("good", {})
        with caplog.at_level(logging.WARNING):
            profile = compile_text("[Lighting(deep,Base)]\n[Lighting(huge,Base)]\n[Lighting(good,Base)]\n[Base]\nA: B\n")
        assert "deep" in caplog.text
        assert list(profile.lighting_effects) == ["huge", "good"]
        assert profile.lighting_effects["huge"].key_colors == {}
        assert profile.get_layer(KeyboardLayer.Base).get_key(dv("A")) == dv("B")

    def test_failed_effect_takes_no_id(self, compile_text, write_effect):
        write_effect("good", {})
        profile = compile_text("[Lighting(bad,Base)]\n[Lighting(good,Base)]\n")
        assert profile.lighting_effects["good"].id == 0

    def test_lighting_group_ignores_lines(self, compile_text, write_effect):
        write_effect("good", {})
        profile = compile_text("[Lighting(good,Base)]\nEsc: A\n")
        assert profile.get_layer(KeyboardLayer.Base) is None

    def test_no_lighting(self, compile_text):
        profile = compile_text("[NoLighting(Layer1, 4)]\n")
        assert not profile.no_lighting
        assert profile.no_lighting_layers == {KeyboardLayer.Layer1, KeyboardLayer.Layer3}
        assert profile.is_lighting_disabled(KeyboardLayer.Layer3)
        assert not profile.is_lighting_disabled(KeyboardLayer.Base)

    def test_no_lighting_everywhere(self, compile_text):
        profile = compile_text("[nolighting]\n")
        assert profile.no_lighting
        for layer in KeyboardLayer:
            assert profile.is_lighting_disabled(layer)


class TestLoadProfile:

    def test_missing_file(self, keyboard, tmp_path):
        assert load_profile(keyboard, str(tmp_path / "nope.txt")) is None

    def test_load(self, keyboard, data_root, write_profile):
        path = write_profile("[Base]\r\nEsc: A\r\n")
        profile = load_profile(keyboard, path, str(data_root))
        assert profile.get_layer(KeyboardLayer.Base).get_key(dv("Esc")) == dv("A")

    def test_data_root_from_settings(self, keyboard, data_root, write_profile, write_effect):
        write_effect("fromsettings", {})
        storage.set(storage.DATA_ROOT_KEY, str(data_root))
        path = write_profile("[Lighting(fromsettings,Base)]\n")
        assert "fromsettings" in load_profile(keyboard, path).lighting_effects

import logging

import pytest

from unmoved_mover.bindings import BindingEvent, BindingInterpreter, PRESS_COMMAND, RELEASE_COMMAND
from unmoved_mover.config import Config
from unmoved_mover.keys import Key


def press(symbol, *mods):
    return BindingEvent(command=PRESS_COMMAND, symbol=symbol, modifiers=frozenset(mods))


def release(symbol, *mods):
    return BindingEvent(command=RELEASE_COMMAND, symbol=symbol, modifiers=frozenset(mods))


@pytest.fixture
def interpreter(config, store, gateway):
    return BindingInterpreter(config, store, gateway)


def test_press_sets_key_and_modifier(interpreter, store):
    assert interpreter.handle(press('k', 'Mod1')) is Key.UP
    assert store.snapshot().down_keys == {Key.MODIFIER, Key.UP}


def test_extra_modifier_means_modifier_up(interpreter, store):
    interpreter.handle(press('k', 'Mod1'))
    interpreter.handle(press('l', 'Mod1', 'Shift'))
    assert store.snapshot().down_keys == {Key.RIGHT}


def test_mismatched_modifier_drops_stale_direction(interpreter, store):
    interpreter.handle(press('k', 'Mod1'))
    interpreter.handle(press('h', 'Mod1', 'Shift'))
    assert store.snapshot().down_keys == {Key.LEFT}


def test_modifier_evaluated_even_for_unknown_symbol(interpreter, store):
    assert interpreter.handle(press('q', 'Mod1')) is None
    assert store.snapshot().down_keys == {Key.MODIFIER}


def test_missing_symbol_still_updates_modifier(interpreter, store):
    interpreter.handle(press('k', 'Mod1'))
    interpreter.handle(BindingEvent(command=PRESS_COMMAND, symbol=None, modifiers=frozenset()))
    assert store.snapshot().down_keys == frozenset()


def test_release_clears_all_keys(interpreter, store):
    interpreter.handle(press('k', 'Mod1'))
    interpreter.handle(release('k', 'Mod1'))
    assert store.snapshot().down_keys == frozenset()


def test_up_then_down_event(interpreter, store):
    interpreter.handle(press('k', 'Mod1'))
    interpreter.handle(press('j', 'Mod1'))
    assert store.snapshot().down_keys == {Key.MODIFIER, Key.DOWN}


def test_foreign_command_is_ignored(interpreter, store, gateway, caplog):
    with caplog.at_level(logging.WARNING):
        result = interpreter.handle(BindingEvent(command='exec firefox', symbol='k',
                                                 modifiers=frozenset(['Mod1'])))
    assert result is None
    assert store.snapshot().down_keys == frozenset()
    assert gateway.sent == []
    assert 'foreign command' in caplog.text


def test_no_modifier_configured(store, gateway):
    interpreter = BindingInterpreter(Config(mod_key=''), store, gateway)
    interpreter.handle(press('h', 'Mod4'))
    assert store.snapshot().down_keys == {Key.LEFT}


def test_left_click_press_and_release(interpreter, gateway, store):
    interpreter.handle(press('semicolon', 'Mod1'))
    assert Key.LEFT_CLICK in store.snapshot().down_keys
    interpreter.handle(release('semicolon', 'Mod1'))
    assert gateway.sent == [
        'seat - cursor press button1',
        'seat - cursor release button1',
    ]


def test_right_click_uses_button3(interpreter, gateway):
    interpreter.handle(press('apostrophe', 'Mod1'))
    assert gateway.sent == ['seat - cursor press button3']


def test_direction_keys_send_nothing(interpreter, gateway):
    interpreter.handle(press('h', 'Mod1'))
    interpreter.handle(release('h', 'Mod1'))
    assert gateway.sent == []


def test_rejected_click_keeps_state(config, store, make_gateway):
    gateway = make_gateway(reject={'seat - cursor press button1'})
    interpreter = BindingInterpreter(config, store, gateway)
    assert interpreter.handle(press('semicolon', 'Mod1')) is Key.LEFT_CLICK
    assert store.snapshot().down_keys == {Key.MODIFIER, Key.LEFT_CLICK}

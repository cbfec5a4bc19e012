import dataclasses

import pytest

from unmoved_mover.config import Config, create_default_config, load_config, parse_config
from unmoved_mover.keys import ConfigError, Key, KeyNames, build_key_table


def test_key_table_maps_every_symbol():
    table = Config().key_table
    assert table == {
        'k': Key.UP,
        'j': Key.DOWN,
        'h': Key.LEFT,
        'l': Key.RIGHT,
        'semicolon': Key.LEFT_CLICK,
        'apostrophe': Key.RIGHT_CLICK,
    }
    assert Key.MODIFIER not in table.values()


def test_duplicate_symbol_is_rejected():
    names = KeyNames(up='w', down='s', left='a', right='d', left_click='a', right_click='e')
    with pytest.raises(ConfigError, match="'a'"):
        build_key_table(names)


def test_empty_symbol_is_rejected():
    with pytest.raises(ConfigError):
        Config(right_click='')


def test_config_rejects_duplicate_names_at_construction():
    with pytest.raises(ConfigError):
        Config(up='x', down='x')


def test_config_is_immutable():
    config = Config()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.cursor_velocity = 5


def test_negative_velocity_is_rejected():
    with pytest.raises(ConfigError):
        Config(cursor_velocity=-1)


def test_zero_tick_interval_is_rejected():
    with pytest.raises(ConfigError):
        Config(tick_interval_ms=0)


def test_enter_combo_needs_mode():
    with pytest.raises(ConfigError):
        Config(enter_mode_combo='Mod4+m')


def test_tick_interval_in_seconds():
    assert Config(tick_interval_ms=25).tick_interval == pytest.approx(0.025)


def test_parse_config_converts_values():
    config = parse_config({
        'required_mode': 'Cursor',
        'mod_key': None,
        'up': 8,
        'tick_interval_ms': '20',
        'skip_configuration': True,
    })
    assert config.required_mode == 'Cursor'
    assert config.mod_key == ''
    assert config.up == '8'
    assert config.tick_interval_ms == 20
    assert config.skip_configuration is True


def test_parse_config_rejects_unknown_keys():
    with pytest.raises(ConfigError, match='speed'):
        parse_config({'speed': 3})


def test_parse_config_rejects_non_integer_velocity():
    with pytest.raises(ConfigError):
        parse_config({'cursor_velocity': 'fast'})


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("required_mode: cursor\nmod_key: ''\ncursor_velocity: 600\n")
    config = load_config(path)
    assert config.required_mode == 'cursor'
    assert config.mod_key == ''
    assert config.cursor_velocity == 600
    assert config.up == 'k'


def test_load_config_empty_file_gives_defaults(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('')
    assert load_config(path) == Config()


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('- a\n- b\n')
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_rejects_broken_yaml(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('up: [\n')
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_config_writes_default(tmp_path):
    path = tmp_path / 'nested' / 'config.yaml'
    config = load_config(path)
    assert path.exists()
    assert config == Config()


def test_default_config_round_trips(tmp_path):
    path = tmp_path / 'config.yaml'
    assert create_default_config(path) == load_config(path)


def test_config_path_follows_xdg(monkeypatch, tmp_path):
    from unmoved_mover.config import get_config_path
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
    assert get_config_path() == tmp_path / 'unmoved-mover' / 'config.yaml'


def test_quoted_boolean_is_rejected():
    with pytest.raises(ConfigError, match='skip_configuration'):
        parse_config({'skip_configuration': 'false'})


def test_yaml_boolean_is_accepted(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('skip_configuration: false\n')
    assert load_config(path).skip_configuration is False

import dataclasses
import unittest

from razorfmt import DEFAULT_CONFIG, Config, StyleConfig


class TestDefaults(unittest.TestCase):
    def test_default_values(self):
        config = Config()
        assert config.indent_size == 4
        assert config.max_attributes_per_line == 1
        assert config.max_line_length == 0
        assert config.max_depth == 64
        assert config.format_html is True
        assert config.code_indent_size == 4
        assert config.blank_line_before_code is True
        assert config.style == StyleConfig()
        assert config.style.enabled is False
        assert DEFAULT_CONFIG == config

    def test_style_indent_falls_back_to_indent_size(self):
        assert Config(indent_size=2).style_indent_size == 2
        assert Config(indent_size=2, style=StyleConfig(indent_size=3)).style_indent_size == 3

    def test_style_mapping_is_converted(self):
        config = Config(style={"enabled": True, "indent_size": 2})
        assert config.style == StyleConfig(enabled=True, indent_size=2)

    def test_frozen(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.indent_size = 2


class TestValidation(unittest.TestCase):
    def test_invalid_values(self):
        for kwargs in (
            {"indent_size": 0},
            {"max_attributes_per_line": -1},
            {"max_line_length": -1},
            {"max_depth": 0},
            {"code_indent_size": -1},
        ):
            with self.assertRaises(ValueError):
                Config(**kwargs)

    def test_invalid_style_indent(self):
        with self.assertRaises(ValueError):
            StyleConfig(indent_size=0)

    def test_zero_attributes_per_line_is_allowed(self):
        assert Config(max_attributes_per_line=0).max_attributes_per_line == 0


class TestFromMapping(unittest.TestCase):
    def test_empty_returns_base(self):
        base = Config(indent_size=2)
        assert Config.from_mapping(None, base) is base
        assert Config.from_mapping({}) == Config()

    def test_merges_over_base(self):
        base = Config(indent_size=2, max_depth=10)
        config = Config.from_mapping({"max_depth": 20}, base)
        assert config.indent_size == 2
        assert config.max_depth == 20

    def test_style_is_merged_key_by_key(self):
        base = Config(style=StyleConfig(enabled=True, indent_size=3))
        config = Config.from_mapping({"style": {"indent_size": 2}}, base)
        assert config.style == StyleConfig(enabled=True, indent_size=2)

    def test_unknown_keys(self):
        with self.assertRaises(ValueError) as ctx:
            Config.from_mapping({"indent": 2, "tabs": True})
        assert str(ctx.exception) == "Unknown configuration keys: indent, tabs"

    def test_unknown_style_keys(self):
        with self.assertRaises(ValueError) as ctx:
            Config.from_mapping({"style": {"enabled": True, "width": 80}})
        assert "width" in str(ctx.exception)

    def test_validation_applies_to_merged_values(self):
        with self.assertRaises(ValueError):
            Config.from_mapping({"indent_size": 0})


if __name__ == "__main__":
    unittest.main()

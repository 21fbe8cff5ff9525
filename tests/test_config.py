from __future__ import annotations

import pytest

from fluentconv.config import DEFAULT_MAX_DEPTH, ConversionConfig
from fluentconv.errors import ConfigError, FluentConvError


def test_config_defaults():
    cfg = ConversionConfig()
    assert cfg.tag_name == "fluent"
    assert cfg.use_msgpack is False
    assert cfg.max_depth == DEFAULT_MAX_DEPTH


@pytest.mark.parametrize("tag_name", ["", "a,b", "a b", 3])
def test_config_rejects_bad_tag_names(tag_name):
    with pytest.raises(ConfigError, match=r"tag_name"):
        ConversionConfig(tag_name=tag_name)


@pytest.mark.parametrize("max_depth", [0, -1, True, "8"])
def test_config_rejects_bad_max_depth(max_depth):
    with pytest.raises(ConfigError, match=r"max_depth"):
        ConversionConfig(max_depth=max_depth)


def test_config_from_env_overrides():
    cfg = ConversionConfig.from_env(
        {
            "FLUENTCONV_TAG_NAME": "log",
            "FLUENTCONV_USE_MSGPACK": " Yes ",
            "FLUENTCONV_MAX_DEPTH": "8",
        }
    )
    assert cfg == ConversionConfig(tag_name="log", use_msgpack=True, max_depth=8)


def test_config_from_env_empty_values_keep_defaults():
    assert ConversionConfig.from_env({"FLUENTCONV_TAG_NAME": "", "FLUENTCONV_USE_MSGPACK": ""}) == ConversionConfig()
    assert ConversionConfig.from_env({"FLUENTCONV_USE_MSGPACK": "off"}).use_msgpack is False


def test_config_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("FLUENTCONV_USE_MSGPACK", "1")
    monkeypatch.delenv("FLUENTCONV_TAG_NAME", raising=False)
    monkeypatch.delenv("FLUENTCONV_MAX_DEPTH", raising=False)
    assert ConversionConfig.from_env() == ConversionConfig(use_msgpack=True)


def test_config_from_env_rejects_invalid_values():
    with pytest.raises(ConfigError, match=r"FLUENTCONV_USE_MSGPACK"):
        ConversionConfig.from_env({"FLUENTCONV_USE_MSGPACK": "maybe"})
    with pytest.raises(ConfigError, match=r"FLUENTCONV_MAX_DEPTH"):
        ConversionConfig.from_env({"FLUENTCONV_MAX_DEPTH": "deep"})
    with pytest.raises(FluentConvError):
        ConversionConfig.from_env({"FLUENTCONV_MAX_DEPTH": "0"})

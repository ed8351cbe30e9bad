from unittest.mock import patch
import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for module imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import config

ENV_VARS = [
    "SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "NEXT_PUBLIC_SUPABASE_ANON_KEY",
    "SUPABASE_TIMEOUT",
    "SUPABASE_PAGE_SIZE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_from_secrets(clean_env):
    secrets = {
        "supabase": {
            "url": "https://school.supabase.co",
            "anon_key": "secret-key",
            "timeout": 20,
            "page_size": 500,
        }
    }
    with patch.object(config.st, "secrets", secrets):
        settings = config.load_supabase_config()

    assert settings == {
        "url": "https://school.supabase.co",
        "anon_key": "secret-key",
        "timeout": 20,
        "page_size": 500,
    }


def test_config_falls_back_to_environment(clean_env):
    clean_env.setenv("SUPABASE_URL", "https://env.supabase.co")
    clean_env.setenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", "public-key")
    clean_env.setenv("SUPABASE_TIMEOUT", "7")

    with patch.object(config.st, "secrets", {}):
        settings = config.load_supabase_config()

    assert settings["url"] == "https://env.supabase.co"
    assert settings["anon_key"] == "public-key"
    assert settings["timeout"] == 7
    assert settings["page_size"] == config.DEFAULT_PAGE_SIZE


def test_config_defaults_when_nothing_is_set(clean_env):
    with patch.object(config.st, "secrets", {}):
        settings = config.load_supabase_config()

    assert settings == {
        "url": None,
        "anon_key": None,
        "timeout": config.DEFAULT_TIMEOUT,
        "page_size": config.DEFAULT_PAGE_SIZE,
    }


@pytest.mark.parametrize("value", ["abc", "0", "-3", None])
def test_bad_numbers_use_defaults(clean_env, value):
    if value is not None:
        clean_env.setenv("SUPABASE_PAGE_SIZE", value)

    with patch.object(config.st, "secrets", {}):
        settings = config.load_supabase_config()

    assert settings["page_size"] == config.DEFAULT_PAGE_SIZE


@pytest.mark.parametrize(
    "value, expected",
    [(None, 25), ("10", 10), (30, 25), (300, 25), ("abc", 25), (0, 25)],
)
def test_cache_ttl_expires_before_next_refresh(value, expected):
    ttl = config.cache_ttl(value)

    assert ttl == expected
    assert ttl < config.REFRESH_SECONDS
    assert config.CACHE_TTL < config.REFRESH_SECONDS

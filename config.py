"""Settings for the leaderboard app."""

import os

import streamlit as st

# ==== LEADERBOARD DISPLAY ====
REFRESH_SECONDS = 30

PARTITION_LABELS = {True: "Dikrao", False: "Dikrio"}

# ==== SUPABASE ====
DEFAULT_TIMEOUT = 12
# PostgREST caps responses at 1000 rows unless configured otherwise
DEFAULT_PAGE_SIZE = 1000


def _int_setting(value, default):
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def load_supabase_config():
    """Load Supabase settings from Streamlit secrets or environment variables.

    Secrets are read from a ``[supabase]`` table with ``url``, ``anon_key``,
    ``timeout`` and ``page_size`` keys. When secrets are not available the
    ``SUPABASE_*`` variables are used, with the ``NEXT_PUBLIC_SUPABASE_*``
    names accepted for the url and key.
    """
    config = {
        "url": None,
        "anon_key": None,
        "timeout": None,
        "page_size": None,
    }

    try:
        supabase = st.secrets["supabase"]
        config["url"] = supabase["url"]
        config["anon_key"] = supabase["anon_key"]
        config["timeout"] = supabase.get("timeout")
        config["page_size"] = supabase.get("page_size")
    except Exception:
        env = os.environ
        config["url"] = env.get("SUPABASE_URL") or env.get("NEXT_PUBLIC_SUPABASE_URL")
        config["anon_key"] = env.get("SUPABASE_ANON_KEY") or env.get("NEXT_PUBLIC_SUPABASE_ANON_KEY")
        config["timeout"] = env.get("SUPABASE_TIMEOUT")
        config["page_size"] = env.get("SUPABASE_PAGE_SIZE")

    config["timeout"] = _int_setting(config["timeout"], DEFAULT_TIMEOUT)
    config["page_size"] = _int_setting(config["page_size"], DEFAULT_PAGE_SIZE)
    return config


def cache_ttl(value=None):
    """Seconds to cache rankings; always shorter than the refresh interval.

    A cached payload must expire before the next timed refresh, otherwise a
    refresh can show data almost two intervals old.
    """
    longest = REFRESH_SECONDS - 5
    return min(_int_setting(value, longest), longest)


# Allow cache TTL to be configured via ``st.secrets['cache_ttl']``
try:
    CACHE_TTL = cache_ttl(st.secrets.get("cache_ttl"))
except Exception:  # pragma: no cover - fallback when secrets aren't available
    CACHE_TTL = cache_ttl()

"""
Supabase client initialization.

This module contains *only* the database connection setup and the shared
response check used by the repository modules.

Environment variables required:
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)

The client is created on first use so that modules can be imported (and
tested with fakes) without credentials.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, List

from dotenv import load_dotenv

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

# Load environment variables from the .env file at the repository root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class StoreError(RuntimeError):
    """Raised when a Supabase read or write fails."""


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Return the process-wide Supabase client, creating it on first call."""

    # Read credentials from the environment to avoid hard-coding secrets in code.
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(supabase_url, supabase_key)


def rows_or_raise(response: Any, action: str) -> List[dict]:
    """Return response rows, raising StoreError if the response carries an error."""

    error = getattr(response, "error", None)
    if error:
        raise StoreError(f"Failed to {action}: {error}")

    return getattr(response, "data", None) or []


__all__ = ["Client", "StoreError", "get_supabase_client", "rows_or_raise"]

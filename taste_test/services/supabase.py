from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple

from supabase import Client, create_client

PROFILES_TABLE = "profiles"

# Lazily-initialized Supabase client
_client: Optional[Client] = None


# ================================
# INIT SUPABASE CLIENT
# ================================
def get_client() -> Client:
    """
    Create the Supabase client on first use so that importing this module
    does not explode when the environment is not configured (e.g. tests).
    """
    global _client
    if _client is None:
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_ANON_KEY")
        if not url or not key:
            logging.error("SUPABASE_URL / SUPABASE_ANON_KEY are not set; auth is unavailable.")
            raise RuntimeError("Missing or invalid Supabase configuration.")
        _client = create_client(url, key)
    return _client


# ================================
# TABLE ACCESS
# ================================
def insert_record(table: str, data: dict, client: Optional[Any] = None) -> Tuple[Any, Optional[str]]:
    """
    Insert one row into Supabase.
    Returns:
        (response, error_str)
    """
    try:
        client = client if client is not None else get_client()
        response = client.table(table).insert(data).execute()
        return response, None
    except Exception as e:
        logging.error("[SUPABASE ERROR %s] %s", table, e)
        return None, str(e)


def select_one(
    table: str,
    column: str,
    value: Any,
    client: Optional[Any] = None,
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Fetch the first row where column == value.
    Returns:
        (row_or_None, error_str)
    """
    try:
        client = client if client is not None else get_client()
        response = client.table(table).select("*").eq(column, value).limit(1).execute()
    except Exception as e:
        logging.error("[SUPABASE ERROR %s] %s", table, e)
        return None, str(e)

    rows = getattr(response, "data", None) or []
    if not rows:
        return None, None
    return rows[0], None

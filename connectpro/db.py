"""
connectpro/db.py
Configuration and data-access helpers for ConnectionPro.
Every secret lookup, Supabase client and Postgres connection comes from here.
"""

import logging
import os

import pandas as pd
import psycopg2
import streamlit as st
from psycopg2.extras import RealDictCursor
from supabase import create_client, Client, ClientOptions
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_APP_URL = "http://localhost:8501"


# ─── Secrets ─────────────────────────────────────────────────────────────────

def get_secret(key: str, default: str | None = None) -> str | None:
    """
    Resolve a configuration value by name.

    Looks in st.secrets first (Streamlit Cloud), then os.environ (local
    development, populated from .env by load_dotenv above).  Returns default
    when the key is absent from both.
    """
    try:
        return st.secrets[key]
    except Exception:
        return os.environ.get(key, default)


def get_app_url() -> str:
    """Return the public base URL of the app, without a trailing slash."""
    return (get_secret("APP_URL") or DEFAULT_APP_URL).rstrip("/")


# ─── Supabase client (Auth) ──────────────────────────────────────────────────

def get_supabase_client(storage=None) -> Client:
    """
    Return a new Supabase client authenticated with the anon key.

    Not cached: the client carries the signed-in session and its auth
    listeners, so each browser session must own exactly one.  See
    connectpro.navigation.get_auth, which keeps it in st.session_state.

    storage (get_item / set_item / remove_item) is where the auth session is
    persisted; passing a BrowserStore keeps users signed in across reloads.
    """
    url = get_secret("SUPABASE_URL")
    key = get_secret("SUPABASE_ANON_KEY")
    if not url or not key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured.")
    if storage is None:
        return create_client(url, key)
    return create_client(url, key, options=ClientOptions(storage=storage))


# ─── Direct psycopg2 connection ──────────────────────────────────────────────

def get_pg_connection():
    """
    Return a raw psycopg2 connection to the Supabase Postgres database.

    sslmode is 'require' and connect_timeout is 15 seconds.  The caller
    closes the connection.
    """
    return psycopg2.connect(
        host=get_secret("DB_HOST"),
        port=get_secret("DB_PORT", "5432"),
        dbname=get_secret("DB_NAME", "postgres"),
        user=get_secret("DB_USER"),
        password=get_secret("DB_PASSWORD"),
        sslmode="require",
        connect_timeout=15,
    )


# ─── Read helper ─────────────────────────────────────────────────────────────

@st.cache_data(ttl=30, show_spinner=False)
def query_df(sql: str, params: tuple = ()) -> pd.DataFrame:
    """
    Run a parameterised SELECT and return the rows as a DataFrame.

    Cached for 30 seconds across reruns.  Returns an empty DataFrame (never
    None) when nothing matches.  Reads only.
    """
    conn = get_pg_connection()
    try:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(sql, params)
            rows = cur.fetchall()
    finally:
        conn.close()
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows)


# ─── Write helper ────────────────────────────────────────────────────────────

def run_query(sql: str, params: tuple = ()) -> None:
    """
    Run a parameterised INSERT/UPDATE/DELETE and commit.

    Rolls back and re-raises on any database error.  Clears the query_df
    cache afterwards so the next read sees the write.
    """
    conn = get_pg_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(sql, params)
        conn.commit()
    except Exception:
        conn.rollback()
        logger.warning("Write query failed; transaction rolled back", exc_info=True)
        raise
    finally:
        conn.close()
    query_df.clear()

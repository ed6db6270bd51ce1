"""Supabase client and store wiring. Client is cached via Streamlit."""
import os

import streamlit as st
from dotenv import load_dotenv
from supabase import create_client, Client

from src.database import DEFAULT_BUCKET, DEFAULT_TABLE, SupabaseBlobStore, SupabaseRecordStore
from src.engine import PriorityConfig
from src.service import RevisionService

load_dotenv()


def _env_client() -> Client:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


@st.cache_resource
def get_supabase() -> Client:
    return _env_client()


def get_supabase_uncached() -> Client:
    """For CLI/scripts (no Streamlit context)."""
    return _env_client()


def get_service(client: Client) -> RevisionService:
    """Build a RevisionService over the configured table and bucket."""
    table = os.environ.get("SUPABASE_TABLE", DEFAULT_TABLE)
    bucket = os.environ.get("SUPABASE_BUCKET", DEFAULT_BUCKET)
    return RevisionService(
        SupabaseRecordStore(client, table),
        SupabaseBlobStore(client, bucket),
        config=PriorityConfig.from_env(),
    )

"""
Print the Supabase schema for RevisionHub.
Run: python init_db.py
Paste the output into the Supabase SQL Editor (https://app.supabase.com > SQL Editor > New Query).
"""
import os

from dotenv import load_dotenv

from src.database import DEFAULT_BUCKET, DEFAULT_TABLE

load_dotenv()


def build_schema_sql(table: str = DEFAULT_TABLE, bucket: str = DEFAULT_BUCKET) -> str:
    return f"""
-- Study materials (one row per uploaded PDF)
CREATE TABLE IF NOT EXISTS {table} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    filename TEXT NOT NULL,
    storage_path TEXT NOT NULL UNIQUE,
    date_added TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    last_revised TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    revision_count INT NOT NULL DEFAULT 0 CHECK (revision_count >= 0),
    last_score INT CHECK (last_score IS NULL OR last_score BETWEEN 1 AND 3),
    revision_history JSONB NOT NULL DEFAULT '[]'::jsonb,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_{table}_created_at ON {table}(created_at DESC);

-- Public bucket for the PDFs themselves
INSERT INTO storage.buckets (id, name, public)
VALUES ('{bucket}', '{bucket}', true)
ON CONFLICT (id) DO NOTHING;
"""


def main():
    table = os.environ.get("SUPABASE_TABLE", DEFAULT_TABLE)
    bucket = os.environ.get("SUPABASE_BUCKET", DEFAULT_BUCKET)
    print(f"RevisionHub schema (table={table}, bucket={bucket})")
    print(f"URL: {os.environ.get('SUPABASE_URL') or '(SUPABASE_URL not set)'}")
    print("\nThe Supabase client cannot run DDL; run this SQL in the Supabase SQL Editor:")
    print(build_schema_sql(table, bucket))


if __name__ == "__main__":
    main()

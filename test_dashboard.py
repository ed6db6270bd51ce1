"""Dashboard helpers: tiers, stats, column sorting, labels, and the CLI table."""
import pytest

import list_materials
from conftest import NOW, make_material
from init_db import build_schema_sql
from src.dashboard import format_time_ago, priority_tier, sort_materials, tier_counts
from src.engine import rank_all


@pytest.mark.parametrize(
    "priority, tier",
    [(10.01, "high"), (10.0, "medium"), (5.01, "medium"), (5.0, "low"), (0.5, "low")],
)
def test_priority_tier_boundaries(priority, tier):
    assert priority_tier(priority) == tier


def test_tier_counts():
    ranked = [{"priority": p} for p in (12.0, 11.0, 7.5, 2.0)]
    assert tier_counts(ranked) == {"total": 4, "high": 2, "medium": 1, "low": 1}


def test_sort_by_name_case_insensitive():
    ranked = rank_all([make_material(filename=n) for n in ("beta.pdf", "Alpha.pdf", "gamma.pdf")], NOW)
    rows = sort_materials(ranked, "name", descending=False, now=NOW)
    assert [m["filename"] for m in rows] == ["Alpha.pdf", "beta.pdf", "gamma.pdf"]


def test_sort_by_revisions_and_date():
    ranked = rank_all(
        [
            make_material(days_ago=3, revision_count=1, filename="a.pdf"),
            make_material(days_ago=9, revision_count=4, filename="b.pdf"),
            make_material(days_ago=1, revision_count=0, filename="c.pdf"),
        ],
        NOW,
    )
    assert [m["filename"] for m in sort_materials(ranked, "revisions", now=NOW)] == ["b.pdf", "a.pdf", "c.pdf"]
    assert [m["filename"] for m in sort_materials(ranked, "date", descending=False, now=NOW)] == ["c.pdf", "a.pdf", "b.pdf"]


def test_sort_unknown_column():
    with pytest.raises(ValueError):
        sort_materials([], "size")


def test_format_time_ago():
    assert format_time_ago(0) == "Today"
    assert format_time_ago(1) == "1 day ago"
    assert format_time_ago(14) == "14 days ago"


def test_cli_table_lists_rows_in_order():
    ranked = rank_all([make_material(days_ago=30, last_score=1, filename="stale.pdf"), make_material(filename="new.pdf")], NOW)
    table = list_materials.format_table(ranked, NOW)
    lines = table.splitlines()
    assert "PRIORITY" in lines[0]
    assert "stale.pdf" in lines[1] and "High Priority" in lines[1]
    assert "new.pdf" in lines[2] and "Today" in lines[2]


def test_cli_reports_missing_credentials(monkeypatch, capsys):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
    assert list_materials.main([]) == 1
    assert "SUPABASE_URL" in capsys.readouterr().err


def test_schema_sql_uses_table_and_bucket():
    sql = build_schema_sql("study", "files")
    assert "CREATE TABLE IF NOT EXISTS study" in sql
    assert "revision_history JSONB" in sql
    assert "VALUES ('files', 'files', true)" in sql

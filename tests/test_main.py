from src.time_tracker.time_tracker.main import SCHEMA_PATH


def test_schema_path_points_at_checked_in_schema():
    assert SCHEMA_PATH.is_file()
    assert "CREATE TABLE IF NOT EXISTS time_sessions" in SCHEMA_PATH.read_text(encoding="utf-8")

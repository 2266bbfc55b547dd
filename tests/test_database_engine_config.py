def test_get_engine_kwargs_sqlite_has_check_same_thread():
    from studynext.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./studynext.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_postgres_has_conservative_pooling(monkeypatch):
    from studynext.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "7")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "3")
    monkeypatch.setenv("DB_POOL_TIMEOUT_SEC", "15")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == 7
    assert kwargs["max_overflow"] == 3
    assert kwargs["pool_timeout"] == 15


def test_sqlite_url_detection():
    from studynext.database import database as db

    assert db._is_sqlite_url("sqlite:///./studynext.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_ensure_legacy_schema_adds_course_record_owner_column(tmp_path):
    """Legacy SQLite DBs should be patched in-place to include course_records.user_id."""
    from sqlalchemy import create_engine, text
    from studynext.database import database as db

    db_path = tmp_path / "legacy.db"
    url = f"sqlite:///{db_path}"
    engine = create_engine(url, connect_args={"check_same_thread": False})

    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE IF NOT EXISTS course_records ("
                "id VARCHAR PRIMARY KEY,"
                "title VARCHAR,"
                "course_data JSON,"
                "created_at DATETIME,"
                "updated_at DATETIME"
                ")"
            )
        )
        conn.execute(text("INSERT INTO course_records (id, title, course_data) VALUES ('chat-1', 'Bio', '{}')"))

    db.ensure_legacy_schema_compat(engine_override=engine, database_url_override=url)

    raw = engine.raw_connection()
    try:
        assert db._sqlite_table_has_column(raw, "course_records", "user_id") is True
    finally:
        raw.close()

    with engine.connect() as conn:
        rows = conn.execute(text("SELECT id, user_id FROM course_records")).fetchall()
    assert [tuple(r) for r in rows] == [("chat-1", None)]

    # Second run is a no-op
    db.ensure_legacy_schema_compat(engine_override=engine, database_url_override=url)


def test_ensure_legacy_schema_skips_non_sqlite():
    from studynext.database import database as db

    # Returns before touching any engine
    db.ensure_legacy_schema_compat(engine_override=None, database_url_override="postgresql://u:p@localhost/db")

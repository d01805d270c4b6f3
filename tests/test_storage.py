import pytest

from sqlite_doc_engine import Schema, SQLiteStorage, StorageError


def test_open_execute_prepare(tmp_path):
    path = tmp_path / "nested" / "dir" / "store.sqlite"
    with SQLiteStorage.open(path, journal_mode="WAL") as st:
        assert path.exists()
        st.ensure_collection("Things")
        st.ensure_collection("Things")
        ins = st.prepare('INSERT INTO "Things" (data) VALUES (?)')
        r1 = ins.run(('{"a":1}',))
        r2 = ins.run(('{"a":2}',))
        assert (r1.last_insert_id, r2.last_insert_id) == (1, 2)
        assert r1.changes == 1
        rows = st.prepare('SELECT id, data FROM "Things" ORDER BY id').all()
        assert rows == [{"id": 1, "data": '{"a":1}'}, {"id": 2, "data": '{"a":2}'}]
        assert st.table_names() == ["Things"]
    assert st.closed


def test_memory_storage():
    st = SQLiteStorage()
    assert st.is_memory
    st.execute("CREATE TABLE t (x INTEGER)")
    st.prepare("INSERT INTO t (x) VALUES (?)").run((5,))
    assert st.prepare("SELECT x FROM t").all() == [{"x": 5}]
    st.close()


def test_sqlite_errors_become_storage_errors():
    st = SQLiteStorage()
    with pytest.raises(StorageError):
        st.execute("CREATE TABLE oops (")
    with pytest.raises(StorageError):
        st.prepare("SELECT * FROM missing").all()
    with pytest.raises(StorageError):
        st.prepare("INSERT INTO missing VALUES (?)").run((1,))
    st.close()


def test_storage_errors_propagate_through_models(db):
    User = db.model("User", Schema({"name": {"type": "text"}}))
    User.create({"name": "John"})
    db.storage.execute('DROP TABLE "User"')
    with pytest.raises(StorageError):
        User.find()
    with pytest.raises(StorageError):
        User.update({}, {"name": "Jane"})


def test_closed_storage_does_not_reopen():
    st = SQLiteStorage()
    st.execute("CREATE TABLE t (x INTEGER)")
    st.close()
    assert st.closed
    with pytest.raises(StorageError, match="storage is closed"):
        st.prepare("SELECT x FROM t").all()
    with pytest.raises(StorageError, match="storage is closed"):
        st.execute("CREATE TABLE u (x INTEGER)")
    st.close()


def test_closed_database_rejects_model_calls(db):
    User = db.model("User", Schema({"name": {"type": "text"}}))
    User.create({"name": "John"})
    db.close()
    with pytest.raises(StorageError, match="storage is closed"):
        User.find()

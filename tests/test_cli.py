import pytest

from glove_vectorizer.application import cli
from glove_vectorizer.application.services.word_store_sqlite import SQLiteWordStore

from conftest import DIM


def test_build_store_command(glove_file, tmp_path, capsys):
    out = tmp_path / "store.sqlite3"

    code = cli.main(["build-store", str(glove_file), "--out", str(out), "--dim", str(DIM)])

    assert code == 0
    assert "stored 5 vectors" in capsys.readouterr().out
    store = SQLiteWordStore(out)
    try:
        assert store.dimension == DIM
    finally:
        store.close()


def test_build_store_command_fails_on_existing_output(glove_file, tmp_path):
    out = tmp_path / "store.sqlite3"
    out.write_bytes(b"")

    code = cli.main(["build-store", str(glove_file), "--out", str(out), "--dim", str(DIM)])

    assert code == 1


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])

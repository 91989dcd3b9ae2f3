import pytest

from ngram_chain.errors import SnapshotError
from ngram_chain.models import snapshot


def test_dumps_and_loads():
    record = {"corpus": [[0, 1]], "dictionary": ["héllo", "world"]}
    text = snapshot.dumps(record)
    assert "héllo" in text
    assert snapshot.loads(text) == record


def test_loads_accepts_bytes():
    assert snapshot.loads(b'{"a": 1}') == {"a": 1}


@pytest.mark.parametrize("text", ["", "{", "null", "[]", "3"])
def test_loads_rejects_non_objects(text):
    with pytest.raises(SnapshotError):
        snapshot.loads(text)


def test_loads_rejects_non_text():
    with pytest.raises(SnapshotError):
        snapshot.loads(None)


def test_copy_rows_is_deep():
    rows = [[1, 2], (3,)]
    copied = snapshot.copy_rows(rows)
    copied[0].append(9)

    assert copied == [[1, 2, 9], [3]]
    assert rows[0] == [1, 2]


@pytest.mark.parametrize("rows", ["abc", None, [[1], "x"]])
def test_copy_rows_rejects_bad_shapes(rows):
    with pytest.raises(SnapshotError):
        snapshot.copy_rows(rows)

"""
JSON snapshots of chain state.

Both chains serialize to a plain record of lists, strings, numbers and
booleans. This module turns such a record into JSON text and back, and makes
the deep copies that keep a snapshot from aliasing a live chain.
"""

import json

from ngram_chain.errors import SnapshotError


def dumps(record, indent=None):
    """
    Encode a snapshot record as JSON text.

    Args:
        record (dict): The record returned by a chain's ``to_dict``.
        indent (int, optional): Indentation passed to ``json.dumps``.

    Returns:
        str: The JSON text.
    """
    return json.dumps(record, indent=indent, ensure_ascii=False)


def loads(text):
    """
    Decode JSON text into a snapshot record.

    Args:
        text (str or bytes): JSON text holding an object.

    Returns:
        dict: The decoded record.

    Raises:
        SnapshotError: If the text is not valid JSON or not a JSON object.
    """
    try:
        record = json.loads(text)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(record, dict):
        raise SnapshotError(
            f"Snapshot must be a JSON object, got {type(record).__name__}")
    return record


def copy_rows(rows, name="corpus"):
    """
    Deep copy a list of rows (a corpus) into fresh lists.

    Args:
        rows: A sequence of sequences.
        name (str): Field name used in error messages.

    Returns:
        list of list: The copy.

    Raises:
        SnapshotError: If ``rows`` or one of its rows is not a list or tuple.
    """
    if not isinstance(rows, (list, tuple)):
        raise SnapshotError(f"'{name}' must be a list, got {type(rows).__name__}")

    copied = []
    for position, row in enumerate(rows):
        if not isinstance(row, (list, tuple)):
            raise SnapshotError(
                f"'{name}[{position}]' must be a list, got {type(row).__name__}")
        copied.append(list(row))
    return copied

import json
import os
import sys
import tempfile
from pathlib import Path


def write_json_atomic(path: str, data: object) -> None:
    """Writes ``data`` as JSON to ``path`` without exposing a partial file.

    The document is written to a sibling temporary file and moved over the
    target. If serialization fails the temporary file is removed and the
    target is left as it was.

    Args:
        path: Destination file.
        data: JSON-serializable data, typically ``Stream.to_dict()``.
    """
    target = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(data, tmp, ensure_ascii=False, indent=2)
            tmp.write("\n")
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_json(path: str) -> object:
    """Reads a JSON document; ``-`` reads standard input."""
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)

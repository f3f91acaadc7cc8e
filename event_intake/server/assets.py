import re
from pathlib import Path
from typing import Union

from event_intake.core.logging import log_evt

# fetch("http://localhost:<port>/register"  (either quote style)
_FETCH_URL = re.compile(r"""(fetch\(\s*(["']))http://localhost:\d+/register\2""")


def rewrite_endpoint_port(path: Union[str, Path], port: int) -> bool:
    """Point the front-end's register fetch at ``port``.

    Only the first matching URL is replaced. Returns False when the file
    can't be read/written or holds no matching URL.
    """
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        log_evt("warning", "asset_rewrite_failed", path=path, error=exc)
        return False

    updated, count = _FETCH_URL.subn(rf"\g<1>http://localhost:{port}/register\g<2>", source, count=1)
    if count == 0:
        log_evt("warning", "asset_rewrite_skipped", path=path, reason="pattern_not_found")
        return False

    if updated != source:
        try:
            path.write_text(updated, encoding="utf-8")
        except OSError as exc:
            log_evt("warning", "asset_rewrite_failed", path=path, error=exc)
            return False

    log_evt("info", "asset_rewritten", path=path, port=port)
    return True

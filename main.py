import sys
from pathlib import Path
from typing import Iterable

import uvicorn
from fastapi import FastAPI

from event_intake.core.config import CANDIDATE_PORTS, FORM_SUBMIT_ASSET, HOST, LOG_LEVEL
from event_intake.core.logging import log_evt
from event_intake.main import app as default_app
from event_intake.server.assets import rewrite_endpoint_port
from event_intake.server.ports import acquire_listener


def serve(app: FastAPI = default_app, host: str = HOST, ports: Iterable[int] = CANDIDATE_PORTS) -> int:
    """Connect (in the background), bind, patch the front-end, then serve until stopped."""
    # Serving does not wait on the database.
    app.state.registrations.database.start()

    acquired = acquire_listener(ports, host)
    if not acquired.ok:
        log_evt("error", "startup_aborted", attempted=acquired.attempted, error=acquired.error)
        return 1

    app.state.listen_port = acquired.port
    app.state.asset_rewritten = rewrite_endpoint_port(
        Path(app.state.static_dir) / FORM_SUBMIT_ASSET, acquired.port
    )

    server = uvicorn.Server(uvicorn.Config(app, log_level=LOG_LEVEL.lower()))
    try:
        server.run(sockets=[acquired.sock])
    finally:
        acquired.sock.close()
    return 0


if __name__ == "__main__":
    sys.exit(serve())

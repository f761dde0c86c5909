from __future__ import annotations

import logging


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # keep httpx quiet unless asked
    logging.getLogger("httpx").setLevel(level)
    logging.getLogger("httpcore").setLevel(level)
    # commands report client errors through console.err; the client log is for -v
    logging.getLogger("qc_client").setLevel(logging.DEBUG if verbose else logging.CRITICAL)

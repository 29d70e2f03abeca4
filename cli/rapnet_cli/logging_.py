from __future__ import annotations

import logging

# httpx logs every request at INFO; the client logs failed requests at DEBUG
# and retries at WARNING.
_LIBRARY_LOGGERS = ("httpx", "httpcore", "rapnet_pricelist.client", "rapnet_pricelist.transport")


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(level)

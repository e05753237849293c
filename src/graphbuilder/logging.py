"""graphbuilder.logging

Logger factory. Library modules never install handlers; hosts (and the CLI)
decide how records are rendered.
"""

from __future__ import annotations

import logging

_ROOT = "graphbuilder"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under `graphbuilder`."""
    n = str(name or "").strip()
    if not n or n == _ROOT or n.startswith(_ROOT + "."):
        return logging.getLogger(n or _ROOT)
    return logging.getLogger(f"{_ROOT}.{n}")


logging.getLogger(_ROOT).addHandler(logging.NullHandler())

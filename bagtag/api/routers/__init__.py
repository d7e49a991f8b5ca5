"""Router modules exposed for convenient imports."""

from . import auth, healthz, items, meta, readyz, reports, scans

__all__ = [
    "auth",
    "healthz",
    "items",
    "meta",
    "readyz",
    "reports",
    "scans",
]

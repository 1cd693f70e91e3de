"""Domain layer for docnum application."""

# Services import the database interface, which imports domain entities;
# load them lazily so importing docnum.domain.entities stays cycle free.
_SERVICES = {
    "NumberingService": "docnum.domain.numbering",
    "DocumentService": "docnum.domain.documents",
}


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = ["NumberingService", "DocumentService"]

"""Flow catalog - cached, filterable views over executables and workspaces."""

__version__ = "0.1.0"

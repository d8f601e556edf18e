"""Cache-backed views over the backend collections.

Each module combines the query cache with pure transformation functions:
typed reads (``executables``), the filterable catalog (``catalog``), the
namespace tree (``tree``) and per-workspace counts (``counts``).  Managers
never raise backend faults; failures arrive as ``QueryError`` values on
the returned ``QueryState``.
"""

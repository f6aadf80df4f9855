"""Core (UI-agnostic) idea bank logic.

This package contains:
- record parsing (CSV export text -> Idea records)
- filter normalization and default criteria
- view compute functions (filter / search / sort / option counts)
- metrics payloads (JSON-serializable totals and grouped sums)
"""

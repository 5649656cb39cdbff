"""
schemaview: schema-driven table and form view engine.

Subpackages
- schemaview.core: zero-IO contracts (field descriptors, introspection, validation,
  pagination sequencing).
- schemaview.view: table view state, selectors and export.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]

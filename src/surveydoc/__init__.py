"""
Survey Document Package

Editable, tree-structured survey documents and their validation.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Rendering or UI widgets
    - Persistence backends
    - Network transport
    - Authentication

This package defines DOCUMENT STRUCTURE and its CORRECTNESS only:
    - model:        the typed item tree (immutable values)
    - identity:     ids and unique codes
    - defaults:     fresh items per type
    - transform:    reshaping an item when its type changes
    - tree:         traversal and copy-on-write edits
    - validation:   rules and the validator engine
    - serialization: JSON / YAML round-trip

All editing happens by producing new values. A persistence layer is
expected to call the validator before saving and reject invalid documents.
"""

__version__ = "0.1.0"

"""Core translator type aliases.

This module contains no UI framework imports. The translator exposes ids and
progress metadata to a UI, but the core runs headlessly without Textual.
"""

from __future__ import annotations

from typing import NewType

# Opaque identifier used to correlate AST nodes / progress events.
# In the Textual UI this maps to tree node ids.
ASTNodeId = NewType("ASTNodeId", int)

# Workspace-scoped block identifier ("b1", "b2", ...).
BlockId = NewType("BlockId", str)

# Workspace-scoped variable identifier ("v1", "v2", ...).
VariableId = NewType("VariableId", str)

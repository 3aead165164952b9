"""Scalar constants for KubeVigil.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Naming heuristic
# ============================================================================

NAME_SEPARATOR: Final = "-"
# Pod names generated by a Deployment carry "<replicaset-hash>-<pod-hash>".
GENERATED_SUFFIX_SEGMENTS: Final = 2

# Owner kinds that imply a ReplicaSet-generated pod name.
REPLICA_SET_OWNER_KINDS: Final = frozenset({"ReplicaSet", "Deployment"})
# Kind hint recorded for pods created without a controller owner.
NO_OWNER_KIND: Final = "Pod"

# ============================================================================
# Fetch scopes
# ============================================================================

ALL_NAMESPACES_SCOPE: Final = "*"

__all__ = [
    "ALL_NAMESPACES_SCOPE",
    "GENERATED_SUFFIX_SEGMENTS",
    "NAME_SEPARATOR",
    "NO_OWNER_KIND",
    "REPLICA_SET_OWNER_KINDS",
]

# =============================================================================
# app/auth/__init__.py - Operator Identity
# =============================================================================
# Resolves the operator (name and role) behind a request from an optional
# Supabase JWT, for the operation log.
#
# Usage:
#   from app.auth import get_operator
# =============================================================================

from app.auth.dependencies import decode_operator, get_operator, operator_from_claims

__all__ = [
    "decode_operator",
    "get_operator",
    "operator_from_claims",
]

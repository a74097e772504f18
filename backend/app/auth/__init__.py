# app/auth/__init__.py
"""
Authentication modules.

This package contains:
- credentials.py: Email/password authorization against Supabase
- session.py: JWT and session callbacks (id/role projection)
- options.py: Declarative auth configuration consumed by the routes
- identity.py: Canonical authenticated identity model
"""
from app.auth.identity import Identity

__all__ = ["Identity"]

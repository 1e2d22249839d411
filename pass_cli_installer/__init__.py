"""pass-cli installer (Python-first, step-driven).

Core design goals:
- Platform-aware artifact resolution (fail on unsupported hosts)
- Fail-closed integrity checks before any filesystem write
- Partial success over rollback once the binary is in place
- Smoke tests isolated from the operator's real vault
- Centralized logging
"""

__all__ = []

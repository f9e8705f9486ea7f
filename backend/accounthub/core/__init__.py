# accounthub/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: One-time setup process gated by the server config entry
- db: Database configuration and connect-with-retry
- errors: HTTP error taxonomy
- registry: Connected WebSocket clients and broadcasting
- security: Password hashing and JWT signing/verification
"""

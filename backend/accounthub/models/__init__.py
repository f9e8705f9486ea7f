# accounthub/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- Session: Issued token record (belongs to User)
- Role: Named permission set
- Config: Key/value settings store (setup flag)
"""
from .user import User
from .session import Session
from .role import Role
from .config import Config

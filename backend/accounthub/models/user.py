# accounthub/models/user.py
"""
Database model for users.
Represents a user account: login credentials, profile fields and role names.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Sessions (one-to-many, via related_name="sessions")

    Security:
    - Password is stored as an argon2 hash and never serialized
    - Username must be unique across all users (case-sensitive)
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key, exposed to clients as "_id"
    username = fields.CharField(
        max_length=256,
        unique=True,
        index=True
    )  # User login name (must be unique, indexed for fast lookups)
    email = fields.CharField(max_length=256, null=True)
    password_hash = fields.CharField(max_length=255)  # Hashed password, never store plain text
    full_name = fields.CharField(max_length=256, null=True)
    roles = fields.JSONField(default=list)  # Names of Role rows, e.g. ["user"] or ["admin"]
    avatar = fields.CharField(max_length=512, null=True)  # URL or /storage path
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    def has_role(self, name: str) -> bool:
        return name in (self.roles or [])

    def to_public(self) -> dict:
        """Serialize for API responses (no password hash)."""
        return {
            "_id": str(self.id),
            "username": self.username,
            "email": self.email,
            "fullName": self.full_name,
            "roles": list(self.roles or []),
            "avatar": self.avatar,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

# accounthub/models/role.py
from tortoise import fields, models

class Role(models.Model):
    """
    Named permission set. Users reference roles by name (User.roles).
    """
    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=64, unique=True, index=True)
    permissions = fields.JSONField(default=list)  # e.g. ["users:read", "roles:write"]
    description = fields.CharField(max_length=256, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "roles"

    def to_public(self) -> dict:
        return {
            "name": self.name,
            "permissions": list(self.permissions or []),
            "description": self.description,
        }

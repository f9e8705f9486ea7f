# accounthub/models/session.py
from tortoise import fields, models

class Session(models.Model):
    """
    Server-side record of an issued token.
    Created on login, looked up by token during socket authentication,
    deleted on logout.
    """
    id = fields.IntField(pk=True)
    token = fields.CharField(max_length=1024, index=True)
    user: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="sessions", on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "sessions"

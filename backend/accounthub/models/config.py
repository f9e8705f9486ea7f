# accounthub/models/config.py
from tortoise import fields, models

class Config(models.Model):
    """
    Singleton-per-key settings store.
    The entry with key "server" holds {"setup": bool} for the setup gate.
    """
    id = fields.IntField(pk=True)
    key = fields.CharField(max_length=64, unique=True, index=True)
    value = fields.JSONField(default=dict)

    class Meta:
        table = "config"

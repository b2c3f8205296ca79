from tortoise import fields
from tortoise.models import Model


class Session(Model):
    token = fields.CharField(max_length=128, primary_key=True)
    user_id = fields.CharField(max_length=255, db_index=True)
    email = fields.CharField(max_length=255, null=True)
    name = fields.CharField(max_length=255, null=True)
    avatar = fields.CharField(max_length=1024, null=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    expires_at = fields.DatetimeField()

    class Meta:
        table = "sessions"

    def __str__(self) -> str:
        return f"<Session(user_id={self.user_id}, expires_at={self.expires_at})>"

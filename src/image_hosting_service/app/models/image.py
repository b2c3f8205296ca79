from tortoise import fields
from tortoise.models import Model


class Image(Model):
    id = fields.CharField(max_length=16, primary_key=True)
    filename = fields.CharField(
        max_length=255, description="Original filename as uploaded by user"
    )
    mime_type = fields.CharField(max_length=50, description="Declared content type")
    size = fields.IntField(description="File size in bytes")
    storage_path = fields.CharField(
        max_length=64, description="Object key in the image store ({id}.{extension})"
    )
    user_id = fields.CharField(max_length=255, db_index=True, description="Owner id")

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "images"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"<Image(id={self.id}, filename='{self.filename}', size={self.size} bytes)>"

from pydantic import Base64Bytes, BaseModel, Field

from waste_core.storage import FileUpload


class FilePayload(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    content_type: str = Field(min_length=1, max_length=100)
    content: Base64Bytes

    def to_upload(self) -> FileUpload:
        return FileUpload(filename=self.filename, content_type=self.content_type, content=self.content)

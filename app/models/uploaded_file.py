"""
Uploaded File Model
===================
Describes a file written to the upload directory. The file itself is the
persisted artifact; this model only lives for the request that stored it.
"""
from pydantic import BaseModel


class UploadedFile(BaseModel):
    original_name: str
    stored_name: str
    size: int
    extension: str
    path: str
    url: str

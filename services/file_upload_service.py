import os
from fastapi import UploadFile
from config import MAX_UPLOAD_BYTES

XML_CONTENT_TYPES = {"text/xml", "application/xml"}


class UploadTooLarge(ValueError):
    pass


def read_uploaded_file(file: UploadFile) -> bytes:
    """
    Check the upload is an XML file and return its raw bytes.
    Nothing is written to disk.
    """
    if not file.filename:
        raise ValueError("No file selected.")

    ext = os.path.splitext(file.filename)[1]
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if ext.lower() != ".xml" and content_type not in XML_CONTENT_TYPES:
        raise ValueError("Please upload a valid XML file.")

    # Read one byte past the limit to detect oversized uploads
    content = file.file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise UploadTooLarge(f"File exceeds the {MAX_UPLOAD_BYTES} byte upload limit.")

    return content

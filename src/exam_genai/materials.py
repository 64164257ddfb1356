"""
Study material reader
- turns an uploaded file's bytes into text for the material field
- a file that cannot be decoded yields None and the field is left as it was
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Text formats offered by the uploader
ACCEPTED_EXTENSIONS = (
    "txt", "md", "json", "js", "ts", "py", "java", "cpp", "c", "h", "cs", "html", "css",
)


def read_study_material(data: bytes, filename: Optional[str] = None) -> Optional[str]:
    """Decode uploaded bytes as UTF-8 text (a leading BOM is dropped)."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("could not read %s as text: %s", filename or "upload", e)
        return None

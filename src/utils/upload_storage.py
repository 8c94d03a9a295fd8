"""Attachment storage.

Story attachments are stored flat in the uploads directory under generated,
collision-resistant names and are served back at /uploads/<filename>.
"""

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from config import (
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE,
    MAX_FILES_PER_STORY,
    UPLOADS_DIR,
)
from core.exceptions import (
    FileTooLargeError,
    UnsupportedFileTypeError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    """An uploaded file read into memory."""

    filename: str
    content_type: Optional[str]
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class UploadStorage:
    """Validates, stores and removes story attachment files."""

    def __init__(
        self,
        upload_dir: Path = UPLOADS_DIR,
        max_files: int = MAX_FILES_PER_STORY,
        max_file_size: int = MAX_FILE_SIZE,
        allowed_mime_types: Optional[Dict[str, str]] = None,
    ):
        self.upload_dir = Path(upload_dir)
        self.max_files = max_files
        self.max_file_size = max_file_size
        self.allowed_mime_types = allowed_mime_types or ALLOWED_MIME_TYPES

    def detect_mimetype(self, file: IncomingFile) -> str:
        """Work out the media type of an upload.

        The declared content type wins when it is an accepted type; otherwise
        the type is guessed from the file extension.
        """
        declared = (file.content_type or "").split(";")[0].strip().lower()
        if declared in self.allowed_mime_types:
            return declared
        guessed, _ = mimetypes.guess_type(file.filename or "")
        if guessed:
            return guessed.lower()
        return declared or "application/octet-stream"

    def validate(self, files: List[IncomingFile]) -> List[str]:
        """Check a whole batch before anything is written.

        Returns:
            Detected media type of each file, in order.

        Raises:
            ValidationError: If there are more files than allowed.
            UnsupportedFileTypeError: If a file type is not accepted.
            FileTooLargeError: If a file exceeds the size ceiling.
        """
        if len(files) > self.max_files:
            raise ValidationError(
                f"Too many files: at most {self.max_files} attachments are allowed"
            )

        mimetypes_ = []
        for file in files:
            mimetype = self.detect_mimetype(file)
            if mimetype not in self.allowed_mime_types:
                raise UnsupportedFileTypeError(file.filename, mimetype)
            if file.size > self.max_file_size:
                raise FileTooLargeError(file.filename, self.max_file_size)
            mimetypes_.append(mimetype)
        return mimetypes_

    def _storage_name(self, mimetype: str) -> str:
        # Extension follows the detected type, never the client's file name
        return f"{uuid.uuid4().hex}{self.allowed_mime_types[mimetype]}"

    def save(self, files: List[IncomingFile]) -> List[dict]:
        """Validate and write a batch of files.

        If any write fails, files already written for this batch are removed.

        Returns:
            Attachment descriptors with original_name, filename, mimetype and size.
        """
        if not files:
            return []

        detected = self.validate(files)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

        saved = []
        try:
            for file, mimetype in zip(files, detected):
                filename = self._storage_name(mimetype)
                (self.upload_dir / filename).write_bytes(file.content)
                saved.append(
                    {
                        "original_name": file.filename or filename,
                        "filename": filename,
                        "mimetype": mimetype,
                        "size": file.size,
                    }
                )
        except OSError:
            self.delete_files(d["filename"] for d in saved)
            raise

        logger.info("Stored %d attachment(s) in %s", len(saved), self.upload_dir)
        return saved

    def delete_files(self, filenames: Iterable[str]) -> int:
        """Remove stored files. Files already missing from disk are skipped.

        Returns:
            Number of files actually removed.
        """
        removed = 0
        for filename in filenames:
            path = self.upload_dir / Path(filename).name
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                logger.warning("Attachment already missing from disk: %s", path)
        return removed

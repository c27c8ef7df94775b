"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from thaina_juridico.domain.exceptions import InvalidRequestError

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class StoragePath:
    """Path of an uploaded file inside the documents bucket.

    Keeps the raw path as stored by the frontend (``<user>/<uuid>.pdf``) and
    exposes the lower-cased extension used to pick an extractor.
    """

    raw: str

    @classmethod
    def from_string(cls, path: str) -> StoragePath:
        """Parse and validate a raw storage path."""
        path = path.strip()
        if not path:
            raise InvalidRequestError("filePath must not be empty.")
        return cls(raw=path)

    @property
    def extension(self) -> str:
        name = self.raw.rsplit("/", maxsplit=1)[-1]
        if "." not in name:
            return ""
        return name.rsplit(".", maxsplit=1)[-1].lower()


def planalto_file_path(name: str) -> str:
    """Storage path recorded for an imported legislation (``planalto/<slug>.txt``)."""
    slug = _WHITESPACE_RE.sub("_", name).lower()
    return f"planalto/{slug}.txt"

"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Mode(str, Enum):
    """Persona selector: pessoa física (consumer) or pessoa jurídica (business)."""

    PF = "PF"
    PJ = "PJ"

    @classmethod
    def parse(cls, value: object) -> Mode:
        """Return the matching mode, falling back to ``PF`` for anything else."""
        if value == cls.PJ.value:
            return cls.PJ
        return cls.PF


class ImportStatus(str, Enum):
    """Per-legislation outcome of an import run."""

    SUCCESS = "success"
    ALREADY_EXISTS = "already_exists"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One turn of a conversation."""

    role: Role
    content: str


@dataclass(frozen=True, slots=True)
class StreamChunk:
    """Canonical incremental unit of generated text, whatever the backend."""

    delta_content: str


@dataclass(frozen=True, slots=True)
class KnowledgeDocument:
    """A stored document flagged as knowledge base for one user."""

    name: str
    content_text: str | None = None


@dataclass(frozen=True, slots=True)
class KnowledgeExcerpt:
    """A ranked, truncated document ready to be embedded in the prompt."""

    name: str
    excerpt: str


@dataclass(frozen=True, slots=True)
class Legislation:
    """An official legislation page that can be imported into the knowledge base."""

    name: str
    url: str


@dataclass(frozen=True, slots=True)
class NewDocument:
    """A document row to be inserted into the hosted ``documents`` table."""

    user_id: str
    name: str
    file_path: str
    file_type: str
    file_size: int
    folder: str
    content_text: str
    is_knowledge_base: bool = True


@dataclass(frozen=True, slots=True)
class ImportOutcome:
    """Result of importing a single legislation."""

    name: str
    status: ImportStatus
    chars: int | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Summary of a text extraction run for one document."""

    text_length: int
    preview: str


@dataclass(frozen=True, slots=True)
class ChatCompletion:
    """A non-streamed answer and the backend that produced it."""

    backend: str
    content: str

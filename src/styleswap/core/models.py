"""Data models for the StyleSwap generation workflow."""

from dataclasses import dataclass
from enum import Enum


class GenerationStatus(str, Enum):
    """Workflow status. Exactly one value holds at any time."""

    IDLE = "idle"
    GENERATING = "generating"
    SUCCESS = "success"
    ERROR = "error"


class ErrorKind(str, Enum):
    """Classification of a failed generation."""

    CREDENTIAL_MISSING = "credential_missing"
    OTHER = "other"


@dataclass(frozen=True)
class SourceImage:
    """An ingested product photo.

    Attributes
    ----------
    encoded_data : str
        Base64 data URI of the uploaded bytes
    mime_type : str
        Media type declared (or detected) at upload time
    """

    encoded_data: str
    mime_type: str


@dataclass(frozen=True)
class Preset:
    """A named backdrop instruction from the static catalog.

    ``description`` is the literal text sent to the model; ``icon`` is a
    presentation hint only.
    """

    id: str
    name: str
    description: str
    icon: str = ""


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs of a single call to the generation service. Never stored."""

    image_data: str
    mime_type: str
    prompt: str


@dataclass(frozen=True)
class WorkflowError:
    """The last generation failure, as shown to the user."""

    message: str
    kind: ErrorKind = ErrorKind.OTHER

    @property
    def is_credential_missing(self) -> bool:
        return self.kind is ErrorKind.CREDENTIAL_MISSING


@dataclass(frozen=True)
class DownloadableImage:
    """A finished result ready to hand to the export destination."""

    data: bytes
    suggested_name: str
    mime_type: str = "image/png"

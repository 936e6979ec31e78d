from .directive import (
    FreeFormStyle,
    LengthDirective,
    PoemLength,
    StyleDirective,
    ToneDirective,
)
from .image_payload import ImagePayload
from .outcome import ErrorKind, Failure, GenerationOutcome, Success

__all__ = [
    "ImagePayload",
    "PoemLength",
    "FreeFormStyle",
    "LengthDirective",
    "ToneDirective",
    "StyleDirective",
    "ErrorKind",
    "Success",
    "Failure",
    "GenerationOutcome",
]

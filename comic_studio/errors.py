from typing import Iterable


class ComicStudioError(Exception):
    """Base class for every error raised by the script engine."""


class ValidationError(ComicStudioError, ValueError):
    """Required drafting input is missing."""

    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}")


class PanelIndexError(ComicStudioError, IndexError):
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Panel index {index} out of range for script with {size} panels")


class CredentialError(ComicStudioError, ValueError):
    """Image generation was requested without a usable API key."""


class GenerationFailure(ComicStudioError, RuntimeError):
    """The image provider call failed or returned something unusable."""


class ReorderError(ComicStudioError, ValueError):
    """A reorder request was not a permutation of the current panels."""


class ProjectNotFoundError(ComicStudioError, KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project '{name}' not found")

    def __str__(self):
        return self.args[0]

import uuid
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    return str(uuid.uuid4())


class Character(BaseModel):
    id: str = Field(description="Unique identifier of the character in the roster")
    name: str = Field(default="", description="Display name of the character")
    description: str = Field(description="Visual description used when prompting for panel images")


class Panel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(default_factory=new_id, description="Stable identity of the panel, never derived from position")
    scene: str = Field(default="", description="What is happening in the panel")
    dialogue: str = Field(default="", description="Dialogue spoken in the panel")
    characters: Tuple[str, ...] = Field(default=(), description="Ids of the characters appearing in the panel")
    generated_image: Optional[str] = Field(default=None, description="Reference to the last successfully generated image")
    dialogue_size: Optional[int] = Field(default=None, gt=0, description="Font size used to render the dialogue")

    @field_validator("characters", mode="before")
    @classmethod
    def _unique_characters(cls, value):
        if value is None:
            return ()
        seen = []
        for char_id in value:
            if char_id not in seen:
                seen.append(char_id)
        return tuple(seen)


class Script(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(default_factory=new_id, description="Identity of the script, assigned once at creation")
    theme: str = Field(description="Theme the story is built around")
    tone: str = Field(description="Tone of the story, e.g. adventure or noir")
    key_elements: str = Field(description="Key elements the panels are seeded from")
    panels: Tuple[Panel, ...] = Field(default=(), description="Panels in narrative order")

    @field_validator("panels")
    @classmethod
    def _unique_panel_ids(cls, panels):
        ids = [panel.id for panel in panels]
        if len(ids) != len(set(ids)):
            raise ValueError("Panel ids must be unique within a script")
        return panels


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(description="Full text prompt sent to the image provider")
    number_results: int = Field(default=1, ge=1, description="How many images to request")
    guidance_scale: float = Field(description="Prompt adherence strength")


class GenerationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    panel_id: str = Field(description="Panel the request was dispatched for")
    image_ref: Optional[str] = Field(default=None, description="Reference to the generated image on success")
    error: Optional[str] = Field(default=None, description="Provider error message on failure")

    @property
    def succeeded(self) -> bool:
        return self.image_ref is not None

    @classmethod
    def success(cls, panel_id: str, image_ref: str) -> "GenerationOutcome":
        return cls(panel_id=panel_id, image_ref=image_ref)

    @classmethod
    def failure(cls, panel_id: str, error: str) -> "GenerationOutcome":
        return cls(panel_id=panel_id, error=error)


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: str = Field(description="One of: info, success, error")
    message: str = Field(description="Human readable message for the user")
    panel_id: Optional[str] = Field(default=None, description="Panel the message relates to, if any")

from typing import Iterable, List

from comic_studio.config import Config
from comic_studio.core.models import Character, Panel


def character_descriptions(panel_characters: Iterable[str], roster: Iterable[Character]) -> List[str]:
    """Descriptions of the panel's characters, in roster order. Unknown ids are skipped."""
    wanted = set(panel_characters)
    return [char.description for char in roster if char.id in wanted]


def build_panel_prompt(tone: str, panel: Panel, roster: Iterable[Character]) -> str:
    descriptions = ", ".join(character_descriptions(panel.characters, roster))
    return (
        f"Comic panel in {tone} style: {panel.scene}. "
        f"Characters: {descriptions}. "
        f"Dialogue: {panel.dialogue}. "
        f"{Config.PANEL_PROMPT_SUFFIX}"
    )

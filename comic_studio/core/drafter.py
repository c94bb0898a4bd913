import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from comic_studio.config import Config
from comic_studio.core.models import Panel, Script, new_id
from comic_studio.errors import ValidationError

logger = logging.getLogger(__name__)


class DraftGenerator:
    """Builds the first version of a script from the user's story settings."""

    def __init__(self, templates: Optional[Sequence[Tuple[str, str]]] = None):
        self.templates = tuple(templates) if templates is not None else Config.DRAFT_PANEL_TEMPLATES

    def generate(self, theme: str, tone: str, key_elements: str, selected_character_ids: Iterable[str]) -> Script:
        selected = tuple(dict.fromkeys(selected_character_ids or ()))

        missing: List[str] = []
        if not theme or not theme.strip():
            missing.append("theme")
        if not key_elements or not key_elements.strip():
            missing.append("key_elements")
        if not selected:
            missing.append("selected_character_ids")
        if missing:
            raise ValidationError(missing)

        panels = [
            Panel(
                id=new_id(),
                scene=scene_template.format(key_elements=key_elements),
                dialogue=dialogue,
                characters=selected,
            )
            for scene_template, dialogue in self.templates
        ]
        script = Script(id=new_id(), theme=theme, tone=tone, key_elements=key_elements, panels=tuple(panels))

        logger.info(f"Drafted script {script.id} with {len(panels)} panels for theme '{theme}'")
        return script

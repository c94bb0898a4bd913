import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from comic_studio.core import engine
from comic_studio.core.drafter import DraftGenerator
from comic_studio.core.models import Character, GenerationOutcome, Notification, Script
from comic_studio.core.prompts import character_descriptions

logger = logging.getLogger(__name__)

Listener = Callable[[Notification], None]

_LOG_LEVELS = {"info": logging.INFO, "success": logging.INFO, "error": logging.ERROR}


class ScriptSession:
    """
    Owns the script being edited.

    All changes go through the engine functions and the result replaces the
    held script, so there is exactly one writer. Listeners receive transient
    notifications meant for the user.
    """

    def __init__(self, characters: Iterable[Character] = (), drafter: Optional[DraftGenerator] = None):
        self.script: Optional[Script] = None
        self.characters: Tuple[Character, ...] = tuple(characters)
        self.selected_character_ids: Tuple[str, ...] = ()
        self.drafter = drafter or DraftGenerator()
        self._listeners: List[Listener] = []

    # Notifications

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def notify(self, level: str, message: str, panel_id: Optional[str] = None):
        notification = Notification(level=level, message=message, panel_id=panel_id)
        logger.log(_LOG_LEVELS.get(level, logging.INFO), message)
        for listener in self._listeners:
            listener(notification)

    # Characters

    def set_characters(self, characters: Iterable[Character]):
        self.characters = tuple(characters)

    def describe(self, character_ids: Iterable[str]) -> List[str]:
        return character_descriptions(character_ids, self.characters)

    # Script transitions

    def draft(self, theme: str, tone: str, key_elements: str, selected_character_ids: Sequence[str]) -> Script:
        self.script = self.drafter.generate(theme, tone, key_elements, selected_character_ids)
        self.selected_character_ids = tuple(dict.fromkeys(selected_character_ids))
        self.notify("success", "Script generated successfully!")
        return self.script

    def add_panel(self, initial_characters: Optional[Iterable[str]] = None) -> Optional[Script]:
        if self.script is None:
            return None
        if initial_characters is None:
            initial_characters = self.selected_character_ids
        self.script = engine.add_panel(self.script, initial_characters)
        self.notify("success", "New panel added", panel_id=self.script.panels[-1].id)
        return self.script

    def update_panel(self, index: int, fields: Mapping[str, Any]) -> Optional[Script]:
        self.script = engine.update_panel(self.script, index, fields)
        return self.script

    def delete_panel(self, index: int) -> Optional[Script]:
        if self.script is None:
            return None
        panel_id = self.script.panels[index].id if 0 <= index < len(self.script.panels) else None
        self.script = engine.delete_panel(self.script, index)
        self.notify("success", "Panel deleted", panel_id=panel_id)
        return self.script

    def reorder(self, new_order: Sequence[engine.PanelKey]) -> Optional[Script]:
        if self.script is None:
            return None
        self.script = engine.reorder(self.script, new_order)
        self.notify("success", "Panels reordered")
        return self.script

    def apply_generation_result(self, panel_id: str, outcome: GenerationOutcome) -> Optional[Script]:
        self.script = engine.apply_generation_result(self.script, panel_id, outcome)
        return self.script

    # Persistence

    def snapshot(self) -> Dict[str, Any]:
        """JSON-serializable state, suitable for a project library."""
        return {
            "script": self.script.model_dump(mode="json") if self.script else None,
            "characters": [char.model_dump(mode="json") for char in self.characters],
            "selected_character_ids": list(self.selected_character_ids),
        }

    def restore(self, data: Mapping[str, Any]):
        script_data = data.get("script")
        self.script = Script.model_validate(script_data) if script_data else None
        self.characters = tuple(Character.model_validate(item) for item in data.get("characters", []))
        self.selected_character_ids = tuple(data.get("selected_character_ids", []))

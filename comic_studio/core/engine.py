"""
State transitions over a Script.

Every function takes the current Script (or None when nothing has been drafted
yet) and returns the next Script. Scripts and panels are frozen, so callers
always receive a new value and the previous one stays valid.
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from comic_studio.core.models import GenerationOutcome, Panel, Script, new_id
from comic_studio.errors import PanelIndexError, ReorderError

logger = logging.getLogger(__name__)

PanelKey = Union[Panel, str]


def _check_index(script: Script, index: int):
    if not 0 <= index < len(script.panels):
        raise PanelIndexError(index, len(script.panels))


def _with_panels(script: Script, panels: Iterable[Panel]) -> Script:
    return Script.model_validate({**script.model_dump(exclude={"panels"}), "panels": tuple(panels)})


def get_panel(script: Script, index: int) -> Panel:
    _check_index(script, index)
    return script.panels[index]


def find_panel(script: Optional[Script], panel_id: str) -> Optional[Panel]:
    if script is None:
        return None
    for panel in script.panels:
        if panel.id == panel_id:
            return panel
    return None


def panel_ids(script: Optional[Script]) -> List[str]:
    if script is None:
        return []
    return [panel.id for panel in script.panels]


def add_panel(script: Optional[Script], initial_characters: Iterable[str] = ()) -> Optional[Script]:
    if script is None:
        return None
    panel = Panel(id=new_id(), characters=tuple(initial_characters))
    while find_panel(script, panel.id) is not None:
        panel = panel.model_copy(update={"id": new_id()})
    return _with_panels(script, script.panels + (panel,))


def update_panel(script: Optional[Script], index: int, fields: Mapping[str, Any]) -> Optional[Script]:
    """Merges `fields` into the panel at `index`. The panel id is never changed."""
    if script is None:
        return None
    current = get_panel(script, index)
    merged = {**current.model_dump(), **dict(fields), "id": current.id}
    updated = Panel.model_validate(merged)

    panels = list(script.panels)
    panels[index] = updated
    return _with_panels(script, panels)


def delete_panel(script: Optional[Script], index: int) -> Optional[Script]:
    if script is None:
        return None
    _check_index(script, index)
    panels = script.panels[:index] + script.panels[index + 1:]
    return _with_panels(script, panels)


def reorder(script: Optional[Script], new_order: Sequence[PanelKey]) -> Optional[Script]:
    """
    Replaces the panel sequence with `new_order`.

    `new_order` must hold every current panel (or panel id) exactly once.
    Panel values are taken from the script by id, so an order built from a
    stale copy of the panels cannot roll back newer edits.
    """
    if script is None:
        return None

    requested = [key.id if isinstance(key, Panel) else key for key in new_order]
    current = {panel.id: panel for panel in script.panels}

    if len(requested) != len(current) or set(requested) != set(current):
        missing = [pid for pid in current if pid not in requested]
        foreign = [pid for pid in requested if pid not in current]
        logger.error(
            f"Rejected reorder for script {script.id}: expected {len(current)} panels, "
            f"got {len(requested)} (missing={missing}, unknown={foreign})"
        )
        raise ReorderError("New order must be a permutation of the current panels")

    return _with_panels(script, [current[pid] for pid in requested])


def apply_generation_result(script: Optional[Script], panel_id: str, outcome: GenerationOutcome) -> Optional[Script]:
    if script is None:
        return None

    index = next((i for i, panel in enumerate(script.panels) if panel.id == panel_id), None)
    if index is None:
        logger.info(f"Discarding generation result for panel {panel_id}: panel no longer exists.")
        return script

    if not outcome.succeeded:
        return script

    panels = list(script.panels)
    panels[index] = panels[index].model_copy(update={"generated_image": outcome.image_ref})
    return _with_panels(script, panels)

import pytest
from pydantic import ValidationError as PydanticValidationError
from comic_studio.core.models import Character, GenerationOutcome, Panel, Script

class TestModels:
    def test_panel_defaults(self):
        panel = Panel()
        assert panel.id
        assert panel.scene == ""
        assert panel.dialogue == ""
        assert panel.characters == ()
        assert panel.generated_image is None
        assert panel.dialogue_size is None

    def test_panel_ids_are_unique(self):
        assert Panel().id != Panel().id

    def test_panel_characters_deduplicated_in_order(self):
        panel = Panel(characters=["c2", "c1", "c2"])
        assert panel.characters == ("c2", "c1")

    def test_panel_is_frozen(self):
        panel = Panel(scene="Dock")
        with pytest.raises(PydanticValidationError):
            panel.scene = "Harbor"

    def test_panel_rejects_unknown_fields(self):
        with pytest.raises(PydanticValidationError):
            Panel(caption="nope")

    def test_panel_rejects_non_positive_dialogue_size(self):
        with pytest.raises(PydanticValidationError):
            Panel(dialogue_size=0)

    def test_script_rejects_duplicate_panel_ids(self):
        panel = Panel(id="p1")
        with pytest.raises(PydanticValidationError):
            Script(theme="t", tone="adventure", key_elements="k", panels=(panel, panel))

    def test_script_allows_zero_panels(self):
        script = Script(theme="t", tone="adventure", key_elements="k")
        assert script.panels == ()

    def test_script_json_round_trip(self):
        script = Script(theme="t", tone="noir", key_elements="k", panels=(Panel(scene="s", characters=["c1"]),))
        restored = Script.model_validate_json(script.model_dump_json())
        assert restored == script

    def test_character_validation(self):
        with pytest.raises(ValueError):
            # Missing required fields
            Character(id="c1")

    def test_outcome_helpers(self):
        ok = GenerationOutcome.success("p1", "img://x")
        failed = GenerationOutcome.failure("p1", "boom")
        assert ok.succeeded
        assert not failed.succeeded
        assert failed.error == "boom"

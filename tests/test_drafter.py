import pytest
from comic_studio.core.drafter import DraftGenerator
from comic_studio.errors import ValidationError

@pytest.fixture
def drafter():
    return DraftGenerator()

class TestDraftGenerator:
    def test_generate_pirates_script(self, drafter):
        script = drafter.generate("pirates", "adventure", "a stormy sea", {"c1"})

        assert script.theme == "pirates"
        assert script.tone == "adventure"
        assert script.key_elements == "a stormy sea"
        assert len(script.panels) == 2
        assert "a stormy sea" in script.panels[0].scene
        assert all(panel.characters == ("c1",) for panel in script.panels)
        assert all(panel.generated_image is None for panel in script.panels)

    def test_template_text(self, drafter):
        script = drafter.generate("pirates", "adventure", "a stormy sea", ["c1"])
        assert script.panels[0].scene == "Opening scene in a stormy sea"
        assert script.panels[0].dialogue == 'Character: "Our story begins..."'
        assert script.panels[1].scene == "Action sequence in a stormy sea"
        assert script.panels[1].dialogue == 'Character: "We must hurry!"'

    def test_every_panel_gets_full_selection(self, drafter):
        script = drafter.generate("heist", "noir", "a vault", ["c2", "c1", "c2"])
        for panel in script.panels:
            assert panel.characters == ("c2", "c1")

    def test_ids_are_fresh(self, drafter):
        first = drafter.generate("t", "adventure", "k", ["c1"])
        second = drafter.generate("t", "adventure", "k", ["c1"])
        assert first.id != second.id
        ids = [p.id for p in first.panels + second.panels]
        assert len(ids) == len(set(ids))

    @pytest.mark.parametrize("theme, key_elements, selected, missing", [
        ("", "a stormy sea", ["c1"], ["theme"]),
        ("pirates", "", ["c1"], ["key_elements"]),
        ("pirates", "a stormy sea", [], ["selected_character_ids"]),
        ("   ", "a stormy sea", ["c1"], ["theme"]),
        ("", "", [], ["theme", "key_elements", "selected_character_ids"]),
    ])
    def test_missing_inputs(self, drafter, theme, key_elements, selected, missing):
        with pytest.raises(ValidationError) as exc_info:
            drafter.generate(theme, "adventure", key_elements, selected)
        assert exc_info.value.missing_fields == missing

    def test_custom_templates(self):
        drafter = DraftGenerator(templates=[("Only {key_elements}", "...")])
        script = drafter.generate("t", "adventure", "rain", ["c1"])
        assert len(script.panels) == 1
        assert script.panels[0].scene == "Only rain"

import pytest
from comic_studio.core.library import ProjectLibrary
from comic_studio.core.session import ScriptSession
from comic_studio.errors import ProjectNotFoundError

@pytest.fixture
def library(tmp_path):
    return ProjectLibrary(tmp_path / "projects")

class TestProjectLibrary:
    def test_init_creates_dir(self, tmp_path):
        ProjectLibrary(tmp_path / "projects")
        assert (tmp_path / "projects").exists()

    def test_save_and_load(self, library, session):
        path = library.save("Pirate Tale", session.snapshot())
        assert path.name == "Pirate_Tale.json"

        restored = ScriptSession()
        restored.restore(library.load("Pirate Tale"))
        assert restored.script == session.script

    def test_list_projects(self, library, session):
        library.save("b", session.snapshot())
        library.save("a", session.snapshot())
        assert library.list_projects() == ["a", "b"]

    def test_load_missing(self, library):
        with pytest.raises(ProjectNotFoundError, match="'ghost' not found"):
            library.load("ghost")

    def test_delete(self, library, session):
        library.save("a", session.snapshot())
        library.delete("a")
        assert library.list_projects() == []
        with pytest.raises(ProjectNotFoundError):
            library.delete("a")

    def test_invalid_name(self, library):
        with pytest.raises(ValueError):
            library.save("../..", {})

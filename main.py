import asyncio
import click
import json
import logging
from pathlib import Path
from dotenv import load_dotenv

from comic_studio.config import Config, setup_directories
from comic_studio.core.ai_client import GenAIClient
from comic_studio.core.coordinator import PanelImageCoordinator
from comic_studio.core.library import ProjectLibrary
from comic_studio.core.models import Character
from comic_studio.core.session import ScriptSession
from comic_studio.errors import ComicStudioError

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def load_characters(path: str):
    with open(path, 'r', encoding='utf-8') as f:
        return [Character.model_validate(item) for item in json.load(f)]


def open_session(library: ProjectLibrary, project: str) -> ScriptSession:
    session = ScriptSession()
    session.restore(library.load(project))
    return session


def print_script(session: ScriptSession):
    script = session.script
    if script is None:
        click.echo("No script drafted yet.")
        return
    click.echo(f"Script {script.id}")
    click.echo(f"Theme: {script.theme} | Tone: {script.tone} | Key elements: {script.key_elements}")
    for index, panel in enumerate(script.panels):
        names = ", ".join(char.name or char.id for char in session.characters if char.id in panel.characters)
        click.echo(f"[{index}] {panel.id}")
        click.echo(f"    Scene: {panel.scene}")
        click.echo(f"    Dialogue: {panel.dialogue}")
        click.echo(f"    Characters: {names}")
        click.echo(f"    Image: {panel.generated_image or '-'}")


@click.group()
@click.option('--output-dir', default=None, help='Directory holding projects and generated panels.')
@click.pass_context
def cli(ctx, output_dir):
    """
    Drafts comic scripts and generates panel images.
    """
    load_dotenv()
    base_path = Path(output_dir) if output_dir else Config.BASE_OUTPUT_DIR
    setup_directories(base_path)
    ctx.obj = {
        "base_path": base_path,
        "library": ProjectLibrary(base_path / "projects"),
    }


@cli.command()
@click.option('--project', required=True, help='Name to store the project under.')
@click.option('--theme', required=True, help='Theme of the story.')
@click.option('--tone', default=Config.DEFAULT_TONE, show_default=True, help='Tone of the story.')
@click.option('--key-elements', required=True, help='Key elements the panels are seeded from.')
@click.option('--characters-file', required=True, type=click.Path(exists=True), help='JSON list of {id, name, description}.')
@click.option('--select', 'selected', multiple=True, required=True, help='Id of a character to include (repeatable).')
@click.pass_obj
def draft(obj, project, theme, tone, key_elements, characters_file, selected):
    """Drafts a new script and saves it as a project."""
    session = ScriptSession(load_characters(characters_file))
    try:
        session.draft(theme, tone, key_elements, selected)
    except ComicStudioError as e:
        raise click.ClickException(str(e))
    obj["library"].save(project, session.snapshot())
    print_script(session)


@cli.command()
@click.option('--project', required=True)
@click.pass_obj
def show(obj, project):
    """Prints the panels of a project."""
    try:
        session = open_session(obj["library"], project)
    except ComicStudioError as e:
        raise click.ClickException(str(e))
    print_script(session)


@cli.command('add-panel')
@click.option('--project', required=True)
@click.option('--character', 'characters', multiple=True, help='Character id for the new panel. Defaults to the drafted selection.')
@click.pass_obj
def add_panel(obj, project, characters):
    """Appends an empty panel."""
    library = obj["library"]
    try:
        session = open_session(library, project)
    except ComicStudioError as e:
        raise click.ClickException(str(e))
    session.add_panel(characters or None)
    library.save(project, session.snapshot())
    print_script(session)


@cli.command('edit-panel')
@click.option('--project', required=True)
@click.option('--index', required=True, type=int)
@click.option('--scene', default=None)
@click.option('--dialogue', default=None)
@click.option('--dialogue-size', default=None, type=click.IntRange(min=1))
@click.option('--character', 'characters', multiple=True, help='Replaces the panel characters (repeatable).')
@click.pass_obj
def edit_panel(obj, project, index, scene, dialogue, dialogue_size, characters):
    """Edits the scene, dialogue or characters of a panel."""
    fields = {"scene": scene, "dialogue": dialogue, "dialogue_size": dialogue_size}
    fields = {key: value for key, value in fields.items() if value is not None}
    if characters:
        fields["characters"] = characters
    if not fields:
        raise click.UsageError("Nothing to update.")

    library = obj["library"]
    try:
        session = open_session(library, project)
        session.update_panel(index, fields)
    except ComicStudioError as e:
        raise click.ClickException(str(e))
    library.save(project, session.snapshot())
    print_script(session)


@cli.command('delete-panel')
@click.option('--project', required=True)
@click.option('--index', required=True, type=int)
@click.pass_obj
def delete_panel(obj, project, index):
    """Deletes the panel at a position."""
    library = obj["library"]
    try:
        session = open_session(library, project)
        session.delete_panel(index)
    except ComicStudioError as e:
        raise click.ClickException(str(e))
    library.save(project, session.snapshot())
    print_script(session)


@cli.command()
@click.option('--project', required=True)
@click.option('--order', required=True, help='New order as current positions, e.g. "2,0,1".')
@click.pass_obj
def reorder(obj, project, order):
    """Reorders panels by their current positions."""
    try:
        positions = [int(part) for part in order.split(',')]
    except ValueError:
        raise click.BadParameter("Order must be comma separated integers.", param_hint='--order')

    library = obj["library"]
    try:
        session = open_session(library, project)
        panels = session.script.panels if session.script else ()
        if sorted(positions) != list(range(len(panels))):
            raise click.BadParameter(f"Order must list each of the {len(panels)} positions exactly once.", param_hint='--order')
        session.reorder([panels[i] for i in positions])
    except ComicStudioError as e:
        raise click.ClickException(str(e))
    library.save(project, session.snapshot())
    print_script(session)


@cli.command()
@click.option('--project', required=True)
@click.option('--index', 'indexes', multiple=True, required=True, type=int, help='Panel position to regenerate (repeatable).')
@click.option('--api-key', default=None, help='Image provider API key. Defaults to GEMINI_API_KEY.')
@click.pass_obj
def regenerate(obj, project, indexes, api_key):
    """Generates images for panels, concurrently."""
    library = obj["library"]
    try:
        session = open_session(library, project)
    except ComicStudioError as e:
        raise click.ClickException(str(e))
    session.subscribe(lambda n: click.echo(f"[{n.level}] {n.message}"))

    api_key = api_key or Config.GEMINI_API_KEY
    output_dir = obj["base_path"] / "panels"
    coordinator = PanelImageCoordinator(session, lambda key: GenAIClient(key, output_dir=output_dir))

    try:
        outcomes = asyncio.run(coordinator.regenerate_many(list(indexes), api_key))
    except ComicStudioError as e:
        raise click.ClickException(str(e))

    library.save(project, session.snapshot())
    failed = [o for o in outcomes if not o.succeeded]
    logger.info(f"Regenerated {len(outcomes) - len(failed)}/{len(outcomes)} panels.")
    print_script(session)


@cli.command()
@click.pass_obj
def projects(obj):
    """Lists stored projects."""
    for name in obj["library"].list_projects():
        click.echo(name)


if __name__ == '__main__':
    cli()

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Set

from comic_studio.config import Config
from comic_studio.core import engine
from comic_studio.core.ai_client import GenAIClient
from comic_studio.core.models import GenerationOutcome, GenerationRequest
from comic_studio.core.prompts import build_panel_prompt
from comic_studio.core.session import ScriptSession
from comic_studio.errors import CredentialError, PanelIndexError

logger = logging.getLogger(__name__)


class PanelImageCoordinator:
    """
    Runs one image request per panel and feeds the outcome back into the session.

    Requests are keyed by panel id, captured when the request is dispatched,
    so reordering while a request is in flight cannot misplace its result
    and deleting the panel makes the result a no-op.
    """

    def __init__(self, session: ScriptSession, client_factory: Optional[Callable[[str], GenAIClient]] = None):
        self.session = session
        self.client_factory = client_factory or GenAIClient
        self._clients: Dict[str, GenAIClient] = {}
        self._in_flight: Dict[str, Set[asyncio.Task]] = {}

    def _client_for(self, api_key: str) -> GenAIClient:
        if api_key not in self._clients:
            self._clients[api_key] = self.client_factory(api_key)
        return self._clients[api_key]

    def build_request(self, panel_index: int) -> GenerationRequest:
        script = self.session.script
        if script is None:
            raise PanelIndexError(panel_index, 0)
        panel = engine.get_panel(script, panel_index)
        return GenerationRequest(
            prompt=build_panel_prompt(script.tone, panel, self.session.characters),
            number_results=Config.NUMBER_OF_IMAGES,
            guidance_scale=Config.GUIDANCE_SCALE,
        )

    def dispatch(self, panel_index: int, api_key: Optional[str]) -> "asyncio.Task[GenerationOutcome]":
        """Starts regenerating the panel at `panel_index` without waiting for it. Needs a running loop."""
        if not api_key:
            self.session.notify("error", "Please enter your API key")
            raise CredentialError("An API key is required to generate panel images.")

        request = self.build_request(panel_index)
        panel_id = self.session.script.panels[panel_index].id
        client = self._client_for(api_key)

        task = asyncio.get_running_loop().create_task(self._run(client, panel_id, request))
        tasks = self._in_flight.setdefault(panel_id, set())
        tasks.add(task)
        task.add_done_callback(lambda t: self._forget(panel_id, t))

        logger.info(f"Dispatched image generation for panel {panel_id} (position {panel_index})")
        return task

    async def regenerate(self, panel_index: int, api_key: Optional[str]) -> GenerationOutcome:
        return await self.dispatch(panel_index, api_key)

    async def regenerate_many(self, panel_indexes: List[int], api_key: Optional[str]) -> List[GenerationOutcome]:
        if api_key:
            # resolve every index up front so a bad one dispatches nothing
            for index in panel_indexes:
                self.build_request(index)
        tasks = [self.dispatch(index, api_key) for index in panel_indexes]
        return list(await asyncio.gather(*tasks))

    def in_flight(self, panel_id: str) -> int:
        return len(self._in_flight.get(panel_id, ()))

    async def wait_all(self):
        pending = [task for tasks in self._in_flight.values() for task in tasks]
        if pending:
            await asyncio.gather(*pending)

    def _forget(self, panel_id: str, task: asyncio.Task):
        tasks = self._in_flight.get(panel_id)
        if tasks is None:
            return
        tasks.discard(task)
        if not tasks:
            del self._in_flight[panel_id]

    async def _run(self, client: GenAIClient, panel_id: str, request: GenerationRequest) -> GenerationOutcome:
        try:
            image_ref = await client.generate_image(request, name=panel_id)
            outcome = GenerationOutcome.success(panel_id, image_ref)
        except Exception as e:
            logger.error(f"Failed to generate image for panel {panel_id}: {e}")
            outcome = GenerationOutcome.failure(panel_id, str(e) or e.__class__.__name__)

        still_present = engine.find_panel(self.session.script, panel_id) is not None
        self.session.apply_generation_result(panel_id, outcome)

        if not still_present:
            return outcome
        if outcome.succeeded:
            self.session.notify("success", "Panel generated successfully!", panel_id=panel_id)
        else:
            self.session.notify("error", "Failed to generate panel image", panel_id=panel_id)
        return outcome

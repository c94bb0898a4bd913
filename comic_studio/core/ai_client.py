from google import genai
from google.genai import types
import io
import logging
import uuid
from pathlib import Path
from typing import Optional
from PIL import Image, UnidentifiedImageError
from comic_studio.config import Config
from comic_studio.core.models import GenerationRequest
from comic_studio.errors import CredentialError, GenerationFailure

logger = logging.getLogger(__name__)

class GenAIClient:
    def __init__(self, api_key: str, output_dir: Optional[Path] = None):
        if not api_key:
            raise CredentialError("An API key is required to generate panel images.")
        self.client = genai.Client(api_key=api_key)
        self.image_model_name = Config.IMAGE_MODEL_NAME
        self.output_dir = Path(output_dir) if output_dir else Config.BASE_OUTPUT_DIR / "panels"

    async def generate_image(self, request: GenerationRequest, name: str = "panel") -> str:
        """
        Generates an image for the request and saves it as PNG.

        Args:
            request: Prompt and fixed generation parameters.
            name: Prefix for the saved file, usually the panel id.

        Returns:
            Path of the saved image, used as the panel's image reference.
        """
        try:
            logger.info(f"Generating image with model {self.image_model_name} (guidance {request.guidance_scale})")

            response = await self.client.aio.models.generate_images(
                model=self.image_model_name,
                prompt=request.prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=request.number_results,
                    guidance_scale=request.guidance_scale,
                    aspect_ratio=Config.IMAGE_ASPECT_RATIO,
                ),
            )
        except Exception as e:
            logger.error(f"Error generating image: {e}")
            raise GenerationFailure(str(e)) from e

        if not response.generated_images:
            raise GenerationFailure("Image generation returned no images.")

        image = response.generated_images[0].image
        if image is None or not image.image_bytes:
            raise GenerationFailure("Image generation returned an empty image.")

        return self._save(image.image_bytes, name)

    def _save(self, image_bytes: bytes, name: str) -> str:
        try:
            pil_img = Image.open(io.BytesIO(image_bytes))
            pil_img.load()
        except (UnidentifiedImageError, OSError) as e:
            raise GenerationFailure(f"Provider returned unreadable image data: {e}") from e

        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / f"{name}_{uuid.uuid4().hex[:8]}.png"
        pil_img.save(output_path, format="PNG")
        return str(output_path)

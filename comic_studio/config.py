import os
from pathlib import Path
from dotenv import load_dotenv

from comic_studio.errors import CredentialError

# Load environment variables
load_dotenv()

class Config:
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

    IMAGE_MODEL_NAME = os.getenv("IMAGE_MODEL_NAME", "imagen-4.0-generate-001")

    BASE_OUTPUT_DIR = Path(os.getenv("COMIC_STUDIO_OUTPUT_DIR", "output"))

    # Generation settings, fixed for every panel request
    NUMBER_OF_IMAGES = 1
    GUIDANCE_SCALE = 7.0
    IMAGE_ASPECT_RATIO = "1:1"

    # Drafting defaults
    DEFAULT_TONE = "adventure"
    DEFAULT_DIALOGUE_SIZE = 16
    DRAFT_PANEL_TEMPLATES = (
        ("Opening scene in {key_elements}", 'Character: "Our story begins..."'),
        ("Action sequence in {key_elements}", 'Character: "We must hurry!"'),
    )

    PANEL_PROMPT_SUFFIX = (
        "Highly detailed comic book art style, professional quality, dynamic composition."
    )

    @staticmethod
    def validate():
        if not Config.GEMINI_API_KEY:
            raise CredentialError("GEMINI_API_KEY environment variable is not set.")

# Ensure output directories exist structure
def setup_directories(base_path: Path):
    dirs = [
        base_path / "projects",
        base_path / "panels",
    ]
    for d in dirs:
        d.mkdir(parents=True, exist_ok=True)

from .ai_client import GenAIClient
from .coordinator import PanelImageCoordinator
from .drafter import DraftGenerator
from .library import ProjectLibrary
from .models import Character, GenerationOutcome, GenerationRequest, Notification, Panel, Script
from .session import ScriptSession

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

# Google Cloud / Gemini Configuration
PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT", "")
LOCATION = os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-001")
GEMINI_FEEDBACK_MODEL = os.getenv("GEMINI_FEEDBACK_MODEL", GEMINI_MODEL)
USE_VERTEX = os.getenv("USE_VERTEX_AI", "0")

# API Configuration
API_KEY = os.getenv("GOOGLE_GENAI_API_KEY") or os.getenv("GOOGLE_API_KEY")

# Voice agent
AGENT_NAME = os.getenv("AGENT_NAME", "AI Interview Agent")
AGENT_VOICE = os.getenv("AGENT_VOICE", "alloy")

# Interview setup
MAX_QUESTION_COUNT = int(os.getenv("MAX_QUESTION_COUNT", "20"))
RESUME_MAX_BYTES = int(os.getenv("RESUME_MAX_BYTES", str(5 * 1024 * 1024)))  # 5 MB
RESUME_PROMPT_CHARS = 12000

# Storage
DATA_DIR = os.getenv("INTERVIEW_DATA_DIR", str(Path(__file__).parent.parent / "data"))

# Navigation targets handed to the browser
HOME_PATH = "/"
FEEDBACK_PATH = "/interview/{interview_id}/feedback"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_config():
    """Validate required configuration."""
    if USE_VERTEX != "1" and not API_KEY:
        raise RuntimeError("Set GOOGLE_GENAI_API_KEY/GOOGLE_API_KEY or set USE_VERTEX_AI=1 with ADC.")
    if USE_VERTEX == "1" and not PROJECT_ID:
        raise RuntimeError("Set GOOGLE_CLOUD_PROJECT when USE_VERTEX_AI=1.")

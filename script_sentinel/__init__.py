"""
Script Sentinel - AI-Powered Script Analysis and Pre-Production Toolkit

Turns a screenplay into a staged analysis (overview, pitch deck, production
breakdown), pitch-deck visuals, shot ideas, storyboards, studio images and
short video clips, all backed by Google Gemini.

Version: 1.0.0
"""

__version__ = "1.0.0"
__project__ = "Script Sentinel"

from pathlib import Path

# Load environment variables before anything reads an API key
from script_sentinel.core.env_loader import ensure_env_loaded
ensure_env_loaded()

# Package root directory
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent

__all__ = [
    "__version__",
    "__project__",
    "PACKAGE_ROOT",
    "PROJECT_ROOT",
]

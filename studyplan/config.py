"""Runtime configuration read from the environment.

CLI entry points call dotenv's load_dotenv() first, so values may also come from a .env file.
"""
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent

# Icons live under <public>/plan-icons and are served from /plan-icons/...
ICON_SUBDIR = "plan-icons"


def get_data_dir() -> Path:
    """Root of the per-user data directories."""
    custom = (os.getenv("STUDYPLAN_DATA_DIR") or "").strip()
    return Path(custom) if custom else PROJECT_ROOT / "data"


def get_public_dir() -> Path:
    """Root of the statically served assets."""
    custom = (os.getenv("STUDYPLAN_PUBLIC_DIR") or "").strip()
    return Path(custom) if custom else PROJECT_ROOT / "public"


def get_default_user_id() -> str:
    return (os.getenv("STUDYPLAN_USER_ID") or "").strip()

"""LifeOS - a personal operating system for rebuilding stability

Packages:
    momentum: Daily tasks, completion toggling and streak tracking
    roadmap: AI-authored recovery roadmaps with a canned fallback plan
    pathfinder: Search and rank local assistance resources
    vault: Document storage for IDs, paperwork and records
    finance: Profile, accounts and transaction import
    security: Session tokens for the dashboard
    dashboard: FastAPI backend exposing all of the above
"""

from pathlib import Path


__version__ = "0.1.0"

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
CONFIG_PATH = PROJECT_ROOT / "args" / "lifeos.yaml"

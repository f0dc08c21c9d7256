"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_instances(value: str) -> dict[str, str]:
    """Parse 'NAME=mongodb://host,OTHER=mongodb://host2' into a mapping."""
    instances = {}
    for item in _split_csv(value):
        name, sep, uri = item.partition("=")
        if not sep:
            raise ValueError(f"Invalid MONGO_INSTANCES entry: '{item}'")
        instances[name.strip()] = uri.strip()
    return instances


# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = PROJECT_ROOT / "data" / "db" / "school-events.db"

# =============================================================================
# DOCUMENT STORE
# =============================================================================

MONGO_INSTANCES = _parse_instances(
    os.environ.get("MONGO_INSTANCES", "RDP03_INS1=mongodb://localhost:27017")
)
MONGO_DEFAULT_INSTANCE = os.environ.get(
    "MONGO_DEFAULT_INSTANCE", next(iter(MONGO_INSTANCES), "")
)
MONGO_DATABASE = os.environ.get("MONGO_DATABASE", "school")
MONGO_TIMEOUT_MS = int(os.environ.get("MONGO_TIMEOUT_MS", "5000"))

# =============================================================================
# EVENTS
# =============================================================================

EVENTS_COLLECTION = "T_Eventos"

# Stored document field names
EVENT_ID_FIELD = "Id_Evento"
EVENT_NAME_FIELD = "Nombre"
EVENT_START_FIELD = "Fecha_Inicio"
EVENT_END_FIELD = "Fecha_Conclusion"

MAX_EVENTS_PER_PAGE = 100
MIN_QUERY_YEAR = 1900
MAX_QUERY_YEAR = 2100

# =============================================================================
# API CONFIGURATION
# =============================================================================

RESPONSIBLE_API_KEYS = _split_csv(os.environ.get("RESPONSIBLE_API_KEYS", ""))
DIRECTIVE_API_KEYS = _split_csv(os.environ.get("DIRECTIVE_API_KEYS", ""))
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

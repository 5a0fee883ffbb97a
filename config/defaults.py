"""Default configuration constants for the Condominium Parking Lottery."""

# Spot category tags (stored as-is on ParkingSpot.type)
SPOT_TYPE_COMMON = "Vaga Comum"
SPOT_TYPE_PCD = "Vaga PcD"
SPOT_TYPE_ELDERLY = "Vaga Idoso"
SPOT_TYPE_LARGE = "Vaga Grande"
SPOT_TYPE_SMALL = "Vaga Pequena"
SPOT_TYPE_MOTORCYCLE = "Vaga Motocicleta"
SPOT_TYPE_LINKED = "Vaga Presa"
SPOT_TYPE_FREE = "Vaga Livre"
SPOT_TYPE_COVERED = "Vaga Coberta"
SPOT_TYPE_UNCOVERED = "Vaga Descoberta"

SPOT_TYPES = [
    SPOT_TYPE_COMMON,
    SPOT_TYPE_PCD,
    SPOT_TYPE_ELDERLY,
    SPOT_TYPE_LARGE,
    SPOT_TYPE_SMALL,
    SPOT_TYPE_MOTORCYCLE,
    SPOT_TYPE_LINKED,
    SPOT_TYPE_FREE,
    SPOT_TYPE_COVERED,
    SPOT_TYPE_UNCOVERED,
]

SPOT_SIZES = ["P", "M", "G", "XG"]
DEFAULT_SPOT_SIZE = "M"

SPOT_STATUSES = ["available", "occupied", "reserved"]

FLOORS = [
    "Piso Único",
    "Térreo",
    "1° SubSolo",
    "2° SubSolo",
    "3° SubSolo",
    "4° SubSolo",
    "5° SubSolo",
    "Ed. Garagem (1° Andar)",
    "Ed. Garagem (2° Andar)",
    "Ed. Garagem (3° Andar)",
    "Ed. Garagem (4° Andar)",
    "Ed. Garagem (5° Andar)",
]
DEFAULT_FLOOR = "Piso Único"

# Home sector -> sectors in proximity order (used when a participant has no
# preferred sectors of their own and the building defines no mapping)
DEFAULT_SECTOR_PROXIMITY = {
    "A": ["A", "B", "C"],
    "B": ["B", "A", "C"],
    "C": ["C", "B", "A"],
}

# Priority tiers, highest first
PRIORITY_SPECIAL_NEEDS = "special-needs"
PRIORITY_ELDERLY = "elderly"
PRIORITY_UP_TO_DATE = "up-to-date"
PRIORITY_NORMAL = "normal"
PRIORITY_LABELS = {
    PRIORITY_SPECIAL_NEEDS: "PcD",
    PRIORITY_ELDERLY: "Idoso",
    PRIORITY_NORMAL: "Comum",
}

# Result tags written by each stage
TAG_PCD_PRIORITY = "pcd-priority"
TAG_PCD_MANUAL = "pcd-manual-selection"
TAG_UNIQUE_PREFIX = "unique"
TAG_DOUBLE_PREFIX = "double"
TAG_RANDOM = "random"
TAG_DEFAULTER = "defaulter"
RELAXED_SUFFIX = "relaxed"

# Minimum spots handed to a participant in the double/linked stage
DOUBLE_STAGE_MIN_SPOTS = 2

# Draw session settings (informational, stored on the session)
DEFAULT_SESSION_SETTINGS = {
    "allow_shared_spots": False,
    "prioritize_elders": False,
    "prioritize_special_needs": True,
    "zone_by_proximity": True,
}

SESSION_NAME_PREFIX = "Sorteio Setorial"

# Manual selection gate: None waits for the operator indefinitely,
# a number of seconds resolves to "skip" once it elapses.
MANUAL_GATE_TIMEOUT_SECONDS = None

# Public results location in the key-value store
PUBLIC_RESULTS_KEY = "public/results/{building_id}"
DEFAULT_COMPANY = "exvagas"

# Default lottery configuration (mirrors st.session_state["lottery_config"])
DEFAULT_LOTTERY_CONFIG = {
    "random_seed": None,
    "manual_gate_timeout_seconds": MANUAL_GATE_TIMEOUT_SECONDS,
    "session_name_prefix": SESSION_NAME_PREFIX,
    "publish_results": True,
}

# Logging
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME = "parking_lottery"

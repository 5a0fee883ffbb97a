"""File upload parsing — CSV/XLSX into typed participant and spot lists."""

import pandas as pd
from typing import List, Optional, Tuple
from models.participant import Participant
from models.parking_spot import ParkingSpot
from config.defaults import DEFAULT_FLOOR, DEFAULT_SPOT_SIZE

TRUE_VALUES = {"1", "true", "yes", "y", "sim", "s", "x"}
FALSE_VALUES = {"0", "false", "no", "n", "nao", "não"}


def _cell(row, column: str):
    value = row.get(column)
    if value is None or (not isinstance(value, (list, tuple)) and pd.isna(value)):
        return None
    return value


def _text(row, column: str, default: str = "") -> str:
    value = _cell(row, column)
    return default if value is None else str(value).strip()


def _flag(row, column: str) -> bool:
    value = _cell(row, column)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _optional_flag(row, column: str) -> Optional[bool]:
    """Tri-state flag: blank stays None, so a missing 'Up To Date' is not a defaulter."""
    value = _cell(row, column)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


def _list(row, column: str) -> List[str]:
    value = _cell(row, column)
    if value is None:
        return []
    return [part.strip() for part in str(value).replace(";", ",").split(",") if part.strip()]


def parse_participants(df: pd.DataFrame, building_id: str) -> List[Participant]:
    """Convert a participants DataFrame into Participant objects."""
    participants = []
    for idx, row in df.iterrows():
        number_of_spots = _cell(row, "Number of Spots")
        participants.append(Participant(
            id=_text(row, "ID") or f"{building_id}-p{idx + 1}",
            building_id=building_id,
            name=_text(row, "Name"),
            block=_text(row, "Block"),
            unit=_text(row, "Unit"),
            sector=_text(row, "Sector") or None,
            has_special_needs=_flag(row, "PcD"),
            is_elderly=_flag(row, "Elderly"),
            is_up_to_date=_optional_flag(row, "Up To Date"),
            has_small_car=_flag(row, "Small Car"),
            has_large_car=_flag(row, "Large Car"),
            has_motorcycle=_flag(row, "Motorcycle"),
            group_id=_text(row, "Group") or None,
            number_of_spots=int(number_of_spots) if number_of_spots is not None else 1,
            prefers_common_spot=_flag(row, "Prefers Common"),
            prefers_covered=_flag(row, "Prefers Covered"),
            prefers_uncovered=_flag(row, "Prefers Uncovered"),
            prefers_linked_spot=_flag(row, "Prefers Linked"),
            prefers_unlinked_spot=_flag(row, "Prefers Unlinked"),
            prefers_small_spot=_flag(row, "Prefers Small"),
            preferred_floors=frozenset(_list(row, "Preferred Floors")),
            preferred_sectors=tuple(_list(row, "Preferred Sectors")),
        ))
    return participants


def parse_spots(df: pd.DataFrame, building_id: str) -> List[ParkingSpot]:
    """Convert a parking spots DataFrame into ParkingSpot objects."""
    spots = []
    for idx, row in df.iterrows():
        covered = _optional_flag(row, "Covered")
        uncovered = _optional_flag(row, "Uncovered")
        spots.append(ParkingSpot(
            id=_text(row, "ID") or f"{building_id}-s{idx + 1}",
            building_id=building_id,
            number=_text(row, "Number"),
            floor=_text(row, "Floor", DEFAULT_FLOOR),
            sector=_text(row, "Sector") or None,
            type=tuple(_list(row, "Type")),
            size=_text(row, "Size", DEFAULT_SPOT_SIZE),
            status=_text(row, "Status", "available").lower(),
            is_covered=covered,
            is_uncovered=uncovered,
            group_id=_text(row, "Group") or None,
        ))
    return spots


def load_file(uploaded_file) -> pd.DataFrame:
    """Load an uploaded file (CSV or XLSX) into a DataFrame."""
    name = uploaded_file.name.lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")


# Expected sheet names for multi-tab Excel (case-insensitive matching)
SHEET_ALIASES = {
    "participants": ["participants", "participantes", "residents", "moradores"],
    "spots": ["spots", "parking spots", "vagas", "garage"],
}


def _match_sheet(sheet_names: List[str], category: str) -> str:
    """Find a sheet name matching the given category. Returns the matched name or raises."""
    aliases = SHEET_ALIASES[category]
    lower_map = {s.lower().strip(): s for s in sheet_names}
    for alias in aliases:
        if alias in lower_map:
            return lower_map[alias]
    raise ValueError(
        f"Could not find a sheet for '{category}'. "
        f"Expected one of: {aliases}. "
        f"Found sheets: {sheet_names}"
    )


def load_multi_sheet_excel(uploaded_file) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load a single Excel file with 2 tabs: Participants and Spots.

    Sheet names are matched case-insensitively ('Participantes' and 'Vagas' work too).
    Returns (participants_df, spots_df).
    """
    xl = pd.ExcelFile(uploaded_file, engine="openpyxl")
    participants_df = pd.read_excel(xl, sheet_name=_match_sheet(xl.sheet_names, "participants"))
    spots_df = pd.read_excel(xl, sheet_name=_match_sheet(xl.sheet_names, "spots"))
    return participants_df, spots_df

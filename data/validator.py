"""Schema validation for uploaded participant and spot files."""

from dataclasses import dataclass, field
from typing import List
import pandas as pd

from config.defaults import SPOT_STATUSES, SPOT_TYPES, SPOT_SIZES


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


PARTICIPANT_REQUIRED_COLUMNS = ["Name", "Block", "Unit"]

SPOT_REQUIRED_COLUMNS = ["Number", "Floor"]


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    return result


def validate_participants(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, PARTICIPANT_REQUIRED_COLUMNS, "Participants")
    if not result.is_valid:
        return result

    if "Number of Spots" in df.columns:
        spots = pd.to_numeric(df["Number of Spots"], errors="coerce")
        if (spots.dropna() < 1).any():
            result.is_valid = False
            result.errors.append("Participants: Number of Spots must be at least 1.")

    dupes = df.duplicated(subset=["Block", "Unit"], keep=False)
    if dupes.any():
        rows = df[dupes][["Block", "Unit"]].drop_duplicates().to_dict("records")
        result.warnings.append(f"Participants: Same block/unit listed more than once: {rows}")

    if "Prefers Covered" in df.columns and "Prefers Uncovered" in df.columns:
        both = df["Prefers Covered"].astype(str).str.lower().isin(["1", "true", "yes", "sim", "x"]) & \
            df["Prefers Uncovered"].astype(str).str.lower().isin(["1", "true", "yes", "sim", "x"])
        if both.any():
            result.warnings.append(
                f"Participants: {int(both.sum())} row(s) prefer both covered and uncovered spots; "
                "they will be treated as having no coverage preference."
            )

    return result


def validate_spots(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, SPOT_REQUIRED_COLUMNS, "Spots")
    if not result.is_valid:
        return result

    dupes = df.duplicated(subset=["Number"], keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Spots: Duplicate spot numbers: {df[dupes]['Number'].unique().tolist()}")

    if "Status" in df.columns:
        statuses = df["Status"].dropna().astype(str).str.strip().str.lower()
        unknown = sorted(set(statuses) - set(SPOT_STATUSES))
        if unknown:
            result.is_valid = False
            result.errors.append(f"Spots: Unknown status values: {unknown}. Use {SPOT_STATUSES}.")

    if "Size" in df.columns:
        sizes = df["Size"].dropna().astype(str).str.strip()
        unknown = sorted(set(sizes[sizes != ""]) - set(SPOT_SIZES))
        if unknown:
            result.is_valid = False
            result.errors.append(f"Spots: Unknown size values: {unknown}. Use {SPOT_SIZES}.")

    if "Type" in df.columns:
        tags = {
            tag.strip()
            for cell in df["Type"].dropna().astype(str)
            for tag in cell.replace(";", ",").split(",")
            if tag.strip()
        }
        unknown = sorted(tags - set(SPOT_TYPES))
        if unknown:
            result.warnings.append(f"Spots: Unrecognized spot types kept as-is: {unknown}")

    if "Sector" not in df.columns or df["Sector"].isna().all():
        result.warnings.append("Spots: No sector information; every spot will match any sector.")

    return result

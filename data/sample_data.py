"""Generate synthetic test datasets for the Condominium Parking Lottery."""

import pandas as pd
import random
import os

from config.defaults import (
    FLOORS, SPOT_SIZES, DEFAULT_SPOT_SIZE,
    SPOT_TYPE_COMMON, SPOT_TYPE_PCD, SPOT_TYPE_COVERED, SPOT_TYPE_UNCOVERED,
)

SAMPLE_BUILDING_ID = "cond-aurora"
SAMPLE_BUILDING_NAME = "Condomínio Aurora"
SAMPLE_SECTOR_PROXIMITY = {
    "A": ["A", "B", "C"],
    "B": ["B", "A", "C"],
    "C": ["C", "B", "A"],
}
UPPER_FLOOR, LOWER_FLOOR = FLOORS[2], FLOORS[3]  # 1° and 2° SubSolo

FIRST_NAMES = [
    "Ana", "Bruno", "Carla", "Diego", "Elisa", "Fábio", "Gabriela", "Henrique",
    "Isabela", "João", "Karina", "Lucas", "Marina", "Nelson", "Olívia", "Paulo",
    "Renata", "Sérgio", "Tatiana", "Vitor",
]


def generate_spots_df() -> pd.DataFrame:
    """3 sectors across two floors, a few PcD spots, mixed coverage."""
    random.seed(42)
    rows = []
    number = 1
    for sector in ["A", "B", "C"]:
        for floor in [UPPER_FLOOR, LOWER_FLOOR]:
            for _ in range(4):
                covered = floor == LOWER_FLOOR or random.random() < 0.4
                types = [SPOT_TYPE_COMMON, SPOT_TYPE_COVERED if covered else SPOT_TYPE_UNCOVERED]
                rows.append({
                    "Number": f"{sector}{number:02d}",
                    "Floor": floor,
                    "Sector": sector,
                    "Type": ", ".join(types),
                    "Size": random.choice(SPOT_SIZES[:3]),
                    "Status": "available",
                })
                number += 1
    # One accessible spot per sector on the upper floor
    for sector in ["A", "B", "C"]:
        rows.append({
            "Number": f"{sector}P{number:02d}",
            "Floor": UPPER_FLOOR,
            "Sector": sector,
            "Type": f"{SPOT_TYPE_PCD}, {SPOT_TYPE_COVERED}",
            "Size": SPOT_SIZES[2],
            "Status": "available",
        })
        number += 1
    rows.append({
        "Number": "A99", "Floor": UPPER_FLOOR, "Sector": "A",
        "Type": SPOT_TYPE_COMMON, "Size": DEFAULT_SPOT_SIZE, "Status": "reserved",
    })
    return pd.DataFrame(rows)


def generate_participants_df() -> pd.DataFrame:
    """20 residents: 4 PcD, 2 elderly, 3 double-spot, 2 defaulters."""
    random.seed(7)
    rows = []
    for idx, name in enumerate(FIRST_NAMES):
        sector = ["A", "B", "C"][idx % 3]
        wants = random.random()
        rows.append({
            "Name": name,
            "Block": f"Bloco {sector}",
            "Unit": str(101 + idx),
            "Sector": sector,
            "PcD": "Sim" if idx in (0, 5, 10, 15) else "Não",
            "Elderly": "Sim" if idx in (3, 8) else "Não",
            "Up To Date": "Não" if idx in (12, 17) else "Sim",
            "Large Car": "Sim" if idx % 7 == 0 else "Não",
            "Number of Spots": 2 if idx in (4, 9, 14) else 1,
            "Prefers Covered": "Sim" if wants < 0.35 else "Não",
            "Prefers Uncovered": "Sim" if wants > 0.8 else "Não",
            "Prefers Linked": "Sim" if idx == 9 else "Não",
            "Preferred Sectors": "" if idx % 4 else f"{sector}, {'B' if sector != 'B' else 'C'}",
            "Preferred Floors": "2° SubSolo" if idx % 5 == 0 else "",
        })
    return pd.DataFrame(rows)


def generate_sample_csvs(output_dir: str):
    """Write sample CSV files to the given directory."""
    os.makedirs(output_dir, exist_ok=True)
    generate_participants_df().to_csv(os.path.join(output_dir, "participants.csv"), index=False)
    generate_spots_df().to_csv(os.path.join(output_dir, "spots.csv"), index=False)


def generate_sample_excel(output_dir: str):
    """Write a single multi-tab Excel file with both datasets."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sample_data.xlsx")
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        generate_participants_df().to_excel(writer, sheet_name="Participants", index=False)
        generate_spots_df().to_excel(writer, sheet_name="Spots", index=False)


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_data")
    generate_sample_csvs(out)
    generate_sample_excel(out)
    print(f"Sample data written to {os.path.abspath(out)}")

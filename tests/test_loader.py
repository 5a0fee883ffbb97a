"""Tests for spreadsheet parsing and validation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import io
import pandas as pd
import pytest

from data.loader import parse_participants, parse_spots, load_file, load_multi_sheet_excel
from data.validator import validate_participants, validate_spots
from data.sample_data import generate_participants_df, generate_spots_df
from models.sector import Sector


def make_participants_df(**overrides):
    row = {
        "Name": "Ana", "Block": "A", "Unit": "101", "Sector": "A", "PcD": "Sim",
        "Up To Date": "", "Number of Spots": 1, "Prefers Covered": "yes",
        "Preferred Sectors": "B; A", "Preferred Floors": "1° SubSolo, Térreo",
    }
    row.update(overrides)
    return pd.DataFrame([row])


class NamedBytesIO(io.BytesIO):
    def __init__(self, data, name):
        super().__init__(data)
        self.name = name


class TestParseParticipants:
    def test_flags_and_lists(self):
        p = parse_participants(make_participants_df(), "b1")[0]
        assert p.id == "b1-p1"
        assert p.has_special_needs
        assert p.prefers_covered
        assert p.sector == Sector("A")
        assert p.preferred_sectors == (Sector("B"), Sector("A"))
        assert p.preferred_floors == frozenset({"1° SubSolo", "Térreo"})

    def test_up_to_date_is_tri_state(self):
        blank = parse_participants(make_participants_df(**{"Up To Date": None}), "b1")[0]
        no = parse_participants(make_participants_df(**{"Up To Date": "Não"}), "b1")[0]
        yes = parse_participants(make_participants_df(**{"Up To Date": "sim"}), "b1")[0]
        assert blank.is_up_to_date is None
        assert no.is_up_to_date is False
        assert yes.is_up_to_date is True

    def test_missing_optional_columns(self):
        df = pd.DataFrame([{"Name": "Bruno", "Block": "B", "Unit": "2"}])
        p = parse_participants(df, "b1")[0]
        assert p.number_of_spots == 1
        assert p.sector.is_unassigned
        assert not p.has_special_needs


class TestParseSpots:
    def test_type_tags_and_defaults(self):
        df = pd.DataFrame([
            {"Number": "1", "Floor": "Térreo", "Sector": "A", "Type": "Vaga PcD, Vaga Coberta"},
            {"Number": "2", "Floor": None, "Sector": None, "Status": "Reserved"},
        ])
        first, second = parse_spots(df, "b1")
        assert first.is_pcd and first.covered
        assert second.floor == "Piso Único"
        assert second.sector.is_unassigned
        assert second.status == "reserved"
        assert not second.is_available


class TestLoadFile:
    def test_csv(self):
        f = NamedBytesIO(b"Name,Block,Unit\nAna,A,101\n", "participants.csv")
        assert list(load_file(f).columns) == ["Name", "Block", "Unit"]

    def test_unsupported(self):
        with pytest.raises(ValueError):
            load_file(NamedBytesIO(b"", "data.json"))

    def test_multi_sheet_aliases(self):
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            generate_participants_df().to_excel(writer, sheet_name="Moradores", index=False)
            generate_spots_df().to_excel(writer, sheet_name="Vagas", index=False)
        buffer.seek(0)
        p_df, s_df = load_multi_sheet_excel(buffer)
        assert len(p_df) == len(generate_participants_df())
        assert "Number" in s_df.columns

    def test_missing_sheet(self):
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            generate_spots_df().to_excel(writer, sheet_name="Spots", index=False)
        buffer.seek(0)
        with pytest.raises(ValueError):
            load_multi_sheet_excel(buffer)


class TestValidators:
    def test_sample_data_is_valid(self):
        assert validate_participants(generate_participants_df()).is_valid
        assert validate_spots(generate_spots_df()).is_valid

    def test_missing_columns(self):
        result = validate_participants(pd.DataFrame([{"Name": "Ana"}]))
        assert not result.is_valid
        assert "Block" in result.errors[0]

    def test_bad_number_of_spots(self):
        assert not validate_participants(make_participants_df(**{"Number of Spots": 0})).is_valid

    def test_duplicate_spot_numbers(self):
        df = pd.DataFrame([{"Number": "1", "Floor": "T"}, {"Number": "1", "Floor": "T"}])
        assert not validate_spots(df).is_valid

    def test_unknown_status(self):
        df = pd.DataFrame([{"Number": "1", "Floor": "T", "Status": "broken"}])
        assert not validate_spots(df).is_valid

    def test_conflicting_coverage_warns(self):
        df = make_participants_df(**{"Prefers Covered": "sim", "Prefers Uncovered": "sim"})
        result = validate_participants(df)
        assert result.is_valid
        assert result.warnings

    def test_no_sectors_warns(self):
        result = validate_spots(pd.DataFrame([{"Number": "1", "Floor": "T"}]))
        assert result.is_valid
        assert any("sector" in w for w in result.warnings)

    def test_unknown_size(self):
        df = pd.DataFrame([{"Number": "1", "Floor": "T", "Sector": "A", "Size": "Gigante"}])
        result = validate_spots(df)
        assert not result.is_valid
        assert "Gigante" in result.errors[0]

    def test_unknown_spot_type_only_warns(self):
        df = pd.DataFrame([
            {"Number": "1", "Floor": "T", "Sector": "A", "Type": "Vaga Comum; Vaga Doca"},
        ])
        result = validate_spots(df)
        assert result.is_valid
        assert any("Vaga Doca" in w for w in result.warnings)
        assert not any("Vaga Comum" in w for w in result.warnings)

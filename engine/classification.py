"""Pure eligibility and classification helpers over participants and spots."""

from typing import Iterable, List, Optional

from models.building import Building
from models.participant import Participant
from models.parking_spot import ParkingSpot
from models.sector import Sector, UNASSIGNED
from config.defaults import (
    PRIORITY_SPECIAL_NEEDS, PRIORITY_ELDERLY, PRIORITY_UP_TO_DATE, PRIORITY_NORMAL,
    DEFAULT_SECTOR_PROXIMITY, DOUBLE_STAGE_MIN_SPOTS,
)


def is_defaulter(participant: Participant) -> bool:
    """Only an explicit is_up_to_date=False marks a defaulter."""
    return participant.is_up_to_date is False


def priority_tier(participant: Participant) -> str:
    """First match of PcD > Elderly > UpToDate > Normal."""
    if participant.has_special_needs:
        return PRIORITY_SPECIAL_NEEDS
    if participant.is_elderly:
        return PRIORITY_ELDERLY
    if participant.is_up_to_date:
        return PRIORITY_UP_TO_DATE
    return PRIORITY_NORMAL


def spot_sector(spot: ParkingSpot) -> Sector:
    return spot.sector


def participant_sector(participant: Participant) -> Sector:
    return participant.sector


def wants_covered(participant: Participant) -> bool:
    return bool(participant.prefers_covered) and not participant.prefers_uncovered


def wants_uncovered(participant: Participant) -> bool:
    return bool(participant.prefers_uncovered) and not participant.prefers_covered


def has_coverage_preference(participant: Participant) -> bool:
    return wants_covered(participant) or wants_uncovered(participant)


def coverage_matches(spot: ParkingSpot, participant: Participant) -> bool:
    """True when the spot satisfies the participant's strict coverage preference (if any)."""
    if wants_covered(participant):
        return spot.covered
    if wants_uncovered(participant):
        return spot.uncovered
    return True


def on_preferred_floor(spot: ParkingSpot, participant: Participant) -> bool:
    return spot.floor in participant.preferred_floors


def qualifies_for_pcd_stage(participant: Participant) -> bool:
    return participant.has_special_needs and not is_defaulter(participant)


def qualifies_for_single_stage(participant: Participant) -> bool:
    return (
        not participant.has_special_needs
        and not is_defaulter(participant)
        and participant.number_of_spots == 1
        and not participant.prefers_linked_spot
    )


def qualifies_for_double_stage(participant: Participant) -> bool:
    return (
        not participant.has_special_needs
        and not is_defaulter(participant)
        and (participant.number_of_spots > 1 or bool(participant.prefers_linked_spot))
    )


def required_spots(participant: Participant) -> int:
    """Spots a participant is entitled to: at least 2 for double/linked qualifiers, else at least 1."""
    requested = max(1, participant.number_of_spots or 1)
    if qualifies_for_double_stage(participant):
        return max(DOUBLE_STAGE_MIN_SPOTS, requested)
    return requested


def known_sectors(spots: Iterable[ParkingSpot]) -> List[Sector]:
    """Named sectors present among the spots, in stable (sorted) order."""
    names = {s.sector.name for s in spots if not s.sector.is_unassigned}
    return [Sector(name) for name in sorted(names)]


def sector_priority(
    participant: Participant,
    known: List[Sector],
    building: Optional[Building] = None,
) -> List[Sector]:
    """Ordered sectors to try for a participant.

    1. preferred sectors, then every other known sector;
    2. else the proximity mapping of the home sector (building's, or the default one),
       then every other known sector;
    3. else the home sector, then every other known sector;
    4. else all known sectors.
    With no named sector anywhere, a single wildcard entry is returned.
    """
    if participant.preferred_sectors:
        ordered = list(dict.fromkeys(participant.preferred_sectors))
        ordered += [s for s in known if s not in ordered]
        return ordered

    home = participant_sector(participant)
    if not home.is_unassigned:
        proximity = building.sector_proximity if building and building.sector_proximity else DEFAULT_SECTOR_PROXIMITY
        mapped = proximity.get(home.name)
        if mapped:
            ordered = list(dict.fromkeys(Sector.of(name) for name in mapped if not Sector.of(name).is_unassigned))
            ordered += [s for s in known if s not in ordered]
            return ordered
        return [home] + [s for s in known if s != home]

    return list(known) if known else [UNASSIGNED]

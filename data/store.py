"""Store interfaces (repository pattern) over a key-value backend.

The persistence/sync layer is external; everything the draw needs from it is
get/set/subscribe on keys. Stores return domain models.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from models.building import Building
from models.lottery import LotterySession
from models.participant import Participant
from models.parking_spot import ParkingSpot

logger = logging.getLogger(__name__)

Subscriber = Callable[[str, Any], None]


class KeyValueStore(ABC):
    """Interface for the external key-value backend."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def subscribe(self, key: str, callback: Subscriber) -> Callable[[], None]:
        """Call `callback(key, value)` on every set of `key`; returns an unsubscribe function."""
        ...


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = value
        for callback in list(self._subscribers.get(key, [])):
            callback(key, value)

    def subscribe(self, key, callback):
        self._subscribers[key].append(callback)

        def unsubscribe():
            if callback in self._subscribers.get(key, []):
                self._subscribers[key].remove(callback)

        return unsubscribe

    def keys(self) -> List[str]:
        return list(self._data)


class EntityStore:
    """Buildings, participants, spots and sessions, keyed per building."""

    def __init__(self, backend: Optional[KeyValueStore] = None) -> None:
        self.backend = backend or InMemoryKeyValueStore()

    # --- Buildings ---

    def list_buildings(self) -> List[Building]:
        return list(self.backend.get("buildings", {}).values())

    def get_building(self, building_id: str) -> Optional[Building]:
        return self.backend.get("buildings", {}).get(building_id)

    def save_building(self, building: Building) -> None:
        buildings = dict(self.backend.get("buildings", {}))
        buildings[building.id] = building
        self.backend.set("buildings", buildings)

    # --- Participants / spots ---

    def get_participants(self, building_id: str) -> List[Participant]:
        return list(self.backend.get(f"participants/{building_id}", []))

    def set_participants(self, building_id: str, participants: List[Participant]) -> None:
        self.backend.set(f"participants/{building_id}", list(participants))

    def get_parking_spots(self, building_id: str) -> List[ParkingSpot]:
        """All spots of a building; the draw itself keeps only status='available'."""
        return list(self.backend.get(f"spots/{building_id}", []))

    def set_parking_spots(self, building_id: str, spots: List[ParkingSpot]) -> None:
        self.backend.set(f"spots/{building_id}", list(spots))

    # --- Sessions ---

    def save_session(self, session: LotterySession) -> None:
        key = f"sessions/{session.building_id}"
        sessions = dict(self.backend.get(key, {}))
        sessions[session.id] = session
        self.backend.set(key, sessions)
        logger.info("Saved session %s (%d results)", session.id, len(session.results))

    def list_sessions(self, building_id: str) -> List[LotterySession]:
        sessions = self.backend.get(f"sessions/{building_id}", {}).values()
        return sorted(sessions, key=lambda s: s.date, reverse=True)

    def get_session(self, building_id: str, session_id: str) -> Optional[LotterySession]:
        return self.backend.get(f"sessions/{building_id}", {}).get(session_id)

    def subscribe_sessions(self, building_id: str, callback: Subscriber) -> Callable[[], None]:
        return self.backend.subscribe(f"sessions/{building_id}", callback)

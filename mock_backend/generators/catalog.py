"""Catalog payload generators for dynamic scenario responses"""

import random
import uuid
from datetime import timedelta
from typing import Any, Dict, List, Optional
from .base import ResponseGenerator
from ..models.session import TestSession
from ..utils import timeutils

DEFAULT_CATEGORIES = [
    {"id": 1, "name": "Sports", "slug": "sports"},
    {"id": 2, "name": "Music", "slug": "music"},
    {"id": 3, "name": "Theater", "slug": "theater"},
    {"id": 4, "name": "Comedy", "slug": "comedy"},
]

DEFAULT_QUALITIES = [
    {"id": 1, "name": "Standard", "code": "STD"},
    {"id": 2, "name": "Premium", "code": "PRM"},
    {"id": 3, "name": "VIP", "code": "VIP"},
]


class EmptyCatalogGenerator(ResponseGenerator):
    """Catalog with no events or listings"""

    name = "empty_catalog"
    description = "Generates an empty catalog response with no events or listings"

    def generate(self, parameters: Dict[str, Any], session: Optional[TestSession] = None) -> Dict[str, Any]:
        include_defaults = parameters.get("include_defaults", True)

        return {
            "events": [],
            "listings": [],
            "sellers": [],
            "categories": list(DEFAULT_CATEGORIES) if include_defaults else [],
            "qualities": list(DEFAULT_QUALITIES) if include_defaults else [],
            "last_modified": timeutils.now_iso(),
            "incremental_id": str(uuid.uuid4()),
        }


class SingleEventGenerator(ResponseGenerator):
    """Catalog with a configurable number of events and listings"""

    name = "single_event"
    description = "Generates catalog with configurable number of events and listings"

    CITIES = ["Austin", "Denver", "Chicago", "Seattle", "Boston"]
    ROWS = ["A", "B", "C", "D", "E", "F", "G", "H"]

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def generate(self, parameters: Dict[str, Any], session: Optional[TestSession] = None) -> Dict[str, Any]:
        event_count = int(parameters.get("event_count", 1))
        listing_count = int(parameters.get("listing_count", 5))
        status = parameters.get("status", "active")

        events = []
        listings = []
        for i in range(event_count):
            event = self._event(i + 1, status)
            events.append(event)
            for j in range(listing_count):
                listings.append(self._listing(event["id"], j + 1))

        return {
            "events": events,
            "listings": listings,
            "sellers": self._sellers(3),
            "categories": list(DEFAULT_CATEGORIES),
            "qualities": list(DEFAULT_QUALITIES),
            "last_modified": timeutils.now_iso(),
            "incremental_id": str(uuid.uuid4()),
        }

    def _event(self, event_id: int, status: str) -> Dict[str, Any]:
        event_date = timeutils.utcnow() + timedelta(days=self._random.randint(7, 90))
        return {
            "id": event_id,
            "external_id": f"EVT-{event_id:06d}",
            "name": f"Mock Event {event_id}",
            "venue": {
                "id": self._random.randint(1, 10),
                "name": f"Venue {event_id} Arena",
                "city": self._random.choice(self.CITIES),
                "country": "US",
            },
            "date": event_date.date().isoformat(),
            "time": event_date.strftime("%H:%M:%S"),
            "datetime": timeutils.isoformat(event_date),
            "status": status,
            "category_id": self._random.randint(1, 4),
        }

    def _listing(self, event_id: int, listing_id: int) -> Dict[str, Any]:
        base_price = round(self._random.uniform(50, 500), 2)
        return {
            "id": listing_id,
            "event_id": event_id,
            "seller_id": self._random.randint(1, 3),
            "section": f"Section {self._random.randint(100, 400)}",
            "row": self._random.choice(self.ROWS),
            "quantity": self._random.randint(1, 4),
            "price": base_price,
            "fees": round(base_price * 0.15, 2),
            "total_price": round(base_price * 1.15, 2),
            "quality_id": self._random.randint(1, 3),
            "status": "available",
        }

    def _sellers(self, count: int) -> List[Dict[str, Any]]:
        return [
            {
                "id": i,
                "name": f"Seller {i}",
                "rating": round(self._random.uniform(3.5, 5.0), 1),
                "verified": self._random.random() < 0.8,
            }
            for i in range(1, count + 1)
        ]

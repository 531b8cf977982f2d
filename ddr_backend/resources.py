"""
Resource registry: binds each document collection to its route path and schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Type

from pydantic import ValidationError

from ddr_backend.db import DocumentValidationError
from ddr_backend.schemas import (
    Appointment,
    Campaign,
    Conversion,
    Debate,
    DocumentModel,
    Donation,
    News,
    SiteSettings,
)

# Keys owned by the store; never accepted from a payload.
RESERVED_KEYS = frozenset({"id", "_id", "__v"})


@dataclass(frozen=True)
class Resource:
    """One document collection exposed over HTTP."""

    name: str
    collection: str
    path: str
    model: Type[DocumentModel]

    def _validate(self, payload: dict) -> DocumentModel:
        if not isinstance(payload, dict):
            raise DocumentValidationError(
                f"{self.name} validation failed: expected an object"
            )
        cleaned = {k: v for k, v in payload.items() if k not in RESERVED_KEYS}
        try:
            return self.model.model_validate(cleaned)
        except ValidationError as exc:
            raise DocumentValidationError(
                f"{self.name} validation failed: {exc}"
            ) from exc

    def defaults(self) -> dict:
        """Storage defaults applied when a document is first inserted."""
        values = {}
        for name, field in self.model.model_fields.items():
            if field.is_required():
                continue
            default = field.get_default(call_default_factory=True)
            if default is not None:
                values[name] = default
        return values

    def changes(self, payload: dict) -> dict:
        """Coerce a partial payload, keeping only the keys it sets."""
        return self._validate(payload).model_dump(exclude_unset=True)

    def new_document(self, payload: dict) -> dict:
        return {**self.defaults(), **self.changes(payload)}


SETTINGS = Resource("Settings", "settings", "/settings", SiteSettings)
CAMPAIGN = Resource("Campaign", "campaign", "/campaign", Campaign)

NEWS = Resource("News", "news", "/news", News)
DEBATES = Resource("Debate", "debates", "/debates", Debate)
CONVERSIONS = Resource("Conversion", "conversions", "/conversions", Conversion)
APPOINTMENTS = Resource("Appointment", "appointments", "/appointments", Appointment)
DONATIONS = Resource("Donation", "donations", "/donations", Donation)

# Plain collections served by the generic CRUD routes.
CRUD_RESOURCES = (NEWS, DEBATES, CONVERSIONS, APPOINTMENTS, DONATIONS)

# First-read payload for the campaign singleton.
DEFAULT_CAMPAIGN = {
    "title": 'Grande Mosquée & École "Science & Foi"',
    "currentAmount": 12450000,
    "targetAmount": 50000000,
    "imageUrl": "https://images.unsplash.com/photo-1580582932707-520aed937b7b",
    "trustIndicators": [
        {"icon": "🧱", "title": "Matériaux", "text": "Ciment et briques"},
        {"icon": "👷", "title": "Ouvriers", "text": "Salaire des maçons"},
        {"icon": "📚", "title": "Futur", "text": "Investissement Sadaqa"},
    ],
}

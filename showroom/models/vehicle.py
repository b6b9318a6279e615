# showroom/models/vehicle.py

"""Vehicle data model for inter-module data flow."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Vehicle:
    """A single vehicle listing returned by the inventory API."""

    id: int
    make: str
    model: str
    year: int = 0
    price: float = 0.0
    mileage: int = 0
    fuel_type: str = ""
    transmission: str = ""
    color: str = ""
    body_type: str = ""
    featured: bool = False
    category: str = ""
    cover_image: str = ""
    title: str = ""

    @property
    def display_title(self) -> str:
        """Translated title when present, else ``year make model``."""
        if self.title:
            return self.title
        parts = [str(self.year) if self.year else "", self.make, self.model]
        return " ".join(p for p in parts if p)

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> "Vehicle":
        """Build a Vehicle from one ``cars`` record of the API payload.

        Missing or null fields fall back to the dataclass defaults.
        """
        category = record.get("category") or {}
        translations = record.get("translations") or []
        title = ""
        if translations and isinstance(translations[0], dict):
            title = str(translations[0].get("title") or "")

        cover = record.get("coverImage") or ""
        if not cover:
            images = record.get("images") or []
            main = [
                img for img in images
                if isinstance(img, dict) and img.get("isMain")
            ]
            if main:
                cover = main[0].get("imagePath") or ""

        return cls(
            id=int(record["id"]),
            make=str(record.get("make") or ""),
            model=str(record.get("model") or ""),
            year=int(record.get("year") or 0),
            price=float(record.get("price") or 0.0),
            mileage=int(record.get("mileage") or 0),
            fuel_type=str(record.get("fuelType") or ""),
            transmission=str(record.get("transmission") or ""),
            color=str(record.get("color") or ""),
            body_type=str(record.get("bodyType") or ""),
            featured=bool(record.get("featured", False)),
            category=str(category.get("name") or "")
            if isinstance(category, dict)
            else "",
            cover_image=str(cover),
            title=title,
        )

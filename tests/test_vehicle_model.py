# tests/test_vehicle_model.py

"""Tests for the Vehicle dataclass."""

import unittest

from showroom.models.vehicle import Vehicle


class TestVehicleModel(unittest.TestCase):
    """Verify Vehicle defaults and API mapping."""

    def test_defaults(self) -> None:
        """Optional fields default to empty values."""
        v = Vehicle(id=1, make="BMW", model="X5")
        self.assertEqual(v.year, 0)
        self.assertEqual(v.price, 0.0)
        self.assertFalse(v.featured)
        self.assertEqual(v.cover_image, "")

    def test_display_title_fallback(self) -> None:
        """Without a title the display title is year make model."""
        v = Vehicle(id=1, make="BMW", model="X5", year=2020)
        self.assertEqual(v.display_title, "2020 BMW X5")

    def test_display_title_without_year(self) -> None:
        """A missing year is left out of the display title."""
        v = Vehicle(id=1, make="BMW", model="X5")
        self.assertEqual(v.display_title, "BMW X5")

    def test_display_title_prefers_translation(self) -> None:
        """A translated title wins over the fallback."""
        v = Vehicle.from_api(
            {
                "id": 3,
                "make": "BMW",
                "model": "X5",
                "translations": [{"title": "BMW X5 xDrive", "description": ""}],
            }
        )
        self.assertEqual(v.display_title, "BMW X5 xDrive")

    def test_from_api_full_record(self) -> None:
        """Every API field is mapped."""
        v = Vehicle.from_api(
            {
                "id": "7",
                "make": "Audi",
                "model": "A4",
                "year": 2019,
                "price": "31000.50",
                "mileage": 88000,
                "fuelType": "Petrol",
                "transmission": "Manual",
                "color": "Black",
                "bodyType": "Sedan",
                "featured": False,
                "coverImage": "/uploads/a4.jpg",
                "category": {"name": "Sedan"},
            }
        )
        self.assertEqual(v.id, 7)
        self.assertEqual(v.price, 31000.5)
        self.assertEqual(v.body_type, "Sedan")
        self.assertEqual(v.cover_image, "/uploads/a4.jpg")
        self.assertEqual(v.category, "Sedan")

    def test_from_api_nulls_use_defaults(self) -> None:
        """Null API fields fall back to defaults."""
        v = Vehicle.from_api(
            {"id": 1, "make": None, "model": None, "price": None, "category": None}
        )
        self.assertEqual(v.make, "")
        self.assertEqual(v.price, 0.0)
        self.assertEqual(v.category, "")

    def test_from_api_requires_id(self) -> None:
        """A record without an id raises KeyError."""
        with self.assertRaises(KeyError):
            Vehicle.from_api({"make": "BMW"})

    def test_equality(self) -> None:
        """Vehicles with equal fields compare equal."""
        a = Vehicle(id=1, make="BMW", model="X5")
        b = Vehicle(id=1, make="BMW", model="X5")
        self.assertEqual(a, b)


if __name__ == "__main__":
    unittest.main()

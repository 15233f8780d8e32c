#!/usr/bin/env python3
"""Tests for ScheduleItem, Model and Manufacturer."""

from maintenance_tracker import Manufacturer, Model, ScheduleItem, drivetrain_label


class TestScheduleItem:
    """Tests for ScheduleItem drivetrain filtering and serialization."""

    def test_applies_to_all_when_unrestricted(self):
        item = ScheduleItem("oil_change", 7500)
        assert item.applies_to("FWD")
        assert item.applies_to("AWD")
        assert item.applies_to(None)

    def test_applies_to_listed_drivetrains_only(self):
        item = ScheduleItem("differential_fluid", 30000, drivetrains=["AWD", "4WD"])
        assert item.applies_to("AWD")
        assert item.applies_to("4WD")
        assert not item.applies_to("FWD")
        assert not item.applies_to("RWD")

    def test_empty_restriction_applies_to_nothing(self):
        item = ScheduleItem("differential_fluid", 30000, drivetrains=[])
        assert not item.applies_to("AWD")

    def test_to_dict_minimal(self):
        assert ScheduleItem("tire_rotation", 5000).to_dict() == {
            "type": "tire_rotation",
            "intervalMiles": 5000,
        }

    def test_to_dict_full(self):
        item = ScheduleItem("oil_change", 10000, 12, ["FWD"], "0W-16 synthetic.")
        assert item.to_dict() == {
            "type": "oil_change",
            "intervalMiles": 10000,
            "intervalMonths": 12,
            "drivetrainSpecific": ["FWD"],
            "notes": "0W-16 synthetic.",
        }


class TestModel:

    def test_covers_inclusive(self):
        model = Model("Camry", 2018, 2024, ["FWD"], "xv70")
        assert model.covers(2018)
        assert model.covers(2024)
        assert not model.covers(2017)
        assert not model.covers(2025)

    def test_years(self):
        model = Model("Forte", 2019, 2019, ["FWD"], "bd")
        assert list(model.years) == [2019]

    def test_overlaps_same_name(self):
        a = Model("Camry", 2012, 2018, ["FWD"], "xv50")
        b = Model("Camry", 2018, 2024, ["FWD"], "xv70")
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_adjacent_ranges_do_not_overlap(self):
        a = Model("Camry", 2012, 2017, ["FWD"], "xv50")
        b = Model("Camry", 2018, 2024, ["FWD"], "xv70")
        assert not a.overlaps(b)

    def test_different_names_do_not_overlap(self):
        a = Model("Camry", 2018, 2024, ["FWD"], "xv70")
        b = Model("RAV4", 2019, 2024, ["AWD"], "xa50")
        assert not a.overlaps(b)


class TestManufacturer:

    def test_find_model_first_declared_wins(self):
        first = Model("Camry", 2012, 2018, ["FWD"], "old")
        second = Model("Camry", 2018, 2024, ["FWD"], "new")
        make = Manufacturer("Toyota", [first, second], {})
        assert make.find_model("Camry", 2018) is first
        assert make.find_model("Camry", 2019) is second

    def test_find_model_miss(self):
        make = Manufacturer("Toyota", [Model("Camry", 2018, 2024, ["FWD"], "xv70")], {})
        assert make.find_model("Camry", 2010) is None
        assert make.find_model("Corolla", 2020) is None


class TestDrivetrainLabel:

    def test_known_code(self):
        assert drivetrain_label("AWD") == "All-Wheel Drive (AWD)"

    def test_unknown_code_passes_through(self):
        assert drivetrain_label("6x6") == "6x6"

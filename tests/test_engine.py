"""Tests for processing engine."""

import pytest
from conftest import make_records

from schema_elec.models import (
    Point,
    SignalType,
    CardCategory,
    CardCapacity,
    CardSpec,
)
from schema_elec.engine import (
    MalformedInputError,
    classify_points,
    count_demand,
    CardCatalog,
    CatalogError,
    DEFAULT_SEQUENCE_PRECEDENCE,
    sequence_cards,
    CapacityExceededError,
    available_capacity,
    summarize_capacity,
    validate_capacity,
    AllocationInvariantViolation,
    allocate_points,
)


def card(card_id, category=CardCategory.CARD, **capacity):
    return CardSpec(card_id, card_id.upper(), "Sofrel", category, CardCapacity(**capacity))


def di_points(count):
    return [Point(f"EQ{n}", f"P{n}", SignalType.DI) for n in range(1, count + 1)]


class TestClassifier:
    """Tests for point classifier."""

    def test_groups_by_type(self):
        """Test points are grouped by signal type in input order."""
        raw = (
            make_records("DI", 2, "PUMP")
            + make_records("AI", 1, "TANK")
            + [{"signalType": "DI", "equipmentName": "VALVE", "pointName": "OPEN"}]
            + [{"signalType": "COM : Modbus RS485", "equipmentName": "METER", "pointName": "BUS"}]
        )
        result = classify_points(raw)

        assert [p.display_name for p in result[SignalType.DI]] == [
            "PUMP1 - P1", "PUMP2 - P2", "VALVE - OPEN"
        ]
        assert len(result[SignalType.AI]) == 1
        assert len(result[SignalType.COM]) == 1
        assert result[SignalType.DO] == []
        assert set(result) == set(SignalType)

    def test_legacy_keys(self):
        """Test TypePoint / NomEquipement / NomPoint records."""
        result = classify_points([{"TypePoint": "AO", "NomEquipement": "VFD1", "NomPoint": "SPEED"}])
        assert result[SignalType.AO][0].display_name == "VFD1 - SPEED"

    def test_unknown_type_dropped(self):
        """Test records with an unknown type are dropped silently."""
        raw = [
            {"signalType": "XX", "equipmentName": "A", "pointName": "B"},
            {"signalType": "COM", "equipmentName": "A", "pointName": "B"},
        ]
        result = classify_points(raw)
        assert sum(len(points) for points in result.values()) == 0

    def test_input_not_mutated(self):
        """Test the caller's records are left untouched."""
        raw = make_records("DI", 2)
        snapshot = [dict(r) for r in raw]
        classify_points(raw)
        assert raw == snapshot

    def test_non_string_names(self):
        """Test numeric names are converted to text."""
        result = classify_points([{"signalType": "DI", "equipmentName": 12, "pointName": 3}])
        assert result[SignalType.DI][0].display_name == "12 - 3"

    @pytest.mark.parametrize("raw", ["DI", {"signalType": "DI"}, 42, None])
    def test_not_a_sequence(self, raw):
        """Test non-sequence inputs are rejected."""
        with pytest.raises(MalformedInputError):
            classify_points(raw)

    def test_record_not_a_mapping(self):
        """Test non-mapping records are rejected with their index."""
        with pytest.raises(MalformedInputError) as exc_info:
            classify_points(make_records("DI", 1) + ["DI"])
        assert exc_info.value.record_index == 1

    def test_missing_type(self):
        """Test a record without signal type is rejected."""
        with pytest.raises(MalformedInputError) as exc_info:
            classify_points([{"equipmentName": "A", "pointName": "B"}])
        assert exc_info.value.field == "signal_type"

    def test_missing_name(self):
        """Test a recognized record without point name is rejected."""
        with pytest.raises(MalformedInputError) as exc_info:
            classify_points([{"signalType": "DI", "equipmentName": "A"}])
        assert exc_info.value.field == "point_name"

    def test_null_name(self):
        """Test a null equipment name is rejected."""
        with pytest.raises(MalformedInputError):
            classify_points([{"signalType": "DI", "equipmentName": None, "pointName": "B"}])

    def test_count_demand(self):
        """Test demand counts only allocatable types."""
        demand = count_demand(classify_points(
            make_records("DI", 3) + make_records("COM : Modbus RS485", 2)
        ))
        assert demand == {SignalType.DI: 3, SignalType.AI: 0, SignalType.DO: 0, SignalType.AO: 0}


class TestSequencer:
    """Tests for card sequencing."""

    def test_controller_first(self):
        """Test the controller leads the sequence."""
        controller = card("s4w", CardCategory.CONTROLLER)
        result = sequence_cards([card("s4th_16_di"), controller, card("s4th_8_ai_t")])
        assert [c.id for c in result] == ["s4w", "s4th_8_ai_t", "s4th_16_di"]

    def test_precedence_order(self):
        """Test cards follow the precedence table."""
        selected = [card("isma_4o"), card("s4th_4_ao"), card("s4th_8_do"), card("s4th_8_ai_t")]
        result = sequence_cards(selected)
        assert [c.id for c in result] == ["s4th_8_ai_t", "s4th_8_do", "s4th_4_ao", "isma_4o"]

    def test_duplicates_keep_selection_order(self):
        """Test several instances of a card stay in selection order."""
        first = CardSpec("s4th_8_di", "first", "Sofrel", CardCategory.CARD, CardCapacity(di=8))
        second = CardSpec("s4th_8_di", "second", "Sofrel", CardCategory.CARD, CardCapacity(di=8))
        result = sequence_cards([first, card("s4th_8_ai_t"), second])
        assert [c.display_name for c in result] == ["S4TH_8_AI_T", "first", "second"]

    def test_unlisted_cards_last(self):
        """Test cards missing from the precedence table come last in selection order."""
        result = sequence_cards([card("zz"), card("s4th_8_di"), card("aa")])
        assert [c.id for c in result] == ["s4th_8_di", "zz", "aa"]

    def test_custom_precedence(self):
        """Test an explicit precedence table."""
        result = sequence_cards([card("a"), card("b")], precedence=["b", "a"])
        assert [c.id for c in result] == ["b", "a"]

    def test_only_first_controller_promoted(self):
        """Test a second controller is ordered like any other card."""
        c1 = card("s4w", CardCategory.CONTROLLER)
        c2 = card("s4w_bis", CardCategory.CONTROLLER)
        result = sequence_cards([card("s4th_8_di"), c1, c2])
        assert [c.id for c in result] == ["s4w", "s4th_8_di", "s4w_bis"]

    def test_input_not_mutated(self):
        """Test the selection list is left untouched."""
        selected = [card("s4th_8_di"), card("s4w", CardCategory.CONTROLLER)]
        sequence_cards(selected)
        assert [c.id for c in selected] == ["s4th_8_di", "s4w"]

    def test_default_precedence_starts_with_analog_inputs(self):
        """Test the bundled precedence handles analog inputs first."""
        assert DEFAULT_SEQUENCE_PRECEDENCE[0] == "s4th_8_ai_t"
        assert DEFAULT_SEQUENCE_PRECEDENCE[-1] == "isma_4o"


class TestCapacity:
    """Tests for capacity validation."""

    def test_available_capacity(self):
        """Test channels are summed per type."""
        cards = [card("a", di=2, ai=1), card("b", di=4)]
        assert available_capacity(cards)[SignalType.DI] == 6
        assert available_capacity(cards)[SignalType.AI] == 1

    def test_sufficient_capacity(self):
        """Test no error when demand fits exactly."""
        validate_capacity({SignalType.DI: 6}, [card("a", di=2), card("b", di=4)])

    def test_insufficient_capacity(self):
        """Test 5 AI points on a 3 AI card."""
        with pytest.raises(CapacityExceededError) as exc_info:
            validate_capacity({SignalType.AI: 5}, [card("ai3", ai=3)])

        error = exc_info.value
        assert error.signal_type == SignalType.AI
        assert error.demanded == 5
        assert error.available == 3
        assert error.shortfall == 2
        assert error.to_dict() == {
            "signal_type": "AI", "demanded": 5, "available": 3, "shortfall": 2
        }

    def test_first_shortfall_in_check_order(self):
        """Test DI is reported before AO."""
        with pytest.raises(CapacityExceededError) as exc_info:
            validate_capacity({SignalType.AO: 1, SignalType.DI: 1}, [card("empty")])
        assert exc_info.value.signal_type == SignalType.DI

    def test_summary(self):
        """Test the demand/availability summary."""
        summary = summarize_capacity({SignalType.DO: 3}, [card("do4", do=4)])
        assert summary[SignalType.DO] == (3, 4)
        assert summary[SignalType.DI] == (0, 0)


class TestPointAllocator:
    """Tests for point allocation."""

    def test_fills_cards_in_order(self):
        """Test 3 DI points on cards of 2 and 4 DI channels."""
        cards = allocate_points(
            [card("di2", di=2), card("di4", di=4)],
            {SignalType.DI: di_points(3)}
        )
        assert [p.equipment_name for p in cards[0].points(SignalType.DI)] == ["EQ1", "EQ2"]
        assert [p.equipment_name for p in cards[1].points(SignalType.DI)] == ["EQ3"]
        assert cards[1].spare_channels == 3

    def test_duplicate_cards_filled_independently(self):
        """Test two instances of the same card get distinct positions and points."""
        di8 = card("s4th_8_di", di=8)
        cards = allocate_points([di8, di8], {SignalType.DI: di_points(10)})

        assert [c.position for c in cards] == [0, 1]
        assert [c.page_name for c in cards] == ["s4th_8_di_0", "s4th_8_di_1"]
        assert len(cards[0].points(SignalType.DI)) == 8
        assert [p.equipment_name for p in cards[1].points(SignalType.DI)] == ["EQ9", "EQ10"]

    def test_mixed_card_takes_every_type(self):
        """Test a mixed card receives points of each type."""
        points = {
            SignalType.DI: di_points(1),
            SignalType.AO: [Point("VFD", "SPEED", SignalType.AO)],
        }
        cards = allocate_points([card("mix", di=2, ao=2)], points)
        assert len(cards[0].points(SignalType.DI)) == 1
        assert cards[0].points(SignalType.AO)[0].display_name == "VFD - SPEED"

    def test_com_points_never_allocated(self):
        """Test communication points take no channel."""
        points = {SignalType.COM: [Point("METER", "BUS", SignalType.COM)]}
        cards = allocate_points([card("di2", di=2)], points)
        assert cards[0].used_channels == 0

    def test_stable_order_across_cards(self):
        """Test concatenating card assignments gives the input order."""
        points = di_points(7)
        cards = allocate_points([card("a", di=3), card("b", di=1), card("c", di=5)], {SignalType.DI: points})
        assigned = [p for c in cards for p in c.points(SignalType.DI)]
        assert assigned == points
        for c in cards:
            assert len(c.points(SignalType.DI)) <= c.spec.capacity.di

    def test_leftover_points_raise(self):
        """Test unchecked overflow is an internal fault."""
        with pytest.raises(AllocationInvariantViolation) as exc_info:
            allocate_points([card("di2", di=2)], {SignalType.DI: di_points(3)})
        assert exc_info.value.remaining == {SignalType.DI: 1}


class TestCardCatalog:
    """Tests for the card catalog."""

    def test_lookup(self, catalog):
        """Test card lookup."""
        spec = catalog.lookup("di4")
        assert spec.capacity.di == 4
        assert spec.category == CardCategory.CARD
        assert catalog.lookup("missing") is None

    def test_glyph(self, catalog):
        """Test glyph lookup."""
        assert catalog.glyph("di2").startswith("PHN2")
        assert catalog.glyph("bare") == ""
        assert catalog.glyph("missing") == ""

    def test_resolve_unknown(self, catalog):
        """Test unknown card ids are excluded with a warning."""
        specs, warnings = catalog.resolve(["di2", "missing", "di2"])
        assert [s.id for s in specs] == ["di2", "di2"]
        assert len(warnings) == 1
        assert warnings[0].card_id == "missing"

    def test_precedence_from_yaml(self, catalog):
        """Test the precedence table is read from the catalog."""
        assert catalog.sequence_precedence[:2] == ["ai3", "di2"]

    def test_group_by_brand(self, catalog):
        """Test the preferred brand is listed first."""
        groups = catalog.group_by_brand()
        assert list(groups) == ["Sofrel", "Acme"]
        assert [s.id for s in groups["Sofrel"]["card"]] == ["di2", "di4", "ai3", "bare"]
        assert "controller" in groups["Sofrel"]

    def test_list_cards_gui_order(self, catalog):
        """Test cards are listed by GUI order."""
        assert [s.id for s in catalog.list_cards()][:3] == ["ctrl", "di2", "di4"]

    def test_missing_file_empty_catalog(self, tmp_path):
        """Test a missing catalog file gives an empty catalog."""
        assert len(CardCatalog(str(tmp_path / "missing.yaml"))) == 0

    def test_invalid_category(self):
        """Test unknown categories are rejected."""
        with pytest.raises(CatalogError):
            CardCatalog.from_dict({"cards": [{"id": "x", "category": "robot"}]})

    def test_card_without_id(self):
        """Test cards must have an id."""
        with pytest.raises(CatalogError):
            CardCatalog.from_dict({"cards": [{"category": "card"}]})

    def test_bundled_catalog(self):
        """Test the bundled catalog loads and matches its precedence table."""
        bundled = CardCatalog()
        assert bundled.lookup("s4w").is_controller
        assert bundled.lookup("s4th_16_di").capacity.di == 16
        for card_id in bundled.sequence_precedence:
            assert card_id in bundled

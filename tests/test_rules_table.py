"""Validation and lookup behaviour of the pricing rules table."""
import dataclasses

import pytest

from cake_pricing.engine import PricingRulesTable, RulesTableError
from cake_pricing.engine.rules_table import priced_lookup, validate_structure


def test_default_structure_is_valid(pricing_data):
    _, errors, warnings = validate_structure(pricing_data)
    assert errors == []
    assert warnings == []


def test_missing_sections_reported(pricing_data):
    with pytest.raises(RulesTableError) as exc:
        PricingRulesTable.from_dict({"basePrices": {"6inch": 9000}})
    assert "Missing required field: layerPrice" in exc.value.errors
    assert "Missing required field: icingTypes" in exc.value.errors


def test_missing_size_rejected(pricing_data):
    del pricing_data["basePrices"]["8inch"]
    with pytest.raises(RulesTableError) as exc:
        PricingRulesTable.from_dict(pricing_data)
    assert "basePrices must include '8inch'" in exc.value.errors


@pytest.mark.parametrize("bad_value", [-1000, 80.5, True, "8000", None])
def test_non_cent_amounts_rejected(pricing_data, bad_value):
    pricing_data["basePrices"]["6inch"] = bad_value
    with pytest.raises(RulesTableError) as exc:
        PricingRulesTable.from_dict(pricing_data)
    assert any(e.startswith("basePrices.6inch") for e in exc.value.errors), exc.value.errors


def test_negative_layer_price_rejected(pricing_data):
    pricing_data["layerPrice"] = -1
    _, errors, _ = validate_structure(pricing_data)
    assert errors == ["layerPrice must be a non-negative integer (cents), got -1"]


def test_zero_base_price_warns(pricing_data):
    pricing_data["basePrices"]["6inch"] = 0
    _, errors, warnings = validate_structure(pricing_data)
    assert errors == []
    assert warnings == ["basePrices.6inch is 0"]


def test_alias_to_unknown_template_rejected(pricing_data):
    pricing_data["templateAliases"]["xmas"] = "christmas"
    with pytest.raises(RulesTableError) as exc:
        PricingRulesTable.from_dict(pricing_data)
    assert exc.value.errors == ["templateAliases.xmas points at unknown template 'christmas'"]


def test_template_sections_default_when_absent(pricing_data):
    del pricing_data["templatePrices"]
    del pricing_data["templateAliases"]
    table = PricingRulesTable.from_dict(pricing_data)
    assert table.resolve_template("999") == "fathers-day"
    assert table.template_prices["fathers-day"] == 8000


def test_spelled_out_icing_section_accepted(pricing_data):
    pricing_data["icingTypePrices"] = pricing_data.pop("icingTypes")
    table = PricingRulesTable.from_dict(pricing_data)
    assert table.icing_type_prices["fondant"] == 1000


def test_keys_are_normalized(pricing_data):
    pricing_data["decorationPrices"]["Edible Glitter"] = 900
    table = PricingRulesTable.from_dict(pricing_data)
    assert table.decoration_prices["edible-glitter"] == 900


def test_table_is_read_only(rules):
    with pytest.raises(TypeError):
        rules.flavor_prices["chocolate"] = 100
    with pytest.raises(dataclasses.FrozenInstanceError):
        rules.layer_price = 0


def test_direct_construction_requires_both_sizes():
    with pytest.raises(RulesTableError):
        PricingRulesTable(base_prices={"6inch": 8000}, layer_price=1500)


def test_direct_construction_validates_amounts():
    with pytest.raises(RulesTableError) as exc_info:
        PricingRulesTable(
            base_prices={"6inch": 80.5, "8inch": 15500},
            layer_price=-3,
            shape_prices={"heart": True},
        )
    errors = exc_info.value.errors
    assert any(e.startswith("basePrices.6inch") for e in errors)
    assert any(e.startswith("layerPrice") for e in errors)
    assert any(e.startswith("shapePrices.heart") for e in errors)


def test_direct_construction_normalizes_keys():
    table = PricingRulesTable(
        base_prices={"6inch": 8000, "8inch": 15500},
        layer_price=1500,
        decoration_prices={"Gold Leaf": 1500},
        template_prices={"Fathers Day": 8000},
        template_aliases={" 999 ": "Fathers Day"},
    )
    assert dict(table.decoration_prices) == {"gold-leaf": 1500}
    assert priced_lookup(table.decoration_prices, ["gold leaf"]) == 1500
    assert table.resolve_template("999") == "fathers-day"


def test_direct_construction_rejects_dangling_alias():
    with pytest.raises(RulesTableError):
        PricingRulesTable(
            base_prices={"6inch": 8000, "8inch": 15500},
            layer_price=1500,
            template_aliases={"999": "fathers-day"},
        )


def test_resolve_template(rules):
    assert rules.resolve_template("fathers-day") == "fathers-day"
    assert rules.resolve_template("Fathers Day") == "fathers-day"
    assert rules.resolve_template("999") == "fathers-day"
    assert rules.resolve_template("birthday") is None
    assert rules.resolve_template(None) is None


def test_priced_lookup(rules):
    assert priced_lookup(rules.decoration_prices, ["flowers", "Gold Leaf", "nope"]) == 3000
    assert priced_lookup(rules.decoration_prices, []) == 0


def test_to_dict_matches_source(rules, pricing_data):
    assert rules.to_dict() == pricing_data

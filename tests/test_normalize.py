"""Coercion rules applied to incoming cake configurations."""
import pytest

from cake_pricing.engine import OrderConfiguration
from cake_pricing.engine import normalize


@pytest.mark.parametrize("value, expected", [
    (3, 3),
    ("3", 3),
    ("3.7", 3),
    (" 12 cakes", 12),
    ("-2", -2),
    (2.9, 2),
    (True, 0),
    (None, 0),
    ("abc", 0),
    ([1], 0),
    (float("nan"), 0),
])
def test_parse_int(value, expected):
    assert normalize.parse_int(value) == expected


def test_parse_int_oversized_digit_string():
    huge = "9" * 5000
    assert normalize.parse_int(huge) == 0
    assert normalize.parse_int(huge, default=7) == 7
    assert normalize.coerce_count(huge) == 0
    assert normalize.coerce_layers(huge) == 1


def test_coerce_count_clamps_negatives():
    assert normalize.coerce_count("-5") == 0
    assert normalize.coerce_count(-1) == 0
    assert normalize.coerce_count("4") == 4


def test_coerce_layers_defaults_to_one():
    assert normalize.coerce_layers(None) == 1
    assert normalize.coerce_layers("0") == 1
    assert normalize.coerce_layers("three") == 1
    assert normalize.coerce_layers("3") == 3


def test_coerce_list():
    assert normalize.coerce_list("flowers") == ()
    assert normalize.coerce_list(None) == ()
    assert normalize.coerce_list(["a", "a"]) == ("a", "a")
    assert normalize.coerce_list([None, "x"]) == ("x",)


def test_coerce_template():
    assert normalize.coerce_template(999) == "999"
    assert normalize.coerce_template(999.0) == "999"
    assert normalize.coerce_template("  ") is None
    assert normalize.coerce_template(None) is None
    assert normalize.coerce_template(True) is None


def test_normalize_key():
    assert normalize.normalize_key("Gold  Leaf ") == "gold-leaf"
    assert normalize.normalize_key("fathers day") == "fathers-day"
    assert normalize.normalize_key("6inch") == "6inch"


def test_from_payload_defaults():
    config = OrderConfiguration.from_payload({})
    assert config.six_inch_cakes == 0
    assert config.eight_inch_cakes == 0
    assert config.layers == 1
    assert config.shape == "round"
    assert config.icing_type == "butter"
    assert config.flavors == ()
    assert config.template is None
    assert config.servings is None


def test_from_payload_coerces_every_field():
    config = OrderConfiguration.from_payload({
        "sixInchCakes": "-1",
        "eightInchCakes": "2",
        "layers": "2",
        "servings": "24",
        "shape": "",
        "flavors": "chocolate",
        "icingType": None,
        "decorations": ["flowers"],
        "dietaryRestrictions": ("vegan",),
        "template": 999,
    })
    assert config.six_inch_cakes == 0
    assert config.eight_inch_cakes == 2
    assert config.cake_quantity == 2
    assert config.layers == 2
    assert config.servings == 24
    assert config.shape == "round"
    assert config.flavors == ()
    assert config.icing_type == "butter"
    assert config.decorations == ("flowers",)
    assert config.dietary_restrictions == ("vegan",)
    assert config.template == "999"

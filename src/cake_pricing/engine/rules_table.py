"""
Pricing rules table - the immutable snapshot the engine prices against.

A table is validated once when built. After that every mapping is a
read-only view, so a snapshot handed to a calculation cannot change
underneath it.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .exceptions import RulesTableError
from .normalize import normalize_key

SIZE_KEYS = ("6inch", "8inch")

# JSON section name -> attribute name, for the simple id -> cents sections
PRICE_SECTIONS = {
    "flavorPrices": "flavor_prices",
    "icingTypes": "icing_type_prices",
    "decorationPrices": "decoration_prices",
    "dietaryPrices": "dietary_prices",
    "shapePrices": "shape_prices",
}

REQUIRED_SECTIONS = ("basePrices", "layerPrice") + tuple(PRICE_SECTIONS)

DEFAULT_TEMPLATE_PRICES = {"fathers-day": 8000}
DEFAULT_TEMPLATE_ALIASES = {"999": "fathers-day"}


def is_cents(value: Any) -> bool:
    """Non-negative integer amount (bools are not amounts)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def priced_lookup(prices: Mapping[str, int], identifiers: Iterable[str]) -> int:
    """
    Sum the upcharges for a list of option ids.
    
    Ids are normalized before lookup; unknown ids cost nothing.
    """
    return sum(prices.get(normalize_key(i), 0) for i in identifiers)


def _check_price_map(name: str, raw: Any, errors: list[str]) -> dict[str, int]:
    if not isinstance(raw, Mapping):
        errors.append(f"{name} must be an object of id -> cents")
        return {}
    prices = {}
    for key, value in raw.items():
        if not is_cents(value):
            errors.append(f"{name}.{key} must be a non-negative integer (cents), got {value!r}")
            continue
        norm = normalize_key(key)
        if norm in prices:
            errors.append(f"{name}.{key} duplicates an existing id after normalization ('{norm}')")
            continue
        prices[norm] = value
    return prices


def validate_structure(data: Any) -> tuple[dict, list[str], list[str]]:
    """
    Validate a raw pricing structure (as loaded from JSON).
    
    Returns (clean_fields, errors, warnings). `clean_fields` holds keyword
    arguments for PricingRulesTable and is only meaningful when errors is empty.
    """
    errors = []
    warnings = []
    
    if not isinstance(data, Mapping):
        return {}, ["Pricing structure must be a JSON object"], warnings
    
    # Older files use the spelled-out name for icing prices
    if "icingTypes" not in data and "icingTypePrices" in data:
        data = {**data, "icingTypes": data["icingTypePrices"]}
    
    for section in REQUIRED_SECTIONS:
        if section not in data:
            errors.append(f"Missing required field: {section}")
    if errors:
        return {}, errors, warnings
    
    raw_base = data["basePrices"]
    base_prices = _check_price_map("basePrices", raw_base, errors)
    for size in SIZE_KEYS:
        if isinstance(raw_base, Mapping) and size not in raw_base:
            errors.append(f"basePrices must include '{size}'")
        elif base_prices.get(size) == 0:
            warnings.append(f"basePrices.{size} is 0")
    
    layer_price = data["layerPrice"]
    if not is_cents(layer_price):
        errors.append(f"layerPrice must be a non-negative integer (cents), got {layer_price!r}")
    
    fields = {"base_prices": base_prices, "layer_price": layer_price}
    for section, attr in PRICE_SECTIONS.items():
        fields[attr] = _check_price_map(section, data[section], errors)
    
    template_prices = _check_price_map(
        "templatePrices", data.get("templatePrices", DEFAULT_TEMPLATE_PRICES), errors
    )
    raw_aliases = data.get("templateAliases", DEFAULT_TEMPLATE_ALIASES)
    aliases = {}
    if not isinstance(raw_aliases, Mapping):
        errors.append("templateAliases must be an object of alias -> template id")
    else:
        for alias, target in raw_aliases.items():
            target_key = normalize_key(target)
            if target_key not in template_prices:
                errors.append(f"templateAliases.{alias} points at unknown template '{target}'")
                continue
            aliases[normalize_key(alias)] = target_key
    fields["template_prices"] = template_prices
    fields["template_aliases"] = aliases
    
    return fields, errors, warnings


@dataclass(frozen=True)
class PricingRulesTable:
    """One consistent, read-only set of prices (all in cents)."""
    base_prices: Mapping[str, int]
    layer_price: int
    flavor_prices: Mapping[str, int] = field(default_factory=dict)
    icing_type_prices: Mapping[str, int] = field(default_factory=dict)
    decoration_prices: Mapping[str, int] = field(default_factory=dict)
    dietary_prices: Mapping[str, int] = field(default_factory=dict)
    shape_prices: Mapping[str, int] = field(default_factory=dict)
    template_prices: Mapping[str, int] = field(default_factory=dict)
    template_aliases: Mapping[str, str] = field(default_factory=dict)
    
    def __post_init__(self):
        errors = []
        for name, section in (("base_prices", "basePrices"), ("template_prices", "templatePrices"),
                              *((attr, sec) for sec, attr in PRICE_SECTIONS.items())):
            prices = _check_price_map(section, getattr(self, name), errors)
            object.__setattr__(self, name, MappingProxyType(prices))

        if not is_cents(self.layer_price):
            errors.append(f"layerPrice must be a non-negative integer (cents), got {self.layer_price!r}")
        errors.extend(f"basePrices must include '{s}'" for s in SIZE_KEYS if s not in self.base_prices)

        aliases = {}
        for alias, target in dict(self.template_aliases).items():
            target_key = normalize_key(target)
            if target_key not in self.template_prices:
                errors.append(f"templateAliases.{alias} points at unknown template '{target}'")
                continue
            aliases[normalize_key(alias)] = target_key
        object.__setattr__(self, 'template_aliases', MappingProxyType(aliases))

        if errors:
            raise RulesTableError(errors)
    
    @classmethod
    def from_dict(cls, data: Any) -> 'PricingRulesTable':
        """Build a table from its JSON form, raising RulesTableError if invalid."""
        fields, errors, warnings = validate_structure(data)
        if errors:
            raise RulesTableError(errors, warnings)
        return cls(**fields)
    
    def to_dict(self) -> dict:
        """JSON form, as served by /api/pricing-structure."""
        return {
            "basePrices": dict(self.base_prices),
            "layerPrice": self.layer_price,
            "flavorPrices": dict(self.flavor_prices),
            "icingTypes": dict(self.icing_type_prices),
            "decorationPrices": dict(self.decoration_prices),
            "dietaryPrices": dict(self.dietary_prices),
            "shapePrices": dict(self.shape_prices),
            "templatePrices": dict(self.template_prices),
            "templateAliases": dict(self.template_aliases),
        }
    
    def resolve_template(self, template: Optional[str]) -> Optional[str]:
        """Return the canonical template id for a selector or alias, else None."""
        if not template:
            return None
        key = normalize_key(template)
        if key in self.template_prices:
            return key
        return self.template_aliases.get(key)
    
    def counts(self) -> dict[str, int]:
        """Number of priced ids per section."""
        return {
            "basePrices": len(self.base_prices),
            "flavorPrices": len(self.flavor_prices),
            "icingTypes": len(self.icing_type_prices),
            "decorationPrices": len(self.decoration_prices),
            "dietaryPrices": len(self.dietary_prices),
            "shapePrices": len(self.shape_prices),
            "templatePrices": len(self.template_prices),
        }

"""
Data models for the pricing engine.

Uses frozen dataclasses so a configuration or a breakdown cannot change
once built.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

from . import normalize

DEFAULT_SHAPE = "round"
DEFAULT_ICING = "butter"


@dataclass(frozen=True)
class OrderConfiguration:
    """A single cake configuration, already coerced to safe types."""
    six_inch_cakes: int = 0
    eight_inch_cakes: int = 0
    layers: int = 1
    shape: str = DEFAULT_SHAPE
    flavors: tuple[str, ...] = ()
    icing_type: str = DEFAULT_ICING
    decorations: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()
    template: Optional[str] = None
    servings: Optional[int] = None  # informational, never priced
    
    @property
    def cake_quantity(self) -> int:
        return self.six_inch_cakes + self.eight_inch_cakes
    
    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> 'OrderConfiguration':
        """Build a configuration from a camelCase request body."""
        payload = payload or {}
        servings = payload.get('servings')
        return cls(
            six_inch_cakes=normalize.coerce_count(payload.get('sixInchCakes')),
            eight_inch_cakes=normalize.coerce_count(payload.get('eightInchCakes')),
            layers=normalize.coerce_layers(payload.get('layers')),
            shape=normalize.coerce_identifier(payload.get('shape'), DEFAULT_SHAPE),
            flavors=normalize.coerce_list(payload.get('flavors')),
            icing_type=normalize.coerce_identifier(payload.get('icingType'), DEFAULT_ICING),
            decorations=normalize.coerce_list(payload.get('decorations')),
            dietary_restrictions=normalize.coerce_list(payload.get('dietaryRestrictions')),
            template=normalize.coerce_template(payload.get('template')),
            servings=normalize.coerce_count(servings) if servings is not None else None,
        )


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized price of one configuration. All amounts are in cents."""
    base_price: int
    cake_quantity: int
    layer_price: int = 0
    flavor_price: int = 0
    shape_price: int = 0
    decoration_total: int = 0
    icing_price: int = 0
    dietary_upcharge: int = 0
    photo_price: int = 0
    template: Optional[str] = None
    total_price: int = field(init=False)
    
    def __post_init__(self):
        object.__setattr__(self, 'total_price', sum(self.line_items().values()))
    
    def line_items(self) -> dict[str, int]:
        """Priced components keyed by their short display name."""
        return {
            "base": self.base_price,
            "layers": self.layer_price,
            "flavors": self.flavor_price,
            "shape": self.shape_price,
            "decorations": self.decoration_total,
            "icing": self.icing_price,
            "dietary": self.dietary_upcharge,
            "photo": self.photo_price,
        }
    
    def to_dict(self) -> dict:
        """Convert to the camelCase JSON shape served by the API."""
        return {
            "basePrice": self.base_price,
            "layerPrice": self.layer_price,
            "flavorPrice": self.flavor_price,
            "shapePrice": self.shape_price,
            "decorationTotal": self.decoration_total,
            "icingPrice": self.icing_price,
            "dietaryUpcharge": self.dietary_upcharge,
            "photoPrice": self.photo_price,
            "cakeQuantity": self.cake_quantity,
            "totalPrice": self.total_price,
            "template": self.template,
            "breakdown": self.line_items(),
        }

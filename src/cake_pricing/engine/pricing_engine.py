"""
Pricing Engine - itemized cake pricing against a rules snapshot.

The calculation itself is `calculate_price`, a pure function of one
OrderConfiguration and one PricingRulesTable. `PricingEngine` wraps it for
callers that hold a live RulesStore: it takes exactly one snapshot per call,
so an admin update landing mid-request never produces a mixed price.
"""
import logging
from typing import Any, Protocol, Union

from .exceptions import ValidationError
from .models import OrderConfiguration, PriceBreakdown
from .normalize import normalize_key
from .rules_table import PricingRulesTable, priced_lookup

logger = logging.getLogger(__name__)

NO_CAKES_MESSAGE = "Must select at least one cake"


class SnapshotSource(Protocol):
    def snapshot(self) -> PricingRulesTable: ...


def _log_unknown(section: str, prices, identifiers) -> None:
    unknown = [i for i in identifiers if normalize_key(i) not in prices]
    if unknown:
        logger.debug(f"Ignoring unpriced {section}: {', '.join(unknown)}")


def calculate_price(config: OrderConfiguration, rules: PricingRulesTable) -> PriceBreakdown:
    """
    Price a single cake configuration.

    Resolution order:
    1. Reject orders with no cakes
    2. Recognized template -> fixed price, nothing else charged
    3. Base price per size, then per-unit upcharges for layers, flavors,
       shape, icing, decorations and dietary restrictions

    Raises:
        ValidationError: if both size counts are zero
    """
    quantity = config.cake_quantity
    if quantity == 0:
        raise ValidationError(NO_CAKES_MESSAGE)

    template_id = rules.resolve_template(config.template)
    if template_id is not None:
        return PriceBreakdown(
            base_price=rules.template_prices[template_id],
            cake_quantity=quantity,
            template=template_id,
        )

    base_price = (
        config.six_inch_cakes * rules.base_prices["6inch"]
        + config.eight_inch_cakes * rules.base_prices["8inch"]
    )

    for section, prices, ids in (
        ("flavors", rules.flavor_prices, config.flavors),
        ("decorations", rules.decoration_prices, config.decorations),
        ("dietary restrictions", rules.dietary_prices, config.dietary_restrictions),
        ("shape", rules.shape_prices, (config.shape,)),
        ("icing type", rules.icing_type_prices, (config.icing_type,)),
    ):
        _log_unknown(section, prices, ids)

    return PriceBreakdown(
        base_price=base_price,
        cake_quantity=quantity,
        layer_price=max(0, config.layers - 1) * rules.layer_price * quantity,
        flavor_price=priced_lookup(rules.flavor_prices, config.flavors) * quantity,
        shape_price=priced_lookup(rules.shape_prices, (config.shape,)) * quantity,
        decoration_total=priced_lookup(rules.decoration_prices, config.decorations) * quantity,
        icing_price=priced_lookup(rules.icing_type_prices, (config.icing_type,)) * quantity,
        dietary_upcharge=priced_lookup(rules.dietary_prices, config.dietary_restrictions) * quantity,
    )


class PricingEngine:
    """Prices configurations against the current snapshot of a rules source."""

    def __init__(self, rules_source: Union[SnapshotSource, PricingRulesTable]):
        self.rules_source = rules_source

    def current_rules(self) -> PricingRulesTable:
        if isinstance(self.rules_source, PricingRulesTable):
            return self.rules_source
        return self.rules_source.snapshot()

    def calculate(self, config: OrderConfiguration) -> PriceBreakdown:
        """Price a configuration against one consistent rules snapshot."""
        return calculate_price(config, self.current_rules())

    def calculate_payload(self, payload: dict[str, Any]) -> PriceBreakdown:
        """Coerce a raw request body and price it."""
        config = OrderConfiguration.from_payload(payload)
        breakdown = self.calculate(config)
        logger.info(
            f"Priced {breakdown.cake_quantity} cake(s): total={breakdown.total_price} "
            f"template={breakdown.template or '-'}"
        )
        return breakdown

"""Engine subpackage - core pricing logic and the rules table."""
from .pricing_engine import PricingEngine, calculate_price
from .models import OrderConfiguration, PriceBreakdown
from .rules_table import PricingRulesTable
from .exceptions import ValidationError, RulesTableError

__all__ = [
    'PricingEngine', 'calculate_price', 'OrderConfiguration', 'PriceBreakdown',
    'PricingRulesTable', 'ValidationError', 'RulesTableError',
]

import copy
import json
import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from cake_pricing.engine import PricingRulesTable
from cake_pricing.services.rules_store import DEFAULT_RULES_PATH


@pytest.fixture(scope="session")
def _default_pricing():
    with open(DEFAULT_RULES_PATH, 'r', encoding='utf-8') as f:
        return json.load(f)


@pytest.fixture
def pricing_data(_default_pricing):
    """Fresh, mutable copy of the default pricing structure."""
    return copy.deepcopy(_default_pricing)


@pytest.fixture
def rules(pricing_data):
    return PricingRulesTable.from_dict(pricing_data)


@pytest.fixture
def rules_file(tmp_path, pricing_data):
    path = tmp_path / "pricing-structure.json"
    path.write_text(json.dumps(pricing_data), encoding='utf-8')
    return path

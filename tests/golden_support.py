"""
Helpers shared by the golden case test and its generator.

Cases are stored compactly in CSV:
- rules: rule lines joined with '|'
- lines: 'line_id:variant:unit_price:qty' joined with ';' (variant OTHER = non-variant merchandise)
"""
import os
import sys
from decimal import Decimal

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fee_tool.engine import Cart, CartLine
from fee_tool.engine.models import OtherMerchandise, ProductVariant

CASES_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'golden_cases.csv')

CASE_COLUMNS = [
    'case_id', 'rules', 'fee_variant_gid', 'lines', 'expected_operations',
    'expected_target', 'expected_subtotal', 'expected_percent', 'expected_fee',
]


def parse_lines(encoded: str) -> list[CartLine]:
    lines = []
    for entry in filter(None, encoded.split(';')):
        line_id, variant, price, qty = entry.split(':')
        merchandise = OtherMerchandise() if variant == 'OTHER' else ProductVariant(id=variant)
        lines.append(CartLine(
            id=line_id,
            quantity=int(qty),
            unit_price=Decimal(price),
            merchandise=merchandise,
        ))
    return lines


def cart_from_case(case: dict) -> Cart:
    return Cart(
        lines=parse_lines(case['lines']),
        fee_rules=case['rules'].replace('|', '\n'),
        fee_variant_gid=case['fee_variant_gid'],
    )


# (case_id, rules, fee_variant_gid, lines) in CSV order. The generator
# computes the expected_* columns for exactly these cases.
GOLDEN_CASE_INPUTS = [
    ('basic_first_tier', '0-100=5', 'FEE', 'L1:V1:10.00:2;L2:FEE:0:1;L3:V2:5.00:3'),
    ('second_tier', '0-100=5|100.01-500=3.5%', 'FEE', 'L1:V1:150:1;L2:FEE:0:1'),
    ('overlap_first_match', '0-100=5%|50-150=10%', 'FEE', 'L1:V1:75:1;L2:FEE:0:1'),
    ('no_tier_zero_fee', '0-100=5', 'FEE', 'L1:V1:250:1;L2:FEE:9.99:1'),
    ('rounding_down', '0-1000=10', 'FEE', 'L1:V1:33.333:1;L2:FEE:0:1'),
    ('rounding_half_up', '0-100=5', 'FEE', 'L1:V1:10.50:1;L2:FEE:0:1'),
    ('inclusive_max_bound', '0-100=5|100-200=10', 'FEE', 'L1:V1:100:1;L2:FEE:0:1'),
    ('other_merchandise_counted', '0-1000=10', 'FEE', 'L1:OTHER:20:1;L2:V1:30:1;L3:FEE:0:1'),
    ('duplicate_fee_lines_last_wins', '0-1000=10', 'FEE', 'L1:V1:100:1;F1:FEE:5:1;F2:FEE:7:1'),
    ('comment_and_bad_line', '# tiers|0-50=2|oops|50.01-500=4%', 'FEE', 'L1:V1:60:2;L2:FEE:0:1'),
    ('zero_quantity', '0-100=5', 'FEE', 'L1:V1:99:0;L2:FEE:0:1'),
    ('fee_line_missing', '0-100=5', 'FEE', 'L1:V1:10:1'),
    ('blank_rules', '', 'FEE', 'L1:V1:10:1;L2:FEE:0:1'),
    ('malformed_rules_only', 'abc|10-5=3', 'FEE', 'L1:V1:10:1;L2:FEE:0:1'),
    ('fee_variant_unset', '0-100=5', '', 'L1:V1:10:1;L2:FEE:0:1'),
]


def expected_columns(engine, case: dict) -> dict:
    """Run one case and render its expected_* columns for the CSV."""
    result = engine.run(cart_from_case(case))
    op = result.operations[0] if result.operations else None
    return {
        'expected_operations': len(result.operations),
        'expected_target': op.cart_line_id if op else '',
        'expected_subtotal': str(result.subtotal) if result.subtotal is not None else '',
        'expected_percent': str(result.percent) if result.percent is not None else '',
        'expected_fee': str(op.fixed_price_per_unit) if op else '',
    }

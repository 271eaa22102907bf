"""Engine subpackage - tiered fee rules and cart evaluation."""
from .fee_engine import (
    FeeEngine,
    build_operation,
    compute_fee,
    compute_subtotal,
    resolve_percent,
)
from .models import Cart, CartLine, FeeRule, LineUpdateOperation, TransformResult
from .rule_parser import format_rules, parse_rules

__all__ = [
    'FeeEngine', 'Cart', 'CartLine', 'FeeRule', 'LineUpdateOperation', 'TransformResult',
    'parse_rules', 'format_rules', 'compute_subtotal', 'resolve_percent', 'compute_fee',
    'build_operation',
]

"""
Fee Engine - Computes a tiered service fee for a cart.

Pipeline, with an early exit to "no operation" at each stage:
1. Parse the tier rules from the cart's rules attribute
2. Sum unit price × quantity over every line except the fee line
3. Resolve the first tier whose range contains the subtotal
4. Compute the fee and round it to cents
5. Emit a fixed-price update for the fee line
"""
import logging
from decimal import Decimal, InvalidOperation, Overflow, ROUND_HALF_UP, localcontext
from typing import Callable, Optional

from .models import (
    Cart,
    CartLine,
    FeeRule,
    LineUpdateOperation,
    MONEY_CONTEXT,
    TraceStep,
    TransformResult,
    TWO_PLACES,
)
from .rule_parser import parse_rules

logger = logging.getLogger(__name__)

TraceHook = Callable[[TraceStep], None]

HUNDRED = Decimal("100")


def compute_subtotal(lines: list[CartLine], fee_variant_id: str) -> tuple[Decimal, Optional[str]]:
    """
    Sum line totals, excluding lines whose variant is the fee variant.

    Returns (subtotal, fee_line_id). Every fee line is excluded; when
    several match, the last one scanned is the target.
    """
    subtotal = Decimal("0")
    fee_line_id = None

    with localcontext(MONEY_CONTEXT):
        for line in lines:
            if line.variant_id is not None and line.variant_id == fee_variant_id:
                fee_line_id = line.id
                continue
            subtotal += line.line_total

    return subtotal, fee_line_id


def resolve_percent(rules: list[FeeRule], subtotal: Decimal) -> Optional[Decimal]:
    """Percent of the first rule whose [min, max] contains the subtotal."""
    for rule in rules:
        if rule.contains(subtotal):
            return rule.percent
    return None


def compute_fee(subtotal: Decimal, percent: Optional[Decimal]) -> Decimal:
    """
    subtotal × percent / 100, rounded half away from zero to cents.

    Computed in MONEY_CONTEXT, so a fee needing more than MONEY_PRECISION
    digits (or an infinite percent) raises decimal.InvalidOperation or
    decimal.Overflow; FeeEngine.run turns that into a no-op.

    A zero fee is returned as a plain 0.00: a "-0" percent or subtotal
    would otherwise quantize to Decimal("-0.00") and serialize as "-0.00".
    Non-zero fees keep their sign.
    """
    if percent is None:
        percent = Decimal("0")
    with localcontext(MONEY_CONTEXT):
        fee = (subtotal * percent / HUNDRED).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    if not fee:
        return Decimal("0.00")
    return fee


def build_operation(fee_line_id: str, fee_amount: Decimal) -> LineUpdateOperation:
    return LineUpdateOperation(cart_line_id=fee_line_id, fixed_price_per_unit=fee_amount)


class FeeEngine:
    """
    Runs the fee pipeline for one cart at a time.

    Holds no per-cart state; the optional trace hook receives every
    TraceStep as it is recorded and never affects the result.
    """

    def __init__(self, trace_hook: Optional[TraceHook] = None):
        self.trace_hook = trace_hook

    def _trace(self, result: TransformResult, step: str, description: str, value: str = None):
        entry = result.add_trace(step, description, value)
        logger.debug("%s: %s%s", step, description, f" = {value}" if value else "")
        if self.trace_hook is not None:
            self.trace_hook(entry)

    def _noop(self, result: TransformResult, step: str, reason: str) -> TransformResult:
        result.add_warning(reason)
        self._trace(result, step, reason)
        return result

    def run(self, cart: Cart) -> TransformResult:
        """
        Evaluate the cart.

        Returns a TransformResult with zero operations when the
        configuration is missing or incomplete, or the amounts are too
        large to price, otherwise exactly one.
        """
        result = TransformResult()

        # 1) Rules
        rules_text = (cart.fee_rules or "").strip()
        if not rules_text:
            return self._noop(result, "Rules", "No fee rules configured")

        rules = parse_rules(rules_text)
        if not rules:
            return self._noop(result, "Rules", "Fee rules contain no valid tiers")
        self._trace(result, "Rules", "Parsed fee tiers", str(len(rules)))

        # 2) Fee variant
        fee_variant_gid = (cart.fee_variant_gid or "").strip()
        if not fee_variant_gid:
            return self._noop(result, "Fee Variant", "No fee variant configured")
        self._trace(result, "Fee Variant", "Fee variant", fee_variant_gid)

        # 3) Subtotal excluding the fee line
        try:
            subtotal, fee_line_id = compute_subtotal(cart.lines, fee_variant_gid)
        except (InvalidOperation, Overflow):
            return self._noop(result, "Subtotal", "Cart subtotal out of range")
        result.subtotal = subtotal
        self._trace(result, "Subtotal", f"Summed {len(cart.lines)} cart lines", str(subtotal))

        if fee_line_id is None:
            return self._noop(result, "Fee Line", "Fee line not found in cart")
        self._trace(result, "Fee Line", "Fee line", fee_line_id)

        # 4) Tier
        percent = resolve_percent(rules, subtotal)
        if percent is None:
            self._trace(result, "Tier", "No tier contains subtotal, using 0%", "0")
            percent = Decimal("0")
        else:
            self._trace(result, "Tier", "Matched tier", f"{percent}%")
        result.percent = percent

        # 5) Fee
        try:
            fee_amount = compute_fee(subtotal, percent)
        except (InvalidOperation, Overflow):
            return self._noop(result, "Fee", "Fee amount out of range")
        self._trace(result, "Fee", f"{subtotal} × {percent}%", str(fee_amount))

        result.operations.append(build_operation(fee_line_id, fee_amount))
        logger.info("Fee line %s set to %s", fee_line_id, fee_amount)

        return result

    def run_input(self, payload: dict) -> dict:
        """Decode a host input document, run, and encode the output document."""
        return self.run(Cart.from_input(payload)).to_output_dict()

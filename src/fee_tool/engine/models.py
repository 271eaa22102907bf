"""
Data models for the fee engine.

Uses dataclasses for structured, type-safe data representation.
Cart-side models are read-only views decoded from the host's
cart-transform input; the result encodes back into its operation envelope.
"""
from dataclasses import dataclass, field
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional, Union


TWO_PLACES = Decimal("0.01")

# Digits kept exact in money arithmetic; larger results trap.
MONEY_PRECISION = 100
MONEY_CONTEXT = Context(prec=MONEY_PRECISION, rounding=ROUND_HALF_UP)


def parse_quantity(raw) -> int:
    """Parse a host line quantity; anything but a whole number counts as zero."""
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return 0


def parse_amount(raw) -> Decimal:
    """Parse a host money amount; anything unparseable counts as zero."""
    if raw is None:
        return Decimal("0")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


def _object(value) -> dict:
    return value if isinstance(value, dict) else {}


def _attribute_value(attr: Optional[dict]) -> Optional[str]:
    """Read `{"value": ...}` cart attribute objects (null-safe)."""
    if not isinstance(attr, dict):
        return None
    value = attr.get("value")
    return value if isinstance(value, str) else None


@dataclass
class TraceStep:
    """A single step in the fee resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class FeeRule:
    """One tier: a subtotal range mapped to a fee percentage."""
    min: Decimal
    max: Decimal
    percent: Decimal

    def contains(self, subtotal: Decimal) -> bool:
        return self.min <= subtotal <= self.max


@dataclass(frozen=True)
class ProductVariant:
    """Merchandise that is a product variant."""
    id: str


@dataclass(frozen=True)
class OtherMerchandise:
    """Any merchandise kind the engine does not inspect."""
    typename: str = "Other"


Merchandise = Union[ProductVariant, OtherMerchandise]


@dataclass(frozen=True)
class CartLine:
    """A cart line as supplied by the host."""
    id: str
    quantity: int
    unit_price: Decimal
    merchandise: Merchandise

    @property
    def variant_id(self) -> Optional[str]:
        if isinstance(self.merchandise, ProductVariant):
            return self.merchandise.id
        return None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @classmethod
    def from_input(cls, data: dict) -> 'CartLine':
        """
        Create a CartLine from one entry of `cart.lines`.

        Never raises: a malformed quantity counts as 0, and merchandise or
        cost that is not an object decodes as if it were missing.
        """
        if not isinstance(data, dict):
            data = {}

        merch = _object(data.get("merchandise"))
        typename = str(merch.get("__typename") or "Other")
        if typename == "ProductVariant":
            merchandise = ProductVariant(id=str(merch.get("id", "")))
        else:
            merchandise = OtherMerchandise(typename=typename)

        per_qty = _object(_object(data.get("cost")).get("amountPerQuantity"))

        return cls(
            id=str(data.get("id", "")),
            quantity=parse_quantity(data.get("quantity")),
            unit_price=parse_amount(per_qty.get("amount")),
            merchandise=merchandise,
        )


@dataclass
class Cart:
    """Snapshot of the cart for one evaluation."""
    lines: list[CartLine] = field(default_factory=list)
    fee_rules: Optional[str] = None
    fee_variant_gid: Optional[str] = None

    @classmethod
    def from_input(cls, payload: dict) -> 'Cart':
        """
        Decode the host's cart-transform input document.

        Raises ValueError if the document has no `cart` object.
        """
        cart = payload.get("cart") if isinstance(payload, dict) else None
        if not isinstance(cart, dict):
            raise ValueError("Input document has no 'cart' object")

        lines = cart.get("lines")
        if not isinstance(lines, list):
            lines = []

        return cls(
            lines=[CartLine.from_input(line) for line in lines],
            fee_rules=_attribute_value(cart.get("feeRules")),
            fee_variant_gid=_attribute_value(cart.get("feeVariantGid")),
        )


@dataclass(frozen=True)
class LineUpdateOperation:
    """Set the per-unit price of a cart line to a fixed amount."""
    cart_line_id: str
    fixed_price_per_unit: Decimal

    def to_output_dict(self) -> dict:
        with localcontext(MONEY_CONTEXT):
            amount = self.fixed_price_per_unit.quantize(TWO_PLACES)
        return {
            "lineUpdate": {
                "cartLineId": self.cart_line_id,
                "price": {
                    "adjustment": {
                        "fixedPricePerUnit": {
                            "amount": str(amount),
                        }
                    }
                },
            }
        }


@dataclass
class TransformResult:
    """Complete result of one cart evaluation."""
    operations: list[LineUpdateOperation] = field(default_factory=list)
    subtotal: Optional[Decimal] = None
    percent: Optional[Decimal] = None
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.operations

    def add_trace(self, step: str, description: str, value: str = None) -> TraceStep:
        """Add a step to the result-level trace."""
        entry = TraceStep(step=step, description=description, value=value)
        self.trace.append(entry)
        return entry

    def add_warning(self, warning: str):
        """Add a result-level warning."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable result trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_output_dict(self) -> dict:
        """Encode into the host's `{"operations": [...]}` envelope."""
        return {"operations": [op.to_output_dict() for op in self.operations]}

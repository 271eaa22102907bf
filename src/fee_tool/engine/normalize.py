"""
Normalization of merchant-entered configuration values.

Applied before values are written to cart attributes, so the engine
always sees a canonical variant gid and comment-free rule text.
"""
from .rule_parser import is_rule_line

VARIANT_GID_PREFIX = "gid://shopify/ProductVariant/"


def safe_trim(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_variant_gid(raw) -> str:
    """
    Canonicalize a variant reference.

    "4703..." -> "gid://shopify/ProductVariant/4703...", gids pass through,
    anything else becomes "".
    """
    value = safe_trim(raw)
    if not value:
        return ""
    if value.startswith(VARIANT_GID_PREFIX):
        return value
    if value.isascii() and value.isdigit():
        return f"{VARIANT_GID_PREFIX}{value}"
    return ""


def normalize_rules(raw) -> str:
    """Strip blank and comment lines from rule text."""
    return "\n".join(
        line.strip() for line in safe_trim(raw).splitlines() if is_rule_line(line)
    )


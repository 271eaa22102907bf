"""
Rule Parser - Parses tiered fee rules from their text format.

Format, one tier per line:

    # comment
    MIN-MAX=PERCENT%        e.g.  0-100=5
                                  100.01-500=3.5%

Malformed lines are dropped rather than reported, so one bad line
never disables an otherwise valid configuration.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from .models import FeeRule

logger = logging.getLogger(__name__)

COMMENT_PREFIX = '#'


def parse_decimal(value: str) -> Optional[Decimal]:
    """Parse a decimal token (None if empty, unparseable or NaN)."""
    value = value.strip()
    if not value or '_' in value:
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        return None
    if number.is_nan():
        return None
    return number


def is_rule_line(line: str) -> bool:
    """True for lines that carry a rule (not blank, not a comment)."""
    line = line.strip()
    return bool(line) and not line.startswith(COMMENT_PREFIX)


def parse_rule_line(line: str) -> Optional[FeeRule]:
    """
    Parse a single `MIN-MAX=PERCENT%` line.

    Returns None if the line is malformed or violates max >= min / percent >= 0.
    """
    range_part, sep, pct_part = line.strip().partition('=')
    if not sep:
        return None

    min_s, sep, max_s = range_part.partition('-')
    if not sep:
        return None

    min_v = parse_decimal(min_s)
    max_v = parse_decimal(max_s)
    percent = parse_decimal(pct_part.strip().rstrip('%'))

    if min_v is None or max_v is None or percent is None:
        return None
    if max_v < min_v or percent < 0:
        return None

    return FeeRule(min=min_v, max=max_v, percent=percent)


def parse_rules(text: Optional[str]) -> list[FeeRule]:
    """Parse rule text into tiers, preserving authored order."""
    rules = []
    if not text:
        return rules

    for line_num, raw_line in enumerate(text.splitlines(), start=1):
        if not is_rule_line(raw_line):
            continue

        rule = parse_rule_line(raw_line)
        if rule is None:
            logger.debug("Dropped malformed fee rule on line %d: %r", line_num, raw_line.strip())
            continue
        rules.append(rule)

    return rules


def format_rule(rule: FeeRule) -> str:
    return f"{rule.min:f}-{rule.max:f}={rule.percent:f}%"


def format_rules(rules: list[FeeRule]) -> str:
    """Render tiers back into the rule text format."""
    return "\n".join(format_rule(r) for r in rules)

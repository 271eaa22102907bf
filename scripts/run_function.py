#!/usr/bin/env python
"""
Run the cart-transform function on an input document.

Usage:
    python scripts/run_function.py input.json
    python scripts/run_function.py < input.json
    python scripts/run_function.py --trace input.json
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from fee_tool.config.settings import get_settings
from fee_tool.engine import Cart, FeeEngine


def main():
    parser = argparse.ArgumentParser(description="Evaluate a cart-transform input document")
    parser.add_argument('input', nargs='?', help="Input JSON file (default: stdin)")
    parser.add_argument('--trace', action='store_true', help="Print the resolution trace to stderr")
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    if args.input:
        with open(args.input, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    else:
        payload = json.load(sys.stdin)

    try:
        cart = Cart.from_input(payload)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    result = FeeEngine().run(cart)
    if args.trace:
        print(result.get_trace_text(), file=sys.stderr)

    json.dump(result.to_output_dict(), sys.stdout)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()

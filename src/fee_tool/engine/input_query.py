"""
Input query for the cart-transform function.

The host resolves this query against the cart and hands the result to
`FeeEngine.run_input`. The attribute aliases must match what
`Cart.from_input` reads.
"""
from ..config.settings import Settings, get_settings

INPUT_QUERY_TEMPLATE = """query CartTransformRunInput {{
  cart {{
    feeRules: attribute(key: "{rules_attribute}") {{
      value
    }}
    feeVariantGid: attribute(key: "{fee_variant_attribute}") {{
      value
    }}
    lines {{
      id
      quantity
      cost {{
        amountPerQuantity {{
          amount
        }}
      }}
      merchandise {{
        __typename
        ... on ProductVariant {{
          id
        }}
      }}
    }}
  }}
}}
"""


def build_input_query(settings: Settings = None) -> str:
    """Render the input query with the configured attribute keys."""
    settings = settings or get_settings()
    return INPUT_QUERY_TEMPLATE.format(
        rules_attribute=settings.rules_attribute,
        fee_variant_attribute=settings.fee_variant_attribute,
    )

"""
Generate golden test cases by running the current fee engine on the
cases listed in golden_support.GOLDEN_CASE_INPUTS.
This captures current behavior as a regression baseline; with unchanged
fee logic, regenerating reproduces golden_cases.csv byte for byte.
"""
import pandas as pd

from golden_support import CASE_COLUMNS, CASES_PATH, GOLDEN_CASE_INPUTS, expected_columns
from fee_tool.engine import FeeEngine


def generate_golden_cases():
    engine = FeeEngine()

    cases = []
    for case_id, rules, fee_variant_gid, lines in GOLDEN_CASE_INPUTS:
        case = {
            'case_id': case_id,
            'rules': rules,
            'fee_variant_gid': fee_variant_gid,
            'lines': lines,
        }
        case.update(expected_columns(engine, case))
        cases.append(case)

    # Write to CSV
    df = pd.DataFrame(cases, columns=CASE_COLUMNS)
    df.to_csv(CASES_PATH, index=False, lineterminator='\n')
    print(f"Generated {len(cases)} golden test cases")
    print(f"Output: {CASES_PATH}")
    print()
    print("Sample cases:")
    print(df.head(10).to_string(index=False))


if __name__ == "__main__":
    generate_golden_cases()

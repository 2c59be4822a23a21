"""
Basic usage example for BallotBase.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ballotbase import Config, FieldSelection, assemble, export_voters, write_voter_record


VOTERS = [
    {
        "first_name": "JANE",
        "last_name": "DOE",
        "house": "123",
        "street_name": "MAIN ST",
        "residence_city": "BRONX",
        "zip_code": "10451",
        "enrolled_party": "DEM",
        "date_of_birth": "19800102",
    },
    {
        "first_name": "JOHN",
        "last_name": "SMITH",
        "house": "456",
        "street_name": "OAK AVE",
        "residence_city": "BRONX",
        "zip_code": "10452",
        "enrolled_party": "REP",
        "date_of_birth": "19751120",
    },
]


def main():
    """
    Basic usage example.
    """
    cfg = Config()
    cfg.export.output_dir = "./out"

    # Pick columns the way the export dialog does
    selection = FieldSelection()
    selection.toggle_category("personal")
    selection.toggle("zip_code")

    table = assemble(VOTERS, selection)
    print(f"Columns: {', '.join(table.headers)}")
    for row in table.rows:
        print(f"  {' | '.join(row)}")

    try:
        csv_path = export_voters(VOTERS, selection, "Bronx Canvass", "csv", cfg)
        print(f"Wrote CSV to {csv_path}")

        pdf_path = export_voters(VOTERS, selection, "Bronx Canvass", "pdf", cfg)
        print(f"Wrote PDF to {pdf_path}")

        sheet_path = write_voter_record(VOTERS[0], cfg.export.output_dir, cfg.pdf)
        print(f"Wrote voter record to {sheet_path}")
    except Exception as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    main()

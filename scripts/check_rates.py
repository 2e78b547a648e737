"""Validate the rate tables file and print a one-line summary per year."""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings
from household_tax.calculators.tax_data import load_rate_tables
from household_tax.errors import RateTableError

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main() -> None:
    """Load every year in the rates file and report what it holds."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("rates_file", nargs="?", default=settings.rates_file)
    args = parser.parse_args()

    try:
        tables = load_rate_tables(args.rates_file)
    except RateTableError as e:
        logger.error("Invalid rates file %s: %s", args.rates_file, e)
        sys.exit(1)

    for year in sorted(tables):
        table = tables[year]
        logger.info(
            "%s: %d brackets, top rate %s, %d repayment tiers, caps %s / %s",
            year,
            len(table.brackets),
            table.brackets[-1].rate,
            len(table.repayment_tiers),
            table.caps.concessional,
            table.caps.non_concessional,
        )
    logger.info("Validated %d rate tables.", len(tables))


if __name__ == "__main__":
    main()

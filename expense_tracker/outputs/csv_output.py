# expense_tracker/outputs/csv_output.py

import os
import csv
import logging
from decimal import Decimal
from expense_tracker.outputs.base import BaseOutput

logger = logging.getLogger(__name__)

HEADER = ['id', 'date', 'type', 'category', 'amount', 'description']


class CSVOutput(BaseOutput):
    """
    Writes all stored transactions to a single transactions.csv file,
    sorted by date (oldest to latest) and then by id.
    """
    def __init__(self, config):
        self.config     = config
        self.output_dir = config.get('output_dir', 'data')

    def write(self, transactions):
        if not transactions:
            logger.info("No transactions to write.")
            return None

        os.makedirs(self.output_dir, exist_ok=True)
        ordered = sorted(transactions, key=lambda tx: (str(tx.date), tx.id))
        out_path = os.path.join(self.output_dir, 'transactions.csv')

        with open(out_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)
            for tx in ordered:
                writer.writerow([
                    tx.id,
                    tx.date,
                    tx.type,
                    tx.category,
                    f"{Decimal(str(tx.amount)):.2f}",
                    tx.description or '',
                ])

        logger.info("Written %d transactions to %s", len(ordered), out_path)
        return out_path

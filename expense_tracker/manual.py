# expense_tracker/manual.py
from datetime import date

import yaml

from expense_tracker.schemas import TransactionPayload

_REQUIRED_FIELDS = ("type", "amount", "date")


def load_manual_transactions(path):
    """Load transactions to import from a YAML file.

    The file holds a list of mappings with ``type``, ``amount`` and ``date``
    and optional ``category`` and ``description``.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or []

    payloads = []
    for entry in data:
        for field in _REQUIRED_FIELDS:
            if entry.get(field) is None:
                raise ValueError(f"Missing '{field}' in manual entry: {entry}")
        entry_date = entry['date']
        if isinstance(entry_date, date):
            entry_date = entry_date.isoformat()
        payloads.append(
            TransactionPayload(
                type=str(entry['type']),
                category=str(entry.get('category') or 'uncategorized'),
                amount=float(entry['amount']),
                date=str(entry_date),
                description=_optional_str(entry.get('description')),
            )
        )
    return payloads


def _optional_str(value):
    return None if value is None else str(value)

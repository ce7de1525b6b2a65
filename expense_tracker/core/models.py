# expense_tracker/core/models.py
from dataclasses import dataclass


@dataclass
class Transaction:
    id: int
    type: str
    category: str
    amount: float
    date: str
    description: str = None


@dataclass
class Summary:
    total_income: float
    total_expense: float
    balance: float

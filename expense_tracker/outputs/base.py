# expense_tracker/outputs/base.py
from abc import ABC, abstractmethod

class BaseOutput(ABC):
    @abstractmethod
    def write(self, transactions):
        """Write stored transactions to the chosen sink and return its location."""
        pass

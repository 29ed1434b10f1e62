# apps/discounts/stores/base.py
from abc import ABC, abstractmethod


class DiscountStore(ABC):
    name: str = "base"

    def __init__(self, config=None):
        self.config = config or {}

    @abstractmethod
    def find_by_code(self, code):
        """Return the Discount with this code, or None."""
        raise NotImplementedError

    @abstractmethod
    def find_automatic_active(self, now):
        """Automatic discounts stored as active whose window covers ``now``."""
        raise NotImplementedError

    @abstractmethod
    def get(self, pk):
        """Return the Discount with this id, or None."""
        raise NotImplementedError

    @abstractmethod
    def all(self):
        raise NotImplementedError

    @abstractmethod
    def save(self, discount, update_fields=None):
        raise NotImplementedError

    @abstractmethod
    def increment_usage(self, pk, savings):
        """
        Atomically add one use and ``savings`` to the persisted counters.
        Return the updated Discount, or None if ``pk`` does not exist.
        """
        raise NotImplementedError

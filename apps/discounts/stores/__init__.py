# apps/discounts/stores/__init__.py
import threading

from django.conf import settings
from .base import DiscountStore
from .memory import MemoryDiscountStore
from .orm import OrmDiscountStore

_memory_store = None
_memory_lock = threading.Lock()


def get_store(name=None) -> DiscountStore:
    global _memory_store

    cfg = getattr(settings, "DISCOUNTS", {}) or {}
    name = (name or cfg.get("STORE") or "orm").strip().lower()

    if name == "memory":
        # one shared instance per process, otherwise writes would vanish
        with _memory_lock:
            if _memory_store is None:
                _memory_store = MemoryDiscountStore(cfg)
        return _memory_store

    return OrmDiscountStore(cfg)

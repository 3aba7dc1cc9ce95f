"""
store — magazyny dokumentów sprawy (CaseStore).

  MemoryStore   — w pamięci (testy, przebiegi jednorazowe)
  JsonStore     — plik JSON w katalogu danych (domyślny)
  PostgresStore — PostgreSQL, schemat db/schema.sql
"""

from .base import CaseStore, check_units
from .json_store import JsonStore
from .memory import MemoryStore
from .postgres import PostgresStore

__all__ = [
    "CaseStore",
    "check_units",
    "JsonStore",
    "MemoryStore",
    "PostgresStore",
]

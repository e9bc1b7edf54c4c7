# almoxarifado/infra/db.py
"""
Utilidades de conexão SQLite.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator


def agora_iso() -> str:
    """Timestamp UTC no formato ISO 8601 usado em created_at/updated_at."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@contextmanager
def connect(db_path: str, timeout: float = 10.0) -> Iterator[sqlite3.Connection]:
    """
    Context manager para abrir conexão SQLite com:
    - row_factory = sqlite3.Row
    - todas as instruções do bloco na mesma transação
    - commit ao sair (rollback em caso de exceção)

    `timeout` é a espera pelo lock de escrita de outro processo.
    """
    conn = sqlite3.connect(db_path, timeout=timeout)
    try:
        conn.row_factory = sqlite3.Row
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

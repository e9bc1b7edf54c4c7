# almoxarifado/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabelas base (params, estoque)
V2: índices de consulta por nome e local
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Parâmetros K/V
    """
    CREATE TABLE IF NOT EXISTS params (
        chave TEXT PRIMARY KEY,
        valor TEXT
    );
    """,
    # Itens do almoxarifado (sku é a chave de reconciliação)
    """
    CREATE TABLE IF NOT EXISTS estoque (
        item_id TEXT PRIMARY KEY,
        sku TEXT NOT NULL UNIQUE CHECK (sku <> ''),
        nome TEXT NOT NULL CHECK (nome <> ''),
        descricao TEXT,
        local TEXT NOT NULL CHECK (local <> ''),
        quantidade INTEGER NOT NULL DEFAULT 0 CHECK (quantidade >= 0),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
]

SCHEMA_V2: List[str] = [
    "CREATE INDEX IF NOT EXISTS ix_estoque_nome ON estoque(nome);",
    "CREATE INDEX IF NOT EXISTS ix_estoque_local ON estoque(local);",
]


def _apply(conn, statements: List[str]) -> None:
    for sql in statements:
        conn.executescript(sql)


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply(conn, SCHEMA_V1)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply(conn, SCHEMA_V2)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2

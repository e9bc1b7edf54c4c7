# almoxarifado/usecases/relatorios.py
"""
Relatórios de estoque:
- resumo geral (itens, unidades, estoque baixo, totais por local)
- itens com estoque baixo (limite configurável)
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from almoxarifado.config import DB_PATH, DEFAULTS
from almoxarifado.infra.migrations import apply_migrations
from almoxarifado.infra.repositories import EstoqueRepo, ParamsRepo
from almoxarifado.infra.logger import log_system_event


_COLUNAS = ["sku", "nome", "descricao", "local", "quantidade"]


def _limite_estoque_baixo(db_path: str, limite: Optional[int]) -> int:
    if limite is not None:
        return int(limite)
    apply_migrations(db_path)
    return ParamsRepo(db_path).get_int("estoque_baixo", DEFAULTS.estoque_baixo)


def _carregar_df(db_path: str) -> pd.DataFrame:
    apply_migrations(db_path)
    itens = EstoqueRepo(db_path).listar_todos()
    df = pd.DataFrame([asdict(i) for i in itens], columns=_COLUNAS)
    df["quantidade"] = df["quantidade"].fillna(0).astype(int)
    return df


# ----------------------
# 1) Resumo
# ----------------------

def relatorio_resumo(db_path: str = DB_PATH, limite: Optional[int] = None) -> Dict[str, Any]:
    """Totais do estoque e agrupamento por local."""
    log_system_event("relatorio_resumo_start", {"db_path": db_path})
    limite = _limite_estoque_baixo(db_path, limite)
    df = _carregar_df(db_path)

    por_local = (
        df.groupby("local", sort=True)
        .agg(itens=("sku", "count"), unidades=("quantidade", "sum"))
        .reset_index()
    )
    out = {
        "total_itens": int(len(df)),
        "total_unidades": int(df["quantidade"].sum()),
        "limite_estoque_baixo": limite,
        "itens_estoque_baixo": int((df["quantidade"] <= limite).sum()) if limite > 0 else 0,
        "por_local": [
            {"local": r["local"], "itens": int(r["itens"]), "unidades": int(r["unidades"])}
            for r in por_local.to_dict("records")
        ],
    }
    log_system_event("relatorio_resumo_success", {"itens": out["total_itens"], "locais": len(out["por_local"])})
    return out


# ----------------------
# 2) Estoque baixo
# ----------------------

def relatorio_estoque_baixo(limite: Optional[int] = None, db_path: str = DB_PATH) -> List[Dict[str, Any]]:
    """Itens com quantidade <= limite, do menor para o maior."""
    limite = _limite_estoque_baixo(db_path, limite)
    log_system_event("relatorio_estoque_baixo_start", {"limite": limite})
    df = _carregar_df(db_path)
    if limite <= 0 or df.empty:
        return []
    baixo = df[df["quantidade"] <= limite].sort_values(["quantidade", "nome"], kind="stable")
    return [
        {
            "sku": r["sku"],
            "nome": r["nome"],
            "local": r["local"],
            "quantidade": int(r["quantidade"]),
        }
        for r in baixo.to_dict("records")
    ]

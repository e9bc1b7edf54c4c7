"""
Parsing de arquivos CSV de importação de estoque.

Formato esperado: texto separado por vírgula, uma linha de cabeçalho e
linhas de dados. Cabeçalho obrigatório (sem distinção de maiúsculas e em
qualquer ordem): SKU, NOME, LOCAL, QUANTIDADE; DESCRICAO é opcional e
colunas extras são ignoradas.

Não há suporte a aspas/escape: cada linha é simplesmente dividida nas
vírgulas. Linhas sem SKU, nome ou local são descartadas em silêncio.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from almoxarifado.domain.models import LinhaImportacao


COLUNAS_OBRIGATORIAS = ("sku", "nome", "local", "quantidade")
COLUNAS_OPCIONAIS = ("descricao",)

_QUEBRA_LINHA = re.compile(r"\r\n|\r|\n")


@dataclass
class ResultadoParse:
    linhas: List[LinhaImportacao] = field(default_factory=list)
    descartadas: int = 0
    cabecalho_valido: bool = False


def parse_quantidade(raw: Any) -> int:
    """Interpreta uma quantidade no formato brasileiro.

    Remove os pontos (separador de milhar), troca a vírgula por ponto
    (separador decimal) e converte. Valores não numéricos viram 0; o
    resultado é truncado para baixo e nunca negativo.

    Exemplos:
        "1.234,5" → 1234
        "-5"      → 0
        "abc"     → 0
    """
    if raw is None:
        return 0
    s = str(raw).strip().replace(".", "").replace(",", ".")
    # float() aceita "1_000"; aqui isso não é número
    if not s or "_" in s:
        return 0
    try:
        num = float(s)
    except ValueError:
        return 0
    if not math.isfinite(num):
        return 0
    return max(0, math.floor(num))


def _indice(cabecalho: List[str], nome: str) -> int:
    try:
        return cabecalho.index(nome)
    except ValueError:
        return -1


def _celula(cols: List[str], idx: int) -> str:
    if idx < 0 or idx >= len(cols):
        return ""
    return cols[idx]


def parse_csv_detalhado(texto: Optional[str]) -> ResultadoParse:
    """Como `parse_csv_estoque`, mas informa quantas linhas foram descartadas."""
    if not texto:
        return ResultadoParse()

    linhas = [ln.strip() for ln in _QUEBRA_LINHA.split(str(texto))]
    linhas = [ln for ln in linhas if ln]
    if not linhas:
        return ResultadoParse()

    cabecalho = [h.strip() for h in linhas[0].lower().split(",")]
    idx: Dict[str, int] = {
        nome: _indice(cabecalho, nome)
        for nome in COLUNAS_OBRIGATORIAS + COLUNAS_OPCIONAIS
    }
    if any(idx[nome] == -1 for nome in COLUNAS_OBRIGATORIAS):
        return ResultadoParse()

    out = ResultadoParse(cabecalho_valido=True)
    for linha in linhas[1:]:
        cols = [c.strip() for c in linha.split(",")]
        sku = _celula(cols, idx["sku"])
        nome = _celula(cols, idx["nome"])
        local = _celula(cols, idx["local"])
        if not sku or not nome or not local:
            out.descartadas += 1
            continue
        out.linhas.append(
            LinhaImportacao(
                sku=sku,
                nome=nome,
                local=local,
                quantidade=parse_quantidade(_celula(cols, idx["quantidade"])),
                descricao=_celula(cols, idx["descricao"]) or None,
            )
        )
    return out


def parse_csv_estoque(texto: Optional[str]) -> List[LinhaImportacao]:
    """Converte o texto de um CSV em linhas de importação.

    Nunca levanta exceção. Retorna lista vazia quando o texto não tem
    linhas, quando falta alguma coluna obrigatória no cabeçalho ou quando
    nenhuma linha de dados é válida; o chamador trata os três casos como
    "arquivo vazio ou formato inválido".
    """
    return parse_csv_detalhado(texto).linhas


def ler_arquivo_csv(path: Union[str, Path]) -> str:
    """Lê o arquivo em UTF-8 (aceita BOM)."""
    return Path(path).read_text(encoding="utf-8-sig")

"""
Exceções do almoxarifado.

O planejador de reconciliação é total e nunca levanta erros; apenas a
leitura do arquivo, a camada de armazenamento e os casos de uso produzem
as condições abaixo.
"""

from __future__ import annotations


class AlmoxarifadoError(Exception):
    """Erro base exibido ao operador como uma única mensagem."""


class ArquivoInvalidoError(AlmoxarifadoError):
    """Arquivo vazio ou com cabeçalho sem as colunas obrigatórias."""

    def __init__(self, arquivo: str = "", mensagem: str = "Arquivo vazio ou formato inválido"):
        self.arquivo = arquivo
        super().__init__(f"{mensagem}: {arquivo}" if arquivo else mensagem)


class ErroArmazenamento(AlmoxarifadoError):
    """Falha de leitura/escrita no banco de estoque."""


class ItemNaoEncontradoError(AlmoxarifadoError):
    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"SKU não encontrado no estoque: {sku}")

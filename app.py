# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db almoxarifado.db
  python app.py params show
  python app.py listar --busca parafuso
  python app.py importar estoque.csv --estrategia entrada
  python app.py ajustar SKU-001 --delta -1
  python app.py exportar estoque_completo.csv
"""

from almoxarifado.adapters.cli import main

if __name__ == "__main__":
    main()

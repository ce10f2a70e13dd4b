# src/dcd/core/__init__.py
"""
Core do dcd.

Componentes principais:
    - config     → settings do executor (merge, validação, hashing)
    - pipeline   → definição, eventos e estado de um run
    - preflight  → verificações do repositório git antes do run
    - metadata   → component e git sha do build
    - engine     → execução sequencial dos Steps em stream de eventos
    - backend    → alocação de build IDs e persistência de runs
    - recording  → gravação do histórico de eventos no backend

Limites explícitos:
    - Não depende da CLI
    - Não realiza retry, paralelismo entre Steps nem cancelamento
"""

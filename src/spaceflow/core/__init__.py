"""
Core do Spaceflow.

Este pacote contém a implementação canônica do engine de grafos do
Spaceflow, independente de UI e de qualquer transporte.

Componentes principais:
    - config       → defaults embarcados, merge e hashing de configuração
    - graph        → tipos canônicos, Space e catálogo de tipos de módulo
    - engine       → validator, ciclos, invalidação, scheduler, store e runner
    - traceability → log estruturado do Space
    - errors       → payloads de rejeição de conexão (valores, não exceções)
    - exceptions   → exceções tipadas para erros de programação e integridade

Princípios fundamentais:
    - Nenhuma decisão silenciosa: rejeições são valores explícitos
    - Estado e mutações são sempre rastreáveis no log do Space

Limites explícitos:
    - Não executa lógica de módulos
    - Não depende de frameworks web, UI ou serviços externos
"""

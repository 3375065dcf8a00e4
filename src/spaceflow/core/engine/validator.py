# src/spaceflow/core/engine/validator.py
"""
Validator de propostas de conexão.

Este módulo decide se uma aresta `source.port → target.port` pode ser
adicionada ao Space atual. A validação é pura: não muta o grafo e
devolve a `Connection` resultante ou um `ConnectionErrorPayload`.

Ordem fixa de verificação (o primeiro erro vence):
    1. MODULE_NOT_FOUND     → algum dos módulos não existe
    2. MODULE_NOT_DONE      → o módulo de origem não está `done`
    3. EMPTY_OUTPUT         → a porta de origem não existe ou não tem tipo
    4. PORT_NOT_FOUND       → a porta de destino não é uma entrada do alvo
    5. TYPE_MISMATCH        → o tipo de origem não é aceito pelo destino
    6. MODULE_RUNNING       → o módulo de destino está em execução
    7. CIRCULAR_DEPENDENCY  → a aresta fecharia um ciclo

Decisões arquiteturais:
    - Verificações mais baratas e mais específicas rodam primeiro, para
      que a mensagem exibida ao usuário seja a mais acionável
    - O validator não gera ids: recebe o id da conexão candidata
    - Inserir a conexão é responsabilidade do GraphStore

Limites explícitos:
    - Não muta o Space
    - Não atualiza flags `connected`
    - Não rejeita conexões duplicadas (não fazem parte dos sete códigos)
"""

from __future__ import annotations

from typing import Union

from spaceflow.core import errors
from spaceflow.core.errors import ConnectionErrorPayload
from spaceflow.core.graph.space import Space
from spaceflow.core.graph.types import Connection, ModuleStatus

from .cycles import would_create_cycle


ValidationResult = Union[Connection, ConnectionErrorPayload]


def validate_connection(
    space: Space,
    *,
    source_module_id: str,
    source_port_id: str,
    target_module_id: str,
    target_port_id: str,
    connection_id: str = "",
) -> ValidationResult:
    """
    Valida uma proposta de conexão contra o estado atual do Space.

    Args:
        space (Space): Grafo atual.
        source_module_id (str): Módulo de origem.
        source_port_id (str): Porta de saída do módulo de origem.
        target_module_id (str): Módulo de destino.
        target_port_id (str): Porta de entrada do módulo de destino.
        connection_id (str): Id a atribuir à conexão em caso de sucesso.

    Returns:
        Connection | ConnectionErrorPayload: A aresta proposta, ou o
        primeiro erro encontrado na ordem canônica.
    """
    source = space.get_module(source_module_id)
    target = space.get_module(target_module_id)

    if source is None or target is None:
        missing = [
            mid
            for mid, m in ((source_module_id, source), (target_module_id, target))
            if m is None
        ]
        return errors.module_not_found(missing_module_ids=missing)

    if source.status != ModuleStatus.DONE:
        return errors.module_not_done(
            source_module_id=source.id, status=source.status.value
        )

    source_port = source.output_port(source_port_id)
    if source_port is None or source_port.data_type is None:
        return errors.empty_output(
            source_module_id=source.id, source_port_id=source_port_id
        )

    target_port = target.input_port(target_port_id)
    if target_port is None:
        return errors.port_not_found(
            target_module_id=target.id, target_port_id=target_port_id
        )

    if not target_port.accepts(source_port.data_type):
        return errors.type_mismatch(
            data_type=source_port.data_type.value,
            accepted_types=[t.value for t in target_port.accepted_types],
        )

    if target.status == ModuleStatus.RUNNING:
        return errors.module_running(target_module_id=target.id)

    if would_create_cycle(space.connections, source.id, target.id):
        return errors.circular_dependency(
            source_module_id=source.id, target_module_id=target.id
        )

    return Connection(
        id=connection_id,
        source_module_id=source.id,
        source_port_id=source_port.id,
        target_module_id=target.id,
        target_port_id=target_port.id,
        data_type=source_port.data_type,
    )

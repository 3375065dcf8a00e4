# src/spaceflow/core/engine/store.py
"""
Graph Store — container mutável de um Space.

Este módulo define o `GraphStore`, a única porta de entrada para mutar o
grafo de um workspace. Cada instância possui exatamente um Space, o
catálogo de tipos de módulo resolvido da configuração, o log do Space e
a lista de observadores (UI) notificados após cada mutação.

Responsabilidades do módulo:
    - CRUD de módulos e conexões sobre o Space atual
    - Aplicar o validator antes de inserir qualquer conexão
    - Manter o flag derivado `connected` das portas
    - Disparar a invalidação transitiva em regressões de status
    - Expor snapshot/restore serializáveis e sem perdas
    - Registrar cada mutação no SpaceLog e notificar observadores

Decisões arquiteturais:
    - Não existe Space global: o chamador mantém a referência ao store
    - Mutações são síncronas e atômicas entre si (disciplina
      single-threaded); a última escrita vence
    - Observadores são chamados depois que a mutação foi aplicada;
      exceções de observadores propagam ao chamador
    - Toda regressão de status usa a mesma propagação transitiva

Invariantes:
    - conexões sempre referenciam módulos e portas existentes
    - o grafo de conexões é acíclico
    - o tipo de origem de cada conexão é aceito pelo destino
    - `connected` reflete exatamente as conexões existentes

Limites explícitos:
    - Não executa lógica de módulos (ver FlowRunner)
    - Não persiste em disco (ver spaceflow.persistence)
    - Não cancela execuções em andamento
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union
from uuid import uuid4

from spaceflow.core.config import compute_config_hash, load_engine_config
from spaceflow.core.errors import ConnectionErrorPayload
from spaceflow.core.exceptions import ImmutableFieldError, UnknownModuleError
from spaceflow.core.graph.catalog import ModuleCatalog
from spaceflow.core.graph.space import Space
from spaceflow.core.graph.types import (
    Connection,
    ERROR_STATUSES,
    Module,
    ModuleStatus,
    PortDirection,
    Position,
    Size,
)
from spaceflow.core.traceability.log import LogLevel, SpaceLog, parse_entries

from .invalidation import downstream_of, invalidate_downstream
from .scheduler import plan_execution
from .validator import validate_connection


Listener = Callable[[Dict[str, Any]], None]

SNAPSHOT_SCHEMA_VERSION = 1

MUTABLE_MODULE_FIELDS = frozenset(
    {"name", "status", "inputs", "outputs", "error_message", "position", "size"}
)
IMMUTABLE_MODULE_FIELDS = frozenset({"id", "kind", "ports", "input_ports", "output_ports"})

# status anterior → regressão quando o módulo volta para idle
_IDLE_REGRESSION_SOURCES = frozenset({ModuleStatus.DONE, ModuleStatus.RUNNING, ModuleStatus.WARNING})

_STATUS_LOG_LEVEL = {
    ModuleStatus.DONE: LogLevel.SUCCESS,
    ModuleStatus.WARNING: LogLevel.WARNING,
    ModuleStatus.ERROR: LogLevel.ERROR,
    ModuleStatus.FATAL_ERROR: LogLevel.ERROR,
}


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


def is_status_regression(previous: ModuleStatus, new: ModuleStatus) -> bool:
    """
    Decide se a transição `previous → new` torna o resultado do módulo
    não confiável para seus descendentes.

    Regressões:
        - done/running/warning → idle
        - qualquer estado não-erro → error/fatal_error
    """
    if new == ModuleStatus.IDLE:
        return previous in _IDLE_REGRESSION_SOURCES
    if new in ERROR_STATUSES:
        return previous not in ERROR_STATUSES
    return False


class GraphStore:
    """
    Container canônico e mutável de um Space.

    Args:
        config: Configuração efetiva já resolvida. Quando omitida, os
            defaults embarcados no pacote são carregados.
        space_id: Id do Space (gerado quando omitido).
        name: Nome exibido do Space.
        configuration: Configuração opaca do workspace (chaves de API,
            preferências); o engine apenas a transporta.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        space_id: Optional[str] = None,
        name: str = "Untitled space",
        configuration: Optional[Dict[str, Any]] = None,
    ):
        self.config: Dict[str, Any] = config if config is not None else load_engine_config()
        self.config_hash: str = compute_config_hash(self.config)
        self.catalog: ModuleCatalog = ModuleCatalog.from_config(self.config)

        logs_cfg = (self.config or {}).get("logs", {}) or {}
        self.log = SpaceLog(max_entries=int(logs_cfg.get("max_entries", 100)))

        self.space = Space(
            id=space_id or _new_id("space"),
            name=name,
            configuration=dict(configuration or {}),
        )
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registra um observador; retorna a função que cancela a inscrição."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, action: str, **details: Any) -> None:
        change = {
            "action": action,
            "space_id": self.space.id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        change.update(details)
        for listener in list(self._listeners):
            listener(change)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def modules(self) -> List[Module]:
        return list(self.space.modules)

    @property
    def connections(self) -> List[Connection]:
        return list(self.space.connections)

    def get_module(self, module_id: str) -> Optional[Module]:
        return self.space.get_module(module_id)

    def _require_module(self, module_id: str) -> Module:
        m = self.space.get_module(module_id)
        if m is None:
            raise UnknownModuleError(
                f"Unknown module id: {module_id}",
                details={"module_id": module_id, "space_id": self.space.id},
            )
        return m

    def execution_order(self) -> List[str]:
        """Ordem topológica dos módulos do Space (ver scheduler)."""
        return plan_execution(self.space.module_ids(), self.space.connections)

    def downstream_of(self, module_id: str) -> List[str]:
        self._require_module(module_id)
        return downstream_of(self.space, module_id)

    def upstream_outputs(self, module_id: str) -> Dict[str, List[Dict[str, Any]]]:
        """
        Outputs dos módulos de origem agrupados pela porta de entrada de
        `module_id`. Portas sem conexão aparecem com lista vazia.
        """
        m = self._require_module(module_id)
        grouped: Dict[str, List[Dict[str, Any]]] = {p.id: [] for p in m.input_ports}
        for c in self.space.incoming(module_id):
            source = self.space.get_module(c.source_module_id)
            if source is not None:
                grouped.setdefault(c.target_port_id, []).append(dict(source.outputs))
        return grouped

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    def _refresh_connected(self) -> None:
        used: Set[Tuple[str, str, PortDirection]] = set()
        for c in self.space.connections:
            used.add((c.source_module_id, c.source_port_id, PortDirection.OUTPUT))
            used.add((c.target_module_id, c.target_port_id, PortDirection.INPUT))

        for m in self.space.modules:
            for p in m.input_ports + m.output_ports:
                p.connected = (m.id, p.id, p.direction) in used

    # ------------------------------------------------------------------
    # Space metadata
    # ------------------------------------------------------------------
    def update_space(
        self,
        *,
        name: Optional[str] = None,
        configuration: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Renomeia o Space e/ou mescla chaves em `configuration`.

        A mescla é rasa: chaves informadas substituem as existentes, as
        demais são mantidas. Chamadas sem alteração não notificam.
        """
        if name is not None and not isinstance(name, str):
            raise TypeError(f"Space name must be a string, got {type(name).__name__}")
        if configuration is not None and not isinstance(configuration, dict):
            raise TypeError(
                f"Space configuration must be a dict, got {type(configuration).__name__}"
            )

        fields: List[str] = []
        if name is not None and name != self.space.name:
            self.space.name = name
            fields.append("name")
        if configuration:
            self.space.configuration = {**self.space.configuration, **configuration}
            fields.append("configuration")
        if not fields:
            return

        self.space.touch()
        self.log.log(
            level=LogLevel.INFO,
            event="space_updated",
            message=f"Space '{self.space.name}' atualizado",
            fields=fields,
            configuration_keys=sorted(configuration or {}),
        )
        self._notify("space_updated", fields=fields)

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------
    def add_module(
        self,
        kind: str,
        position: Union[Position, Dict[str, Any], None] = None,
        size: Union[Size, Dict[str, Any], None] = None,
    ) -> Module:
        """
        Instancia um módulo `idle` com o layout de portas fixado para `kind`.

        Raises:
            UnknownModuleKindError: se `kind` não estiver no catálogo.
        """
        spec = self.catalog.get(kind)
        input_ports, output_ports = spec.build_ports()

        module = Module(
            id=_new_id("module"),
            kind=kind,
            name=spec.name,
            position=_as_position(position),
            size=_as_size(size) if size is not None else spec.default_size(),
            status=ModuleStatus.IDLE,
            inputs={},
            outputs={},
            input_ports=input_ports,
            output_ports=output_ports,
        )

        self.space.modules.append(module)
        self.space.touch()
        self.log.log(
            level=LogLevel.INFO,
            event="module_added",
            message=f"Módulo '{module.name}' adicionado",
            module_id=module.id,
            module_name=module.name,
            kind=kind,
        )
        self._notify("module_added", module_id=module.id, kind=kind)
        return module

    def update_module(self, module_id: str, **changes: Any) -> None:
        """
        Mescla campos no módulo `module_id`.

        Campos mutáveis: name, status, inputs, outputs, error_message,
        position, size. Um id desconhecido é um no-op (registrado como
        warning no log). Regressões de status invalidam transitivamente
        todos os descendentes.

        Raises:
            ImmutableFieldError: ao tentar alterar id, kind ou portas.
            TypeError: para campos que não existem em um módulo.
        """
        for key in changes:
            if key in IMMUTABLE_MODULE_FIELDS:
                raise ImmutableFieldError(
                    f"Module field '{key}' cannot be changed after creation",
                    details={"module_id": module_id, "field": key},
                )
            if key not in MUTABLE_MODULE_FIELDS:
                raise TypeError(f"Unknown module field: {key}")

        module = self.space.get_module(module_id)
        if module is None:
            self.log.log(
                level=LogLevel.WARNING,
                event="module_update_ignored",
                message=f"Atualização ignorada: módulo '{module_id}' não existe",
                module_id=module_id,
            )
            return

        # coerção antes de qualquer escrita: uma atualização inválida não altera nada
        new_status = ModuleStatus(changes["status"]) if "status" in changes else module.status
        position = _as_position(changes["position"]) if "position" in changes else module.position
        size = _as_size(changes["size"]) if "size" in changes else module.size

        previous = module.status
        if "name" in changes:
            module.name = str(changes["name"])
        if "inputs" in changes:
            module.inputs = dict(changes["inputs"] or {})
        if "outputs" in changes:
            module.outputs = dict(changes["outputs"] or {})
        if "error_message" in changes:
            module.error_message = changes["error_message"]
        module.position = position
        module.size = size
        module.status = new_status

        invalidated: List[str] = []
        if module.status != previous:
            self.log.log(
                level=_STATUS_LOG_LEVEL.get(module.status, LogLevel.INFO),
                event="module_status_changed",
                message=f"'{module.name}': {previous.value} → {module.status.value}",
                module_id=module.id,
                module_name=module.name,
                previous=previous.value,
                status=module.status.value,
                error_message=module.error_message,
            )
            if is_status_regression(previous, module.status):
                invalidated = self._invalidate_from(module)

        self.space.touch()
        self._notify(
            "module_updated",
            module_id=module.id,
            fields=sorted(changes),
            invalidated=invalidated,
        )

    def _invalidate_from(self, module: Module) -> List[str]:
        invalidated = invalidate_downstream(self.space, module.id)
        if invalidated:
            self.log.log(
                level=LogLevel.WARNING,
                event="modules_invalidated",
                message=f"{len(invalidated)} módulo(s) dependente(s) de '{module.name}' marcados como inválidos",
                module_id=module.id,
                module_name=module.name,
                invalidated=list(invalidated),
            )
        return invalidated

    def delete_module(self, module_id: str) -> None:
        """
        Remove o módulo e todas as conexões que o tocam.

        Raises:
            UnknownModuleError: se o id não existir.
        """
        module = self._require_module(module_id)
        removed = [c.id for c in self.space.touching(module_id)]
        removed_set = set(removed)

        self.space.connections = [c for c in self.space.connections if c.id not in removed_set]
        self.space.modules = [m for m in self.space.modules if m.id != module_id]
        self._refresh_connected()
        self.space.touch()

        self.log.log(
            level=LogLevel.INFO,
            event="module_deleted",
            message=f"Módulo '{module.name}' removido",
            module_id=module.id,
            module_name=module.name,
            removed_connections=removed,
        )
        self._notify("module_deleted", module_id=module_id, removed_connections=removed)

    def duplicate_module(self, module_id: str) -> Module:
        """
        Cria uma cópia `idle` do módulo com novo id, deslocada em (+50, +50),
        com `inputs` copiados, `outputs` vazios e portas desconectadas.
        """
        original = self._require_module(module_id)
        copy = Module.from_dict(original.to_dict())
        copy.id = _new_id("module")
        copy.position = Position(x=original.position.x + 50, y=original.position.y + 50)
        copy.status = ModuleStatus.IDLE
        copy.outputs = {}
        copy.error_message = None
        for p in copy.input_ports + copy.output_ports:
            p.connected = False

        self.space.modules.append(copy)
        self.space.touch()
        self.log.log(
            level=LogLevel.INFO,
            event="module_duplicated",
            message=f"Módulo '{original.name}' duplicado",
            module_id=copy.id,
            module_name=copy.name,
            source_module_id=original.id,
        )
        self._notify("module_added", module_id=copy.id, kind=copy.kind, duplicated_from=original.id)
        return copy

    # ------------------------------------------------------------------
    # Resets
    # ------------------------------------------------------------------
    def _reset(self, module: Module) -> None:
        module.status = ModuleStatus.IDLE
        module.outputs = {}
        module.error_message = None

    def reset_module(self, module_id: str) -> List[str]:
        """
        Volta o módulo para `idle` (limpando outputs e erro) e marca
        todos os seus descendentes como `invalid`.

        Returns:
            List[str]: Ids invalidados.
        """
        module = self._require_module(module_id)
        self._reset(module)
        self.log.log(
            level=LogLevel.INFO,
            event="module_reset",
            message=f"Módulo '{module.name}' resetado",
            module_id=module.id,
            module_name=module.name,
        )
        invalidated = self._invalidate_from(module)
        self.space.touch()
        self._notify("module_reset", module_id=module_id, invalidated=invalidated)
        return invalidated

    def reset_from_module(self, module_id: str) -> List[str]:
        """
        Reseta o módulo e todos os seus descendentes para `idle`,
        limpando seus outputs.

        Returns:
            List[str]: Ids resetados, começando por `module_id`.
        """
        module = self._require_module(module_id)
        reset_ids = [module.id] + downstream_of(self.space, module.id)
        for mid in reset_ids:
            self._reset(self._require_module(mid))

        self.space.touch()
        self.log.log(
            level=LogLevel.INFO,
            event="modules_reset",
            message=f"{len(reset_ids)} módulo(s) resetado(s) a partir de '{module.name}'",
            module_id=module.id,
            module_name=module.name,
            reset=list(reset_ids),
        )
        self._notify("modules_reset", module_id=module_id, reset=reset_ids)
        return reset_ids

    def reset_all(self) -> None:
        """Volta todos os módulos para `idle`, limpando outputs e erros."""
        for m in self.space.modules:
            self._reset(m)
        self.space.touch()
        self.log.log(
            level=LogLevel.INFO,
            event="space_reset",
            message="Todos os módulos foram resetados",
        )
        self._notify("modules_reset", reset=self.space.module_ids())

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------
    def validate_connection(
        self,
        source_module_id: str,
        source_port_id: str,
        target_module_id: str,
        target_port_id: str,
    ) -> Union[Connection, ConnectionErrorPayload]:
        """Valida a proposta sem mutar o grafo."""
        return validate_connection(
            self.space,
            source_module_id=source_module_id,
            source_port_id=source_port_id,
            target_module_id=target_module_id,
            target_port_id=target_port_id,
        )

    def add_connection(
        self,
        source_module_id: str,
        source_port_id: str,
        target_module_id: str,
        target_port_id: str,
    ) -> Union[Connection, ConnectionErrorPayload]:
        """
        Valida e, em caso de sucesso, insere a conexão.

        Returns:
            Connection | ConnectionErrorPayload: a conexão criada ou o
            erro de validação (o grafo não é alterado).
        """
        result = validate_connection(
            self.space,
            source_module_id=source_module_id,
            source_port_id=source_port_id,
            target_module_id=target_module_id,
            target_port_id=target_port_id,
            connection_id=_new_id("conn"),
        )

        if isinstance(result, ConnectionErrorPayload):
            self.log.log(
                level=LogLevel.WARNING,
                event="connection_rejected",
                message=result.message,
                module_id=target_module_id,
                kind=result.kind,
                source_module_id=source_module_id,
                target_module_id=target_module_id,
            )
            return result

        self.space.connections.append(result)
        self._refresh_connected()
        self.space.touch()
        self.log.log(
            level=LogLevel.INFO,
            event="connection_added",
            message=f"Conexão {result.source_module_id} → {result.target_module_id} criada",
            module_id=result.target_module_id,
            connection_id=result.id,
            data_type=result.data_type.value,
        )
        self._notify("connection_added", connection_id=result.id)
        return result

    def delete_connection(self, connection_id: str) -> None:
        """Remove a conexão, se existir. Não invalida nenhum módulo."""
        connection = self.space.get_connection(connection_id)
        if connection is None:
            return

        self.space.connections = [c for c in self.space.connections if c.id != connection_id]
        self._refresh_connected()
        self.space.touch()
        self.log.log(
            level=LogLevel.INFO,
            event="connection_deleted",
            message=f"Conexão {connection.source_module_id} → {connection.target_module_id} removida",
            module_id=connection.target_module_id,
            connection_id=connection_id,
        )
        self._notify("connection_deleted", connection_id=connection_id)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        """
        Estrutura serializável do Space: módulos, conexões, metadados e log.

        O hash da configuração acompanha o snapshot para detectar um
        restore sob outro catálogo de módulos.
        """
        data = self.space.to_dict()
        data["logs"] = self.log.to_list()
        data["config_hash"] = self.config_hash
        data["schema_version"] = SNAPSHOT_SCHEMA_VERSION
        return data

    def restore(self, snapshot: Dict[str, Any]) -> None:
        """
        Substitui o Space atual pelo conteúdo do snapshot.

        O snapshot é validado por completo antes da troca: ids únicos,
        integridade referencial, compatibilidade de tipos e
        aciclicidade.

        Raises:
            InvalidSnapshotError: estrutura malformada, referências pendentes,
                tipos divergentes ou entradas de log inválidas.
            GraphCycleError: conexões formam ciclo.
        """
        space = Space.from_dict(snapshot)
        space.check_integrity()
        plan_execution(space.module_ids(), space.connections)
        entries = parse_entries(snapshot.get("logs"))

        # Nada abaixo pode falhar por conteúdo do snapshot.
        self.space = space
        self.log.entries = entries
        self._refresh_connected()

        stored_hash = snapshot.get("config_hash")
        if stored_hash is not None and stored_hash != self.config_hash:
            self.log.log(
                level=LogLevel.WARNING,
                event="config_mismatch",
                message="Snapshot foi gerado sob outra configuração de engine",
                snapshot_config_hash=stored_hash,
                config_hash=self.config_hash,
            )

        self._notify("space_restored", module_count=len(space.modules))


def _as_position(value: Union[Position, Dict[str, Any], None]) -> Position:
    if value is None:
        return Position()
    if isinstance(value, Position):
        return Position(x=value.x, y=value.y)
    return Position.from_dict(value)


def _as_size(value: Union[Size, Dict[str, Any]]) -> Size:
    if isinstance(value, Size):
        return Size(width=value.width, height=value.height)
    return Size.from_dict(value)

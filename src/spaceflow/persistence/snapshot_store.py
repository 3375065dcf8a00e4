"""Persistência de snapshots de Spaces em disco.

Um snapshot é a estrutura produzida por `GraphStore.snapshot()`:
módulos, conexões, metadados do Space e log. Este módulo apenas grava e
lê essa estrutura; a validação semântica (referências, tipos, aciclicidade) acontece em
`GraphStore.restore`.

Decisões:
- Formato: JSON (UTF-8, `sort_keys=True`, indentado)
- Caminho determinístico: `<root_dir>/<space_id>.json`
- Diretórios intermediários são criados automaticamente

Limites explícitos:
- Não aplica migração de schema
- Não faz lock de arquivos (um escritor por Space)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from spaceflow.core.engine.store import GraphStore
from spaceflow.core.exceptions import InvalidSnapshotError


def save_snapshot(store: Union[GraphStore, Dict[str, Any]], path: Union[str, Path]) -> Path:
    """Persiste o snapshot do store (ou um snapshot já serializado) em JSON."""
    data = store.snapshot() if isinstance(store, GraphStore) else store
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")
    return path


def load_snapshot(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Lê um snapshot persistido.

    Raises:
        OSError: falha de leitura.
        InvalidSnapshotError: conteúdo que não é um objeto JSON.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidSnapshotError(
            "Snapshot file is not valid JSON",
            details={"path": str(path), "error": str(e)},
        ) from e

    if not isinstance(data, dict):
        raise InvalidSnapshotError(
            "Snapshot root must be an object",
            details={"path": str(path), "root_type": type(data).__name__},
        )
    return data


class SnapshotStore:
    """Store de snapshots: um arquivo JSON por Space em `root_dir`."""

    def __init__(self, *, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def path_for(self, space_id: str) -> Path:
        if not space_id or "/" in space_id or "\\" in space_id or space_id in {".", ".."}:
            raise ValueError(f"Invalid space id for persistence: {space_id!r}")
        return self.root_dir / f"{space_id}.json"

    # ------------------------------------------------------------------
    # Persist / Load
    # ------------------------------------------------------------------
    def save(self, store: GraphStore) -> Path:
        """Grava o snapshot atual do store e retorna o caminho escrito."""
        return save_snapshot(store, self.path_for(store.space.id))

    def load(self, space_id: str) -> Dict[str, Any]:
        path = self.path_for(space_id)
        if not path.exists():
            raise FileNotFoundError(str(path))
        return load_snapshot(path)

    def restore_into(self, store: GraphStore, space_id: str) -> None:
        """Carrega o snapshot de `space_id` e o restaura em `store`."""
        store.restore(self.load(space_id))

    def list(self) -> List[Dict[str, Any]]:
        """
        Resumo dos Spaces persistidos, ordenado por id.

        Cada item: id, name, created_at, updated_at, module_count.
        """
        if not self.root_dir.exists():
            return []

        summaries: List[Dict[str, Any]] = []
        for path in sorted(self.root_dir.glob("*.json")):
            data = load_snapshot(path)
            summaries.append(
                {
                    "id": data.get("id", path.stem),
                    "name": data.get("name"),
                    "created_at": data.get("created_at"),
                    "updated_at": data.get("updated_at"),
                    "module_count": len(data.get("modules") or []),
                }
            )
        return summaries

    def delete(self, space_id: str) -> bool:
        """Remove o snapshot; retorna False se ele não existir."""
        path = self.path_for(space_id)
        if not path.exists():
            return False
        path.unlink()
        return True


__all__ = ["SnapshotStore", "load_snapshot", "save_snapshot"]

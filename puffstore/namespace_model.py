from typing import Any, Dict


class NamespaceModel:
    def __init__(self, id: str = ""):
        self._id = id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamespaceModel":
        return cls(id=data["id"])

    @property
    def id(self) -> str:
        return self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamespaceModel):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"NamespaceModel(id={self._id!r})"

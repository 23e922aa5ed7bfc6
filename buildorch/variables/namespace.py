"""
Layered property namespace.

A namespace is an ordered sequence of layers, each a mapping from property
name to string value. Later layers override earlier ones. Namespaces are
immutable: every derived namespace is a new object and no layer is ever
mutated after composition.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import UndefinedVariable


def _stringify(value: Any) -> str:
    """Convert a property value to its substituted text form."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return ''
    return str(value)


def _freeze_layer(layer: Mapping[str, Any]) -> Mapping[str, str]:
    frozen: Dict[str, str] = {}
    for name, value in layer.items():
        if not isinstance(name, str) or not name:
            raise ValueError(f"Property names must be non-empty strings, got {name!r}")
        frozen[name] = _stringify(value)
    return MappingProxyType(frozen)


class PropertyNamespace:
    """Immutable, ordered, layered name -> value mapping."""

    def __init__(self, layers: Sequence[Mapping[str, Any]] = ()):
        self._layers: Tuple[Mapping[str, str], ...] = tuple(_freeze_layer(layer) for layer in layers)

    @classmethod
    def compose(cls, layers: Iterable[Mapping[str, Any]]) -> 'PropertyNamespace':
        """Build a namespace; later layers take priority on name collision."""
        return cls(list(layers))

    @property
    def layers(self) -> Tuple[Mapping[str, str], ...]:
        return self._layers

    def resolve(self, name: str) -> str:
        """
        Return the value bound to name by the highest-priority layer.

        Raises:
            UndefinedVariable: If no layer binds name
        """
        for layer in reversed(self._layers):
            if name in layer:
                return layer[name]
        raise UndefinedVariable(name)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        try:
            return self.resolve(name)
        except UndefinedVariable:
            return default

    def resolve_all(self) -> Dict[str, str]:
        """Flatten every layer into a single mapping honoring override order."""
        flattened: Dict[str, str] = {}
        for layer in self._layers:
            flattened.update(layer)
        return flattened

    def names(self) -> List[str]:
        return sorted(self.resolve_all())

    def with_layer(self, layer: Mapping[str, Any]) -> 'PropertyNamespace':
        """New namespace with one extra highest-priority layer."""
        return PropertyNamespace(self._layers + (layer,))

    def restricted(self, names: Iterable[str], strict: bool = True) -> 'PropertyNamespace':
        """
        New single-layer namespace exposing only the given names.

        With strict=False, names no layer binds are left out of the result.

        Raises:
            UndefinedVariable: If strict and one of the names is not bound
        """
        if strict:
            return PropertyNamespace([{name: self.resolve(name) for name in names}])
        return PropertyNamespace([{name: self.resolve(name) for name in names if name in self}])

    def __contains__(self, name: object) -> bool:
        return any(name in layer for layer in self._layers)

    def __len__(self) -> int:
        return len(self.resolve_all())

    def __repr__(self) -> str:
        return f"PropertyNamespace(layers={len(self._layers)}, names={self.names()})"

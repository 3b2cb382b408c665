"""
Scope resolution.
Resolves keys against ordered local scopes and the process-wide global scope.
"""

import logging
import threading
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

from varsub.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class SubstitutionType(str, Enum):
    """Which scopes are eligible when resolving a key."""
    ALL = "all"
    LOCAL = "local"
    GLOBAL = "global"

    @classmethod
    def normalize(cls, value: Union['SubstitutionType', str, None]) -> 'SubstitutionType':
        """
        Normalize a selector given as a member, a name, or None.

        Args:
            value: Selector; None means ALL

        Returns:
            The matching SubstitutionType

        Raises:
            InvalidArgumentError: If the name is not a known selector
        """
        if value is None:
            return cls.ALL
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            for member in cls:
                if member.value == name:
                    return member
        raise InvalidArgumentError(
            f"Unknown substitution type {value!r}. Supported: {[m.value for m in cls]}"
        )

    @property
    def includes_local(self) -> bool:
        """Whether local scopes are eligible."""
        return self in (SubstitutionType.ALL, SubstitutionType.LOCAL)

    @property
    def includes_global(self) -> bool:
        """Whether the global scope is eligible."""
        return self in (SubstitutionType.ALL, SubstitutionType.GLOBAL)


class GlobalScope(Protocol):
    """Read interface the engine needs from a global scope."""

    def exists(self, key: str) -> bool:
        ...

    def get(self, key: str) -> Any:
        ...


class GlobalVariables:
    """
    Thread-safe process-wide variable store.

    The lock is held only for the duration of a single operation, so readers
    never block on a substitution in progress elsewhere.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._lock = threading.RLock()
        self._values: Dict[str, Any] = dict(initial or {})

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def update(self, values: Mapping[str, Any]) -> None:
        with self._lock:
            self._values.update(values)

    def remove(self, key: str) -> Any:
        """Remove a key, returning its previous value (None if it was absent)."""
        with self._lock:
            return self._values.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._values.keys())

    def snapshot(self) -> Dict[str, Any]:
        """Return a shallow copy of the current contents."""
        with self._lock:
            return dict(self._values)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


# Created at import; owned by the host process and never cleared by the engine
_global_variables = GlobalVariables()


def get_global_variables() -> GlobalVariables:
    """Return the process-wide global variable store."""
    return _global_variables


class ScopeResolver:
    """
    Resolves keys against local scopes and a global scope.

    Local scopes are consulted strictly in the order given and the first
    scope that has the key wins, even when its value is None. The global
    scope is only consulted after every local scope reports absent.
    """

    def __init__(self, global_scope: Optional[GlobalScope] = None):
        """
        Initialize the resolver.

        Args:
            global_scope: Global scope to fall back to; the process-wide
                store when not given
        """
        self.global_scope = global_scope if global_scope is not None else get_global_variables()

    def exists(
        self,
        key: str,
        substitution_type: Union[SubstitutionType, str, None],
        scopes: Sequence[Mapping[str, Any]]
    ) -> bool:
        """Return True if the key exists in any eligible scope."""
        found, _ = self.resolve(key, substitution_type, scopes)
        return found

    def resolve(
        self,
        key: str,
        substitution_type: Union[SubstitutionType, str, None],
        scopes: Sequence[Mapping[str, Any]]
    ) -> Tuple[bool, Any]:
        """
        Resolve a key to its raw value.

        Args:
            key: Variable name
            substitution_type: Scope selector
            scopes: Local scopes in precedence order

        Returns:
            (found, value) tuple; value is None when not found
        """
        substitution_type = SubstitutionType.normalize(substitution_type)

        if substitution_type.includes_local:
            for index, scope in enumerate(self._local_scopes(scopes)):
                if key in scope:
                    logger.debug(f"Resolved '{key}' from local scope {index}")
                    return True, scope[key]

        if substitution_type.includes_global and self.global_scope.exists(key):
            logger.debug(f"Resolved '{key}' from global scope")
            return True, self.global_scope.get(key)

        return False, None

    @staticmethod
    def _local_scopes(scopes: Optional[Iterable[Optional[Mapping[str, Any]]]]) -> Iterable[Mapping[str, Any]]:
        for scope in scopes or ():
            if scope is not None:
                yield scope

from __future__ import annotations

from collections.abc import Iterable, Iterator

from docflow.core.exceptions import InvalidVariableName, MissingVariable

INPUT = "input"


class ContextVariables:
    """Per-step data carrier: named string variables plus the ``input`` slot.

    Names are case-insensitive and kept in insertion order. A skill reads its
    declared variables, publishes its output with ``update()``, and the next
    chained step picks that up through ``result()``.
    """

    def __init__(self, default_input: str = ""):
        self._variables: dict[str, str] = {INPUT: default_input}
        # folded key -> name as the caller last spelled it
        self._names: dict[str, str] = {INPUT: INPUT}

    @classmethod
    def create(cls, default_input: str = "") -> ContextVariables:
        return cls(default_input)

    @staticmethod
    def _key(name: str) -> str:
        if not name or not name.strip():
            raise InvalidVariableName("Context variable name must not be empty")
        return name.strip().lower()

    def set(self, name: str, value: str) -> ContextVariables:
        key = self._key(name)
        self._variables[key] = value
        self._names[key] = name.strip()
        return self

    def get(self, name: str) -> str:
        key = self._key(name)
        if key not in self._variables:
            raise MissingVariable(name)
        return self._variables[key]

    def require(self, names: Iterable[str], skill_name: str | None = None) -> None:
        """Raise ``MissingVariable`` for the first name that is not set."""
        for name in names:
            if self._key(name) not in self._variables:
                raise MissingVariable(name, skill_name)

    def update(self, value: str) -> ContextVariables:
        """Replace the primary value."""
        self._variables[INPUT] = value
        return self

    def result(self) -> str:
        return self._variables[INPUT]

    def copy(self) -> ContextVariables:
        clone = ContextVariables()
        clone._variables = dict(self._variables)
        clone._names = dict(self._names)
        return clone

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(name.strip()) and name.strip().lower() in self._variables

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter([(self._names[key], value) for key, value in self._variables.items()])

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        names = ", ".join(self._names.values())
        return f"ContextVariables({names})"

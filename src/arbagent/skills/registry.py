"""Operation registry: the closed catalog of operations the agent may run.

Each operation is an immutable ``OperationDescriptor`` carrying a pydantic
argument model and a handler.  The registry rejects duplicate names and is
sealed once the catalog is built; lookups after that never change.
"""

from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel

from arbagent.errors import DuplicateOperation, RegistryError, UnknownOperation

CATEGORIES = ("read", "write")


def _strip_titles(schema):
    """Drop pydantic's auto-generated ``title`` keys from a JSON schema."""
    if isinstance(schema, dict):
        return {k: _strip_titles(v) for k, v in schema.items() if k != "title"}
    if isinstance(schema, list):
        return [_strip_titles(v) for v in schema]
    return schema


@dataclass(frozen=True)
class OperationDescriptor:
    """One registered operation.

    Attributes:
        name: Unique operation name.
        description: Text shown to the resolver and in ``help``.
        args_model: Pydantic model validating the proposed arguments.
        handler: ``handler(ctx, args) -> OperationResult``.
        requires_session: True if a wallet must be set.
        category: "read" or "write".
        usage: One-line usage string for ``help``.
        prepare: Optional ``prepare(ctx, args)`` run after schema validation
            and before the session check.  Raises ``InvalidArguments`` on
            bad input; its return value is passed to the handler in place
            of ``args``.
    """

    name: str
    description: str
    args_model: type[BaseModel]
    handler: Callable
    requires_session: bool = False
    category: str = "read"
    usage: str = ""
    prepare: Callable | None = None

    @property
    def input_schema(self) -> dict:
        schema = _strip_titles(self.args_model.model_json_schema())
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema

    def to_anthropic(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


class OperationRegistry:
    """Ordered, name-unique collection of operation descriptors."""

    def __init__(self):
        self._ops: dict[str, OperationDescriptor] = {}
        self._sealed = False

    def register(self, descriptor: OperationDescriptor) -> None:
        """Add a descriptor.

        Raises:
            DuplicateOperation: If the name is already registered.
            RegistryError: If the registry is sealed or the category unknown.
        """
        if self._sealed:
            raise RegistryError(
                f"Cannot register '{descriptor.name}': registry is sealed")
        if descriptor.name in self._ops:
            raise DuplicateOperation(
                f"Operation '{descriptor.name}' is already registered")
        if descriptor.category not in CATEGORIES:
            raise RegistryError(
                f"Operation '{descriptor.name}' has unknown category "
                f"'{descriptor.category}'")
        self._ops[descriptor.name] = descriptor

    def seal(self) -> "OperationRegistry":
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def resolve(self, name: str) -> OperationDescriptor | None:
        return self._ops.get(name)

    def get(self, name: str) -> OperationDescriptor:
        """Like ``resolve`` but raises ``UnknownOperation`` when absent."""
        descriptor = self._ops.get(name)
        if descriptor is None:
            raise UnknownOperation(f"Unknown operation: {name}")
        return descriptor

    def list_all(self) -> list[OperationDescriptor]:
        """Return descriptors in registration order."""
        return list(self._ops.values())

    def names(self) -> list[str]:
        return list(self._ops)

    def to_anthropic_tools(self) -> list[dict]:
        """Return the catalog in Anthropic tool format."""
        return [d.to_anthropic() for d in self._ops.values()]

    def __contains__(self, name: Any) -> bool:
        return name in self._ops

    def __len__(self) -> int:
        return len(self._ops)

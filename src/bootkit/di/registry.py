"""BindingRegistry, its frozen snapshot, and the Binder handed to modules.

INVARIANT: a key addresses at most one active provider. Declaring a key
again replaces the earlier binding (last write wins), so the order in
which modules run decides the final configuration.

A registry is mutable only until ``freeze()``. The snapshot it returns is
owned by exactly one Runtime and never changes afterwards.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Any, Protocol, get_args, get_origin, get_type_hints

from bootkit.di.keys import KeyLike, ServiceKey, as_key
from bootkit.errors import BindingError, MissingBindingError, RegistryFrozenError

__all__ = [
    "Binder",
    "Binding",
    "BindingBuilder",
    "BindingRegistry",
    "FrozenBindings",
    "Provider",
    "Resolver",
    "constructor_provider",
]

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    """What a provider receives: something that can hand out other services."""

    def get(self, key: KeyLike, qualifier: str | None = None) -> Any: ...


Provider = Callable[[Resolver], Any]


@dataclass(frozen=True)
class Binding:
    """A key paired with the provider that builds its service.

    Attributes:
        key: The address of the binding.
        provider: Factory invoked with a Resolver to build the service.
        source: Name of the module that declared the binding, if known.
    """

    key: ServiceKey
    provider: Provider
    source: str | None = None


class BindingRegistry:
    """Ordered, mutable collection of bindings used while modules configure."""

    def __init__(self) -> None:
        self._bindings: dict[ServiceKey, Binding] = {}
        self._frozen = False

    def declare(self, key: KeyLike, provider: Provider, *, source: str | None = None) -> None:
        """Register *provider* under *key*, replacing any earlier binding."""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot declare {key} on a frozen registry")
        if not callable(provider):
            raise BindingError(f"Provider for {key} is not callable: {provider!r}")

        service_key = as_key(key)
        previous = self._bindings.get(service_key)
        if previous is not None:
            logger.debug(
                "Binding %s from %s overridden by %s",
                service_key,
                previous.source or "<unknown>",
                source or "<unknown>",
            )
        self._bindings[service_key] = Binding(service_key, provider, source)

    def __contains__(self, key: object) -> bool:
        return as_key(key) in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> FrozenBindings:
        """Seal this registry and return its immutable snapshot."""
        self._frozen = True
        return FrozenBindings(self._bindings)


class FrozenBindings(Mapping[ServiceKey, Binding]):
    """Immutable view of a registry, safe for concurrent reads."""

    def __init__(self, bindings: Mapping[ServiceKey, Binding]) -> None:
        self._bindings = MappingProxyType(dict(bindings))

    def __getitem__(self, key: ServiceKey) -> Binding:
        try:
            return self._bindings[as_key(key)]
        except KeyError:
            raise MissingBindingError(as_key(key)) from None

    def __contains__(self, key: object) -> bool:
        return as_key(key) in self._bindings

    def __iter__(self) -> Iterator[ServiceKey]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def lookup(self, key: KeyLike, qualifier: str | None = None) -> Provider:
        """Return the provider bound to *key*.

        Raises:
            MissingBindingError: If no module declared the key.
        """
        return self[as_key(key, qualifier)].provider

    def keys_of_type(self, type_: Any) -> list[ServiceKey]:
        """All keys bound for *type_*, qualified or not, in declaration order."""
        return [key for key in self._bindings if key.type is type_]


class BindingBuilder:
    """Fluent second half of ``binder.bind(Type)``."""

    def __init__(self, binder: Binder, key: ServiceKey) -> None:
        self._binder = binder
        self._key = key

    def to(self, implementation: type) -> None:
        """Bind to a class, injecting its annotated constructor parameters."""
        self._binder.declare(self._key, constructor_provider(implementation))

    def to_instance(self, instance: Any) -> None:
        """Bind to a ready-made object.

        The same object is shared by every runtime built from this module,
        so only bind immutable or deliberately shared instances this way.
        """
        self._binder.declare(self._key, lambda _resolver: instance)

    def to_provider(self, provider: Provider) -> None:
        self._binder.declare(self._key, provider)


class Binder:
    """Accumulate-only facade over a BindingRegistry, passed to ``Module.configure``.

    Usage::

        def configure(self, binder: Binder) -> None:
            binder.bind(Greeter).to(LoudGreeter)
            binder.add_command(ServeCommand)
    """

    def __init__(self, registry: BindingRegistry, source: str | None = None) -> None:
        self._registry = registry
        self._source = source

    @property
    def source(self) -> str | None:
        return self._source

    def declare(self, key: KeyLike, provider: Provider) -> None:
        self._registry.declare(key, provider, source=self._source)

    def bind(self, type_: Any, qualifier: str | None = None) -> BindingBuilder:
        return BindingBuilder(self, as_key(type_, qualifier))

    def add_command(self, command: Any) -> None:
        """Bind a command (instance or class) under its ``name``."""
        from bootkit.commands.base import Command

        name = getattr(command, "name", None)
        if not isinstance(name, str) or not name:
            raise BindingError(f"Command {command!r} has no name")
        builder = self.bind(Command, name)
        if inspect.isclass(command):
            builder.to(command)
        else:
            builder.to_instance(command)

    def set_default_command(self, name: str) -> None:
        """Run command *name* when the arguments select no command."""
        from bootkit.commands.dispatcher import DEFAULT_COMMAND

        self.declare(DEFAULT_COMMAND, lambda _resolver: name)


def constructor_provider(cls: type) -> Provider:
    """Build a provider that instantiates *cls*, resolving its constructor dependencies.

    Every required constructor parameter must be annotated; the annotation
    is the dependency's key type, and ``Annotated[T, "qualifier"]`` selects a
    qualified binding. Parameters with defaults are left to their defaults.

    Raises:
        BindingError: If a required parameter is not annotated.
    """
    dependencies = _constructor_dependencies(cls)

    def provide(resolver: Resolver) -> Any:
        kwargs = {name: resolver.get(key) for name, key in dependencies}
        return cls(**kwargs)

    provide.__qualname__ = f"constructor_provider({cls.__qualname__})"
    return provide


def _constructor_dependencies(cls: type) -> list[tuple[str, ServiceKey]]:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return []

    required = [
        param
        for param in signature.parameters.values()
        if param.default is inspect.Parameter.empty
        and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if not required:
        return []

    try:
        hints = get_type_hints(cls.__init__, include_extras=True)
    except NameError as exc:
        raise BindingError(
            f"Cannot resolve constructor annotations of <{cls.__qualname__}>: {exc}"
        ) from exc

    result = []
    for param in required:
        try:
            annotation = hints[param.name]
        except KeyError:
            raise BindingError(
                f"Dependency <{param.name}> of <{cls.__qualname__}> is not annotated"
            ) from None

        if get_origin(annotation) is Annotated:
            base_type, *metadata = get_args(annotation)
            qualifier = next((m for m in metadata if isinstance(m, str)), None)
        else:
            base_type, qualifier = annotation, None
        result.append((param.name, ServiceKey(base_type, qualifier)))
    return result

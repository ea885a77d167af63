"""Dependency injection container assembly."""

from collections.abc import Iterable
from typing import get_args

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from portal.util.di import PROVIDERS, Component, ProviderBase

COMPONENTS: frozenset[str] = frozenset(get_args(Component))


def resolve_provider(base: type[ProviderBase], mocked: set[str]) -> type[ProviderBase]:
    """Pick the implementation of a provider for this container.

    Raises:
        ValueError: If the component has no implementation of the wanted kind
    """
    component = base.__mock_component__
    if component is None:
        return base

    use_mock = component in mocked
    for candidate in base.__subclasses__():
        if candidate.__is_mock__ == use_mock:
            return candidate

    kind = "mock" if use_mock else "production"
    raise ValueError(f"No {kind} provider registered for {component}")


def build_container(mocked: Iterable[Component] = ()) -> AsyncContainer:
    """Build a container, using mock providers for the named components.

    Mock providers register by subclassing a component base, so their
    module must be imported before this is called.

    Raises:
        ValueError: If an unknown component is named
    """
    mocked = set(mocked)
    unknown = mocked - COMPONENTS
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    providers = [resolve_provider(base, mocked)() for base in PROVIDERS]
    # FastapiProvider exposes the current Request to request-scoped factories
    return make_async_container(*providers, FastapiProvider())


def create_container() -> AsyncContainer:
    """Build the production container. Settings come from the environment."""
    return build_container()

"""Provider base class and the names of swappable components."""

from typing import ClassVar, Literal

from dishka import Provider

# Components with a production and a mock provider
Component = Literal["steam", "persistence"]


class ProviderBase(Provider):
    """Dishka provider tagged for container assembly.

    A provider that sets ``__mock_component__`` is the base of a
    swappable component. Its concrete subclasses set ``__is_mock__`` and
    the container picks one of them. Untagged providers are used as-is.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

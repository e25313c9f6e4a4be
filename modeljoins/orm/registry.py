"""Model registry: resolves model classes from their names.

Every :class:`~modeljoins.orm.model.Model` subclass registers itself when it
is defined, under both its class name and its dotted import path.  This is
what lets relationships and joins reference models that are defined later
(``has_many("Post")``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from modeljoins.errors import UnknownModelError

if TYPE_CHECKING:
    from modeljoins.orm.model import Model


class ModelRegistry:
    """Registry mapping model names to model classes.

    A later definition with the same class name replaces the earlier one.
    """

    _models: ClassVar[dict[str, type[Model]]] = {}

    @classmethod
    def register(cls, model_cls: type[Model]) -> None:
        """Register ``model_cls`` under its name and its dotted path."""
        cls._models[model_cls.__name__] = model_cls
        cls._models[f"{model_cls.__module__}.{model_cls.__qualname__}"] = model_cls

    @classmethod
    def resolve(cls, name: str) -> type[Model]:
        """Return the model class registered under ``name``.

        Raises:
            UnknownModelError: If no model was registered under ``name``.
        """
        model_cls = cls._models.get(name)
        if model_cls is None:
            raise UnknownModelError(name, cls.registered_names())
        return model_cls

    @classmethod
    def registered_names(cls) -> list[str]:
        """Return the sorted short names of all registered models."""
        return sorted(name for name in cls._models if "." not in name)

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Tuple, Type

from pydantic import BaseModel, ConfigDict, ValidationError

from .context import SiteModel
from .errors import ConfigError


class NoParams(BaseModel):
    model_config = ConfigDict(extra="forbid")


class BaseModule(ABC):
    """One pipeline stage.

    A stage succeeds by returning from ``run`` and fails by raising a
    ``ConcoctionError``. ``requires`` names stages that must have run before
    it, ``precedes`` names stages that may only run after it, and ``once``
    limits it to a single occurrence per pipeline.
    """
    Params: ClassVar[Type[BaseModel]] = NoParams
    requires: ClassVar[Tuple[str, ...]] = ()
    precedes: ClassVar[Tuple[str, ...]] = ()
    once: ClassVar[bool] = False

    def __init__(self, params: Dict[str, Any] | None = None) -> None:
        try:
            self.params = self.Params.model_validate(params or {})
        except ValidationError as exc:
            raise ConfigError(f"invalid params for {self.name}: {exc}") from exc

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def run(self, model: SiteModel) -> None:
        """Process the site model in-place."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Type

from .call_frames import CallFrameTracer
from .emitter import StepEmitter
from .errors import InvalidParameterError
from .param_checks import semantic_check_params
from .run import Outcome
from .schemas import validate_params


@dataclass
class RunContext:
    step: StepEmitter
    frames: CallFrameTracer
    params: Dict[str, Any] = field(default_factory=dict)


Producer = Callable[[RunContext, Any], Awaitable[Outcome]]


class Domain:
    """A structure plus the closed set of algorithms that run over it.

    Subclasses declare ``name`` (its parameter schema key), ``algorithms`` (a
    ``str`` Enum), ``producers`` (variant -> coroutine function) and
    ``defaults`` (variant -> default params). The controller only talks to
    this interface, so adding an algorithm never touches the controller.
    """

    name: str = ""
    algorithms: Type[Enum]
    producers: Mapping[Enum, Producer] = {}
    defaults: Mapping[Enum, Dict[str, Any]] = {}

    def parse_algorithm(self, selector) -> Enum:
        if isinstance(selector, self.algorithms):
            return selector
        try:
            return self.algorithms(str(selector).strip().lower())
        except ValueError:
            choices = ", ".join(a.value for a in self.algorithms)
            raise InvalidParameterError(
                f"unknown {self.name} algorithm '{selector}' (choose from: {choices})"
            ) from None

    def resolve(self, selector, params: Dict[str, Any] = None):
        """Return ``(variant, producer, params)`` or raise InvalidParameterError."""
        algorithm = self.parse_algorithm(selector)
        merged = dict(self.defaults.get(algorithm, {}))
        merged.update(params or {})

        ok, err = validate_params(self.name, algorithm.value, merged)
        if not ok:
            raise InvalidParameterError(f"{self.name}/{algorithm.value} parameter check failed: {err}")

        ok, msg = semantic_check_params(self, algorithm.value, merged)
        if not ok:
            raise InvalidParameterError(f"{self.name}/{algorithm.value} semantic check failed: {msg}")

        return algorithm, self.producers[algorithm], merged

    def initial_views(self, params: Dict[str, Any] = None) -> Dict[str, Any]:
        """Views of the committed structure, as a Run with ``params`` starts from."""
        raise NotImplementedError

    def working_copy(self) -> Any:
        return None

    def commit(self, work: Any) -> None:
        pass

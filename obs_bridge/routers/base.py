"""
routers/base.py — Shared dispatch and parameter handling for resource routers.

A router maps action names to handlers. Every handler validates its own
parameters first and only then touches OBS, so a ValidationError never
costs a round-trip. handle() is the only entry point and always returns a
string: either the success text or "Error: <message>".
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from obs_bridge.core.connection_manager import ConnectionManager
from obs_bridge.core.errors import BridgeError, UnknownAction, ValidationError
from obs_bridge.core.request_bridge import RequestBridge

log = logging.getLogger(__name__)

ERROR_PREFIX = "Error: "

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def action_key(name: str) -> str:
    return re.sub(r"[\s_\-]", "", name or "").lower()


def snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def render_error(error: BridgeError) -> str:
    return f"{ERROR_PREFIX}{error}"


def is_error(result: str) -> bool:
    return result.startswith(ERROR_PREFIX)


@dataclass(frozen=True)
class ActionRequest:
    """An action name plus its weakly typed parameters, read-only."""
    action: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params or {})))

    def raw(self, name: str) -> Any:
        """Look a parameter up by its camelCase name, then its snake_case spelling."""
        for key in (name, snake_case(name)):
            value = self.params.get(key)
            if value is not None:
                return value
        return None

    def _missing(self, name: str, hint: str = "") -> ValidationError:
        return ValidationError(f"{name} parameter is required for {self.action} action{hint}")

    def require_str(self, name: str, hint: str = "") -> str:
        value = self.optional_str(name)
        if value is None:
            raise self._missing(name, hint)
        return value

    def optional_str(self, name: str) -> Optional[str]:
        value = self.raw(name)
        if value is None:
            return None
        if not isinstance(value, str):
            value = str(value)
        return value if value.strip() else None

    def optional_bool(self, name: str, default: Optional[bool] = None) -> Optional[bool]:
        value = self.raw(name)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)) and value in (0, 1):
            return bool(value)
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValidationError(f"{name} must be true or false, got {value!r}")

    def require_bool(self, name: str) -> bool:
        value = self.optional_bool(name)
        if value is None:
            raise self._missing(name)
        return value

    def optional_int(self, name: str, lo: Optional[int] = None, hi: Optional[int] = None) -> Optional[int]:
        value = self.raw(name)
        if value is None:
            return None
        try:
            if isinstance(value, bool):
                raise ValueError
            number = float(value)
            if not number.is_integer():
                raise ValueError
            number = int(number)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be an integer, got {value!r}") from None
        _check_range(name, number, lo, hi)
        return number

    def optional_float(self, name: str, lo: Optional[float] = None, hi: Optional[float] = None) -> Optional[float]:
        value = self.raw(name)
        if value is None:
            return None
        try:
            if isinstance(value, bool):
                raise ValueError
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be a number, got {value!r}") from None
        if math.isnan(number):
            raise ValidationError(f"{name} must be a number, got {value!r}")
        _check_range(name, number, lo, hi)
        return number

    def require_float(self, name: str, lo: Optional[float] = None, hi: Optional[float] = None) -> float:
        value = self.optional_float(name, lo, hi)
        if value is None:
            raise self._missing(name)
        return value

    def choice(self, name: str, options: Iterable[str], label: str = "options") -> str:
        """Required parameter whose value must be one of options (case-insensitive)."""
        value = self.require_str(name)
        options = list(options)
        for option in options:
            if option.lower() == value.strip().lower():
                return option
        raise ValidationError(f"Invalid {name}. Valid {label}: {', '.join(options)}")


def _check_range(name: str, number: float, lo: Optional[float], hi: Optional[float]) -> None:
    if lo is not None and hi is not None and not lo <= number <= hi:
        raise ValidationError(f"{name} must be between {lo} and {hi}")
    if lo is not None and number < lo:
        raise ValidationError(f"{name} must be at least {lo}")
    if hi is not None and number > hi:
        raise ValidationError(f"{name} must be at most {hi}")


Handler = Callable[[ActionRequest], str]


class ActionRouter:
    """
    Base class for the seven resource routers.

    Subclasses set `resource` and return their dispatch table from routes().
    """

    resource: str = ""

    def __init__(self, connections: ConnectionManager, bridge: RequestBridge):
        self.connections = connections
        self.bridge = bridge
        self._routes = self.routes()
        self._index = {action_key(name): name for name in self._routes}

    def routes(self) -> dict[str, Handler]:
        raise NotImplementedError

    @property
    def actions(self) -> list[str]:
        return list(self._routes)

    def resolve(self, action: str) -> str:
        name = self._index.get(action_key(action))
        if name is None:
            raise UnknownAction(
                f"Unknown action '{action}' for {self.resource}. Valid actions: {', '.join(self._routes)}"
            )
        return name

    def handle(self, action: str, params: Optional[Mapping[str, Any]] = None) -> str:
        try:
            name = self.resolve(action)
            return self._routes[name](ActionRequest(name, params or {}))
        except BridgeError as e:
            log.debug(f"{self.resource}.{action} → {e.kind}: {e}")
            return render_error(e)

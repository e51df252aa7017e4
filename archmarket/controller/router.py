"""
Controller Router - Pattern-based router for controllers.

Path templates use guillemet parameters:

    /orders/«order_id»            any single segment, passed as str
    /orders/«page:int»            digits only, passed as int

Static routes are looked up in a dict; parameterized routes are tried in
specificity order, so ``/designs/featured`` wins over ``/designs/«id»``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .base import Controller


_PARAM_RE = re.compile(r"«(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<type>str|int))?»")

_CONVERTERS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "str": (r"[^/]+", str),
    "int": (r"-?\d+", int),
}


class PatternInvalidError(ValueError):
    pass


def _join(*parts: str) -> str:
    joined = "/".join(p.strip("/") for p in parts if p and p.strip("/"))
    return "/" + joined if joined else "/"


@dataclass
class CompiledRoute:
    """One (method, path) pair bound to a controller method."""

    http_method: str
    full_path: str
    controller_class: Type[Controller]
    handler_name: str
    metadata: Dict[str, Any]
    regex: Optional[re.Pattern] = None
    converters: Dict[str, Callable[[str], Any]] = field(default_factory=dict)

    @property
    def is_static(self) -> bool:
        return self.regex is None

    @property
    def specificity(self) -> Tuple[int, ...]:
        """Static segments rank above parameter segments, left to right."""
        return tuple(0 if "«" in seg else 1 for seg in self.full_path.strip("/").split("/"))

    def match(self, path: str) -> Optional[Dict[str, Any]]:
        if self.regex is None:
            return {} if path == self.full_path else None
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return {name: self.converters[name](value) for name, value in m.groupdict().items()}


def compile_path(template: str) -> Tuple[Optional[re.Pattern], Dict[str, Callable[[str], Any]]]:
    """Compile a template to a regex; static templates return ``(None, {})``."""
    if "«" not in template:
        return None, {}

    converters: Dict[str, Callable[[str], Any]] = {}
    pattern = ""
    pos = 0
    for m in _PARAM_RE.finditer(template):
        name, type_name = m.group("name"), m.group("type") or "str"
        if name in converters:
            raise PatternInvalidError(f"Duplicate parameter '{name}' in {template!r}")
        regex, convert = _CONVERTERS[type_name]
        pattern += re.escape(template[pos:m.start()]) + f"(?P<{name}>{regex})"
        converters[name] = convert
        pos = m.end()
    pattern += re.escape(template[pos:])

    if "«" in pattern or "»" in pattern:
        raise PatternInvalidError(f"Malformed parameter in {template!r}")
    return re.compile(pattern), converters


@dataclass
class RouteMatch:
    route: CompiledRoute
    params: Dict[str, Any]


class ControllerRouter:
    """Router for controller-based routes."""

    def __init__(self, mount: str = ""):
        self.mount = mount
        self._static: Dict[str, Dict[str, CompiledRoute]] = {}
        self._dynamic: Dict[str, List[CompiledRoute]] = {}

    def add_controller(self, controller_class: Type[Controller]) -> List[CompiledRoute]:
        compiled = []
        for name, metadata in controller_class.route_methods():
            full_path = _join(self.mount, controller_class.prefix, metadata["path"])
            regex, converters = compile_path(full_path)
            route = CompiledRoute(
                http_method=metadata["http_method"],
                full_path=full_path,
                controller_class=controller_class,
                handler_name=name,
                metadata=metadata,
                regex=regex,
                converters=converters,
            )
            if route.is_static:
                self._static.setdefault(route.http_method, {})[full_path] = route
            else:
                routes = self._dynamic.setdefault(route.http_method, [])
                routes.append(route)
                routes.sort(key=lambda r: r.specificity, reverse=True)
            compiled.append(route)
        return compiled

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        path = path.rstrip("/") or "/"
        method = method.upper()

        route = self._static.get(method, {}).get(path)
        if route is not None:
            return RouteMatch(route, {})

        for route in self._dynamic.get(method, ()):
            params = route.match(path)
            if params is not None:
                return RouteMatch(route, params)
        return None

    def routes(self) -> List[CompiledRoute]:
        out = [r for by_path in self._static.values() for r in by_path.values()]
        out.extend(r for routes in self._dynamic.values() for r in routes)
        return sorted(out, key=lambda r: (r.full_path, r.http_method))

from __future__ import annotations

import inspect
import logging
import types
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, Union, get_args, get_origin

from ..domain import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

JsonSchema = Dict[str, Any]

_SCALAR_TYPES: Dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    dict: "object",
    list: "array",
}


def json_type(annotation: Any) -> str:
    """JSON schema type for a parameter annotation; ``Optional[X]`` maps like ``X``."""

    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return json_type(members[0]) if len(members) == 1 else "string"
    return _SCALAR_TYPES.get(origin or annotation, "string")


def build_schema(signature: inspect.Signature, choices: Mapping[str, Type[Enum]]) -> JsonSchema:
    properties: Dict[str, JsonSchema] = {}
    required: List[str] = []
    for param in signature.parameters.values():
        prop: JsonSchema = {"type": json_type(param.annotation)}
        if param.name in choices:
            prop["enum"] = [member.value for member in choices[param.name]]
        if param.default is inspect.Parameter.empty:
            required.append(param.name)
        elif isinstance(param.default, (str, int, float, bool)) and param.default != "":
            prop["default"] = param.default
        properties[param.name] = prop
    schema: JsonSchema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    signature: inspect.Signature
    tags: tuple[str, ...] = ()
    schema: JsonSchema = field(default_factory=dict)

    @property
    def parameters(self) -> Dict[str, str]:
        return {name: prop["type"] for name, prop in self.schema.get("properties", {}).items()}

    def invoke(self, arguments: Mapping[str, Any]) -> Any:
        try:
            self.signature.bind(**arguments)
        except TypeError as exc:
            raise ValidationError(f"Invalid arguments for '{self.name}': {exc}") from exc
        return self.func(**arguments)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "parameters": self.schema,
        }


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
    choices: Optional[Mapping[str, Type[Enum]]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Expose ``func`` as a named operation; ``choices`` lists the allowed values of enum-backed text arguments."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"Operation '{name}' is already registered.")
        signature = inspect.signature(func, eval_str=True)
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            signature=signature,
            tags=tuple(tags or ()),
            schema=build_schema(signature, choices or {}),
        )
        return func

    return decorator


def get_api_functions() -> List[ApiFunction]:
    return list(REGISTRY.values())


def call_api(name: str, /, **kwargs: Any) -> Any:
    api_function = REGISTRY.get(name)
    if api_function is None:
        raise NotFoundError(f"Unknown operation '{name}'.")
    logger.debug("Calling %s with %s", name, sorted(kwargs))
    return api_function.invoke(kwargs)

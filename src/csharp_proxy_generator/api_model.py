"""The application API description model that a server publishes about its remote services.

The model is decoded from the camelCase JSON served at `api/abp/api-definition`.
Only the parts needed for proxy generation are typed; each action keeps its raw JSON so
it can be embedded into the generated proxy unchanged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from csharp_proxy_generator import helper


@dataclass(frozen=True)
class MethodParameterApiDescriptionModel:
    """A parameter as declared on the server-side method."""

    name: str
    type: str
    type_simple: str = ""
    is_optional: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MethodParameterApiDescriptionModel:
        return cls(
            name=data["name"],
            type=data.get("type", ""),
            type_simple=data.get("typeSimple", ""),
            is_optional=bool(data.get("isOptional", False)),
        )


@dataclass(frozen=True)
class ParameterApiDescriptionModel:
    """A parameter as bound to the HTTP request (path, query, body, ...)."""

    name_on_method: str
    name: str
    type: str
    binding_source_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParameterApiDescriptionModel:
        return cls(
            name_on_method=data.get("nameOnMethod", data.get("name", "")),
            name=data.get("name", ""),
            type=data.get("type", ""),
            binding_source_id=data.get("bindingSourceId") or "",
        )


@dataclass(frozen=True)
class ActionApiDescriptionModel:
    """Server-declared metadata for one remote operation.

    Attributes:
        unique_name: The key of the action in its controller, unique across overloads.
        name: The method name; proxies are matched against local methods by this name.
        http_method: The HTTP verb.
        url: The route template.
        parameters_on_method: The parameters in method declaration order.
        parameters: The parameters as bound to the request.
        return_type: The CLR full name of the returned type.
        raw: The decoded JSON this action was built from.
    """

    unique_name: str
    name: str
    http_method: str
    url: str
    parameters_on_method: list[MethodParameterApiDescriptionModel] = field(default_factory=list)
    parameters: list[ParameterApiDescriptionModel] = field(default_factory=list)
    return_type: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], unique_name: str = "") -> ActionApiDescriptionModel:
        return_value = data.get("returnValue") or {}
        return cls(
            unique_name=data.get("uniqueName") or unique_name,
            name=data["name"],
            http_method=data.get("httpMethod") or "",
            url=data.get("url") or "",
            parameters_on_method=[
                MethodParameterApiDescriptionModel.from_dict(p) for p in data.get("parametersOnMethod") or []
            ],
            parameters=[ParameterApiDescriptionModel.from_dict(p) for p in data.get("parameters") or []],
            return_type=return_value.get("type", ""),
            raw=data,
        )

    def to_embedded_json(self) -> str:
        """Serialize this action the way the client runtime deserializes it.

        Property names are PascalCase and the output is compact, so the text is stable
        for an unchanged description.

        Returns:
            str: The JSON text.
        """
        return json.dumps(helper.pascal_case_keys(self.raw), separators=(",", ":"))


@dataclass(frozen=True)
class ControllerInterfaceApiDescriptionModel:
    """A reference to an interface implemented by a controller."""

    type: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ControllerInterfaceApiDescriptionModel:
        return cls(type=data["type"])


@dataclass(frozen=True)
class ControllerApiDescriptionModel:
    """Server-side grouping of actions that corresponds to one remote service.

    The last entry of `interfaces` is the remote service interface the controller exposes.
    """

    controller_name: str
    type: str
    interfaces: list[ControllerInterfaceApiDescriptionModel] = field(default_factory=list)
    actions: dict[str, ActionApiDescriptionModel] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ControllerApiDescriptionModel:
        return cls(
            controller_name=data["controllerName"],
            type=data.get("type", ""),
            interfaces=[ControllerInterfaceApiDescriptionModel.from_dict(i) for i in data.get("interfaces") or []],
            actions={
                key: ActionApiDescriptionModel.from_dict(action, unique_name=key)
                for key, action in (data.get("actions") or {}).items()
            },
        )

    @property
    def service_interface(self) -> ControllerInterfaceApiDescriptionModel | None:
        """The remote service interface reference, if the controller declares any interface."""
        if not self.interfaces:
            return None
        return self.interfaces[-1]

    def find_action(self, method_name: str) -> ActionApiDescriptionModel | None:
        """Find the first action, in declaration order, whose name is the given method name.

        Overloads cannot be told apart; the first one wins.
        """
        return next((action for action in self.actions.values() if action.name == method_name), None)


@dataclass(frozen=True)
class ModuleApiDescriptionModel:
    """The controllers a server module exposes."""

    root_path: str
    remote_service_name: str
    controllers: dict[str, ControllerApiDescriptionModel] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleApiDescriptionModel:
        return cls(
            root_path=data.get("rootPath", ""),
            remote_service_name=data.get("remoteServiceName", ""),
            controllers={
                key: ControllerApiDescriptionModel.from_dict(controller)
                for key, controller in (data.get("controllers") or {}).items()
            },
        )


@dataclass(frozen=True)
class ApplicationApiDescriptionModel:
    """Snapshot of everything a server exposes remotely, keyed by module name."""

    modules: dict[str, ModuleApiDescriptionModel] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApplicationApiDescriptionModel:
        return cls(
            modules={
                key: ModuleApiDescriptionModel.from_dict(module) for key, module in (data.get("modules") or {}).items()
            }
        )

    @classmethod
    def from_json(cls, text: str) -> ApplicationApiDescriptionModel:
        return cls.from_dict(json.loads(text))

"""Metadata of a compiled client assembly and the assemblies it references.

A built client project is described by a JSON manifest written next to its assembly
(`Acme.BookStore.HttpApi.Client.dll` -> `Acme.BookStore.HttpApi.Client.metadata.json`).
The manifest lists, per assembly, the modules it declares and the interfaces it declares:

    {
        "assemblies": [
            {
                "name": "Acme.BookStore.HttpApi.Client",
                "modules": [
                    {
                        "name": "BookStoreHttpApiClientModule",
                        "namespace": "Acme.BookStore",
                        "dependsOn": ["Acme.BookStore.BookStoreApplicationContractsModule"]
                    }
                ],
                "interfaces": []
            }
        ]
    }

Interfaces carry every interface they implement (transitively, each with its methods)
and their own methods. Type references use CLR names, so generic types carry their arity
(`Task`1`) and list their type arguments in `genericArguments`.
"""

from __future__ import annotations

import json
import logging
import pathlib
from dataclasses import dataclass, field
from typing import Any, override

from csharp_proxy_generator import dotnet_types

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeRef:
    """A reference to a CLR type, closed over its generic arguments."""

    name: str
    namespace: str | None = None
    generic_arguments: tuple[TypeRef, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TypeRef:
        return cls(
            name=data["name"],
            namespace=data.get("namespace"),
            generic_arguments=tuple(cls.from_dict(arg) for arg in data.get("genericArguments") or []),
        )

    @property
    def full_name(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}.{self.name}"

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_arguments)

    @property
    def is_task(self) -> bool:
        """Whether this is `Task` or `Task<T>`, i.e. the return type of an asynchronous method."""
        return self.namespace == dotnet_types.TASK_NAMESPACE and self.name in dotnet_types.TASK_TYPE_NAMES

    @override
    def __str__(self) -> str:
        if not self.generic_arguments:
            return self.full_name
        return f"{self.full_name}[{', '.join(str(arg) for arg in self.generic_arguments)}]"


@dataclass(frozen=True)
class ParameterInfo:
    """A declared method parameter."""

    name: str
    type: TypeRef

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParameterInfo:
        return cls(name=data["name"], type=TypeRef.from_dict(data["type"]))


@dataclass(frozen=True)
class MethodSignature:
    """A method declared on an interface."""

    name: str
    return_type: TypeRef
    parameters: tuple[ParameterInfo, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MethodSignature:
        return cls(
            name=data["name"],
            return_type=TypeRef.from_dict(data["returnType"]),
            parameters=tuple(ParameterInfo.from_dict(p) for p in data.get("parameters") or []),
        )

    @property
    def is_async(self) -> bool:
        return self.return_type.is_task


@dataclass(frozen=True)
class InterfaceType:
    """An interface type, with its own methods and the interfaces it implements.

    Attributes:
        type: The reference to the interface itself.
        methods: Methods declared directly on the interface.
        interfaces: All implemented interfaces, flattened, with their (closed) methods.
    """

    type: TypeRef
    methods: tuple[MethodSignature, ...] = ()
    interfaces: tuple[InterfaceType, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InterfaceType:
        return cls(
            type=TypeRef.from_dict(data),
            methods=tuple(MethodSignature.from_dict(m) for m in data.get("methods") or []),
            interfaces=tuple(cls.from_dict(i) for i in data.get("interfaces") or []),
        )

    @property
    def name(self) -> str:
        return self.type.name

    @property
    def namespace(self) -> str | None:
        return self.type.namespace

    @property
    def full_name(self) -> str:
        return self.type.full_name

    @property
    def is_remote_service(self) -> bool:
        """Whether the interface is, or implements, the remote service marker interface."""
        if self.full_name == dotnet_types.REMOTE_SERVICE_INTERFACE:
            return True
        return any(i.full_name == dotnet_types.REMOTE_SERVICE_INTERFACE for i in self.interfaces)

    def all_methods(self) -> list[MethodSignature]:
        """Methods of all implemented interfaces, followed by the interface's own methods."""
        methods = [method for implemented in self.interfaces for method in implemented.methods]
        methods.extend(self.methods)
        return methods


@dataclass(frozen=True)
class ModuleInfo:
    """A module class and the modules it declares as dependencies."""

    name: str
    namespace: str
    assembly: str
    depends_on: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any], assembly: str) -> ModuleInfo:
        return cls(
            name=data["name"],
            namespace=data.get("namespace", ""),
            assembly=assembly,
            depends_on=tuple(data.get("dependsOn") or []),
        )

    @property
    def full_name(self) -> str:
        if not self.namespace:
            return self.name
        return f"{self.namespace}.{self.name}"


@dataclass
class AssemblyInfo:
    """The modules and interfaces declared in one assembly."""

    name: str
    modules: list[ModuleInfo] = field(default_factory=list)
    interfaces: list[InterfaceType] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssemblyInfo:
        name = data["name"]
        return cls(
            name=name,
            modules=[ModuleInfo.from_dict(m, name) for m in data.get("modules") or []],
            interfaces=[InterfaceType.from_dict(i) for i in data.get("interfaces") or []],
        )


class AssemblyIndex:
    """Lookup over the metadata of a client assembly and its referenced assemblies."""

    def __init__(self, assemblies: list[AssemblyInfo]):
        """Index the given assemblies.

        Args:
            assemblies (list[AssemblyInfo]): The assemblies, the client's own assembly usually first.
        """
        self._assemblies: dict[str, AssemblyInfo] = {}
        self._modules: dict[str, ModuleInfo] = {}

        for assembly in assemblies:
            self._assemblies[assembly.name] = assembly
            for module in assembly.modules:
                self._modules[module.full_name] = module

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssemblyIndex:
        return cls([AssemblyInfo.from_dict(a) for a in data.get("assemblies") or []])

    @property
    def assembly_names(self) -> list[str]:
        return list(self._assemblies)

    def module(self, full_name: str) -> ModuleInfo | None:
        return self._modules.get(full_name)

    def interfaces_in(self, assembly_name: str) -> list[InterfaceType]:
        """All interfaces declared in an assembly; empty when the assembly is unknown."""
        assembly = self._assemblies.get(assembly_name)
        if assembly is None:
            return []
        return list(assembly.interfaces)

    def startup_module(self, assembly_name: str) -> ModuleInfo:
        """The single module declared in an assembly.

        Args:
            assembly_name (str): The assembly to look in.

        Raises:
            LookupError: If the assembly declares no module or more than one.

        Returns:
            ModuleInfo: The module.
        """
        assembly = self._assemblies.get(assembly_name)
        modules = assembly.modules if assembly else []
        if len(modules) != 1:
            raise LookupError(f"Expected exactly one module in assembly '{assembly_name}', found {len(modules)}.")
        return modules[0]


def metadata_path_for(assembly_path: pathlib.Path) -> pathlib.Path:
    """The manifest path that belongs to an assembly path."""
    return assembly_path.with_suffix(dotnet_types.ASSEMBLY_METADATA_SUFFIX)


def load_assembly_index(assembly_path: pathlib.Path) -> AssemblyIndex:
    """Load the metadata manifest that was exported next to a built assembly.

    Args:
        assembly_path (pathlib.Path): Path to the built `.dll`.

    Raises:
        FileNotFoundError: If no manifest exists beside the assembly.

    Returns:
        AssemblyIndex: The index over all assemblies described by the manifest.
    """
    metadata_path = metadata_path_for(assembly_path)
    logger.info(f"Loading assembly metadata from: {metadata_path}")

    with open(metadata_path, encoding="utf8") as f:
        data = json.load(f)

    return AssemblyIndex.from_dict(data)

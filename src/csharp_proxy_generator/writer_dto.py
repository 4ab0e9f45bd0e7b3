from __future__ import annotations

import pathlib
from dataclasses import dataclass
from typing import override

from csharp_proxy_generator import dotnet_types


@dataclass(frozen=True)
class ParameterDeclaration:
    """A parameter of a generated method, with its type already resolved to C# text.

    Attributes:
        name: Parameter name, escaped if it is a C# keyword
        type_name: The C# type text (e.g. "List<BookDto>")
    """

    name: str
    type_name: str

    def to_declaration(self) -> str:
        """Format as a parameter declaration.

        Returns:
            Parameter string like "int id"
        """
        return f"{self.type_name} {self.name}"


@dataclass(frozen=True)
class GeneratedProxy:
    """The source texts generated for one remote service.

    Attributes:
        class_name: The proxy class name (e.g. "BookClientProxy")
        namespace: The namespace the proxy class is declared in
        proxy_source: Text of the generated proxy class
        extension_source: Text of the companion partial class meant for customizations
    """

    class_name: str
    namespace: str
    proxy_source: str
    extension_source: str

    def proxy_path(self, output_directory: pathlib.Path) -> pathlib.Path:
        return output_directory / f"{self.class_name}{dotnet_types.CSHARP_SUFFIX}"

    def extension_path(self, output_directory: pathlib.Path) -> pathlib.Path:
        proxy_path = self.proxy_path(output_directory)
        stem = proxy_path.name.removesuffix(dotnet_types.CSHARP_SUFFIX)
        return proxy_path.with_name(f"{stem}{dotnet_types.EXTENSION_SUFFIX}")

    @override
    def __repr__(self) -> str:
        """Return a readable representation for debugging."""
        return f"GeneratedProxy(class_name={self.class_name!r}, namespace={self.namespace!r})"

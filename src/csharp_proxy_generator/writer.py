"""Generate C# client proxy classes for remote services.

A proxy implements a remote service interface by forwarding each asynchronous method to
`ClientProxyBase.MakeRequestAsync`, passing along the server's description of the action.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from csharp_proxy_generator import dotnet_types, helper
from csharp_proxy_generator.api_model import ActionApiDescriptionModel, ControllerApiDescriptionModel
from csharp_proxy_generator.assembly import InterfaceType, MethodSignature, TypeRef
from csharp_proxy_generator.template import CLIENT_PROXY_EXTENSION_TEMPLATE, CLIENT_PROXY_TEMPLATE
from csharp_proxy_generator.writer_dto import GeneratedProxy, ParameterDeclaration

logger = logging.getLogger(__name__)

CLIENT_PROXY_POSTFIX = "ClientProxy"

SYNC_METHOD_COMMENT = (
    "//Client Proxy does not support the synchronization method, "
    "you should always use asynchronous methods as a best practice"
)


class TypeNameContext:
    """Resolves type references to C# source text and tracks the using statements the text needs.

    One context belongs to one generated file.
    """

    def __init__(self, default_namespaces: Iterable[str] = dotnet_types.DEFAULT_USING_NAMESPACES):
        """Initialize the context with the usings every proxy file starts with.

        Args:
            default_namespaces (Iterable[str]): Namespaces to import up front.
        """
        self._usings: list[str] = []
        for namespace in default_namespaces:
            self.add_using_namespace(namespace)

    @property
    def usings(self) -> list[str]:
        """The using statements, in the order they were first needed."""
        return list(self._usings)

    def add_using_namespace(self, namespace: str | None):
        """Add a using statement for a namespace, unless an existing one already covers it.

        An existing statement covers a new one when the new statement text starts with it.
        This is a plain string prefix test on the full statement, terminator included.

        Args:
            namespace (str | None): The namespace; types without a namespace need no using.
        """
        if not namespace:
            return

        using = f"using {namespace};"
        if using in self._usings or any(using.startswith(existing) for existing in self._usings):
            return

        self._usings.append(using)

    def resolve(self, type_ref: TypeRef) -> str:
        """Resolve a type reference to C# source text.

        Registers the namespaces of the type and of all its generic arguments.

        Examples:
            Int32 -> int
            Task`1[PagedResultDto`1[BookDto]] -> Task<PagedResultDto<BookDto>>

        Args:
            type_ref (TypeRef): The type to resolve.

        Returns:
            str: The type as it is written in C#.
        """
        self.add_using_namespace(type_ref.namespace)

        if not type_ref.is_generic:
            return helper.normalize_type_name(type_ref.name)

        arguments = ",".join(self.resolve(argument) for argument in type_ref.generic_arguments)
        return f"{helper.strip_generic_arity(type_ref.name)}<{arguments}>"


class ProxyWriter:
    """Writes the proxy class source for the remote services of one client project."""

    def __init__(self, root_namespace: str, folder: str = dotnet_types.DEFAULT_FOLDER):
        """Initialize the writer.

        Args:
            root_namespace (str): Namespace of the client project's module.
            folder (str): Output folder, relative to the project; also names the proxies' namespace.
        """
        self._root_namespace = root_namespace
        self._folder = folder or dotnet_types.DEFAULT_FOLDER

    @property
    def namespace(self) -> str:
        """The namespace generated proxies are declared in."""
        folder_namespace = self._folder.replace("\\", "/").strip("/").replace("/", ".")
        return f"{self._root_namespace}.{folder_namespace}"

    def _gen_parameters(self, context: TypeNameContext, method: MethodSignature) -> list[ParameterDeclaration]:
        return [
            ParameterDeclaration(name=helper.sanitize_name(parameter.name), type_name=context.resolve(parameter.type))
            for parameter in method.parameters
        ]

    def _gen_sync_method(
        self, return_type_name: str, method: MethodSignature, parameters: list[ParameterDeclaration]
    ) -> list[str]:
        param_str = ", ".join(parameter.to_declaration() for parameter in parameters)
        return [
            f"public {return_type_name} {method.name}({param_str})",
            "{",
            f"    {SYNC_METHOD_COMMENT}",
            "    throw new System.NotImplementedException();",
            "}",
        ]

    def _gen_async_method(
        self,
        context: TypeNameContext,
        action: ActionApiDescriptionModel,
        return_type_name: str,
        method: MethodSignature,
        parameters: list[ParameterDeclaration],
    ) -> list[str]:
        """Generate an asynchronous method that forwards to `MakeRequestAsync`.

        The action description is embedded as JSON so the proxy keeps calling the route
        and verb it was generated against until it is generated again.
        """
        context.add_using_namespace(dotnet_types.JSON_NAMESPACE)

        param_str = ", ".join(parameter.to_declaration() for parameter in parameters)
        arg_str = ", ".join(["action"] + [parameter.name for parameter in parameters])

        lines = [
            f"public async {return_type_name} {method.name}({param_str})",
            "{",
            "    #region ActionApiDescriptionModel JSON",
            f"    var actionApiDescription = {helper.csharp_string_literal(action.to_embedded_json())};",
            "    #endregion",
            "",
            "    var action = JsonSerializer.Deserialize<ActionApiDescriptionModel>(actionApiDescription);",
            "",
        ]

        if not method.return_type.is_generic:
            lines.append(f"    await MakeRequestAsync({arg_str});")
        else:
            payload_type_name = context.resolve(method.return_type.generic_arguments[0])
            lines.append(f"    return await MakeRequestAsync<{payload_type_name}>({arg_str});")

        lines.append("}")
        return lines

    def gen_method(self, context: TypeNameContext, action: ActionApiDescriptionModel, method: MethodSignature) -> str:
        """Generate the source of one proxy method.

        Methods returning a task forward to the server; any other method is a stub that throws,
        since remote calls are only offered asynchronously.

        Args:
            context (TypeNameContext): The type name context of the file the method goes into.
            action (ActionApiDescriptionModel): The server's description of the operation.
            method (MethodSignature): The interface method the proxy implements.

        Returns:
            str: The method source, without indentation relative to the class body.
        """
        return_type_name = context.resolve(method.return_type)
        parameters = self._gen_parameters(context, method)

        if not method.is_async:
            lines = self._gen_sync_method(return_type_name, method, parameters)
        else:
            lines = self._gen_async_method(context, action, return_type_name, method, parameters)

        return "\n".join(lines)

    def assemble(
        self,
        controller: ControllerApiDescriptionModel,
        service_types: list[InterfaceType],
    ) -> GeneratedProxy | None:
        """Generate the proxy and its extension file for one controller.

        Args:
            controller (ControllerApiDescriptionModel): The server's description of the remote service.
            service_types (list[InterfaceType]): The remote service interfaces known to the client.

        Returns:
            GeneratedProxy | None: The generated sources, or None if the client does not know the
                service interface.
        """
        service_interface = controller.service_interface
        if service_interface is None:
            return None

        service_type = next((t for t in service_types if t.full_name == service_interface.type), None)
        if service_type is None:
            logger.debug(f"No remote service interface {service_interface.type} in the client project, skipping.")
            return None

        class_name = f"{controller.controller_name}{CLIENT_PROXY_POSTFIX}"
        namespace = self.namespace

        context = TypeNameContext()
        context.add_using_namespace(service_type.namespace)

        def gen_methods() -> str:
            methods: list[str] = []
            for method in service_type.all_methods():
                action = controller.find_action(method.name)
                if action is None:
                    continue
                methods.append(self.gen_method(context, action, method))
            return "\n\n".join(methods)

        # Methods go first: they register the usings the file needs.
        proxy_source = CLIENT_PROXY_TEMPLATE.render(
            [
                ("methods", gen_methods),
                ("usings", lambda: "\n".join(context.usings)),
                ("namespace", lambda: namespace),
                ("class_name", lambda: class_name),
                ("service_interface", lambda: service_type.name),
            ]
        )

        extension_source = CLIENT_PROXY_EXTENSION_TEMPLATE.render(
            [
                ("namespace", lambda: namespace),
                ("class_name", lambda: class_name),
            ]
        )

        return GeneratedProxy(
            class_name=class_name,
            namespace=namespace,
            proxy_source=proxy_source,
            extension_source=extension_source,
        )

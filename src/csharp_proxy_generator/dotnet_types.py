"""Conventions of .NET client projects and the C# language that proxy generation relies on."""

from __future__ import annotations

CLR_TYPE_TO_CSHARP = {
    "Void": "void",
    "Boolean": "bool",
    "String": "string",
    "Int32": "int",
    "Byte": "byte",
    "SByte": "sbyte",
    "Char": "char",
    "Decimal": "decimal",
    "Double": "double",
    "Single": "float",
    "Int16": "short",
    "UInt16": "ushort",
    "UInt32": "uint",
    "Int64": "long",
    "UInt64": "ulong",
    "Object": "object",
}

CSHARP_KEYWORDS = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char", "checked",
        "class", "const", "continue", "decimal", "default", "delegate", "do", "double", "else",
        "enum", "event", "explicit", "extern", "false", "finally", "fixed", "float", "for",
        "foreach", "goto", "if", "implicit", "in", "int", "interface", "internal", "is", "lock",
        "long", "namespace", "new", "null", "object", "operator", "out", "override", "params",
        "private", "protected", "public", "readonly", "ref", "return", "sbyte", "sealed",
        "short", "sizeof", "stackalloc", "static", "string", "struct", "switch", "this", "throw",
        "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe", "ushort", "using",
        "virtual", "void", "volatile", "while",
    }
)  # fmt: skip

# Marker separating a generic type's base name from its arity, e.g. List`1.
GENERIC_ARITY_MARKER = "`"

TASK_NAMESPACE = "System.Threading.Tasks"
TASK_TYPE_NAMES = ("Task", "Task`1")

JSON_NAMESPACE = "System.Text.Json"

REMOTE_SERVICE_INTERFACE = "Volo.Abp.IRemoteService"

PROXY_MODULE_SUFFIXES = ("HttpApiClientModule", "ApplicationContractsModule")

APP_SERVICE_POSTFIX = "APPSERVICE"

PROJECT_FILE_PATTERN = "*HttpApi.Client.csproj"

BUILD_CONFIGURATION = "Debug"

ASSEMBLY_METADATA_SUFFIX = ".metadata.json"

DEFAULT_FOLDER = "ClientProxies"

DEFAULT_MODULE = "app"

DEFAULT_USING_NAMESPACES = (
    "System",
    "Volo.Abp.Application.Dtos",
    "Volo.Abp.Http.Client",
    "Volo.Abp.Http.Modeling",
)

CSHARP_SUFFIX = ".cs"
EXTENSION_SUFFIX = ".extension.cs"

"""Discovery of the remote service interfaces a client project can build proxies for."""

from __future__ import annotations

import logging

from csharp_proxy_generator import dotnet_types, helper
from csharp_proxy_generator.assembly import AssemblyIndex, InterfaceType, ModuleInfo

logger = logging.getLogger(__name__)


def is_proxy_module(module_full_name: str) -> bool:
    """Whether a depended module is one whose assembly can hold remote service contracts."""
    return helper.simple_name(module_full_name).endswith(dotnet_types.PROXY_MODULE_SUFFIXES)


def find_remote_service_types(startup_module: ModuleInfo, index: AssemblyIndex) -> list[InterfaceType]:
    """Collect the remote service interfaces reachable from a startup module.

    The interfaces of the startup module's assembly are collected first, then those of
    every depended client or contracts module, transitively. Every module is visited once,
    so dependency cycles terminate.

    Args:
        startup_module (ModuleInfo): The module declared by the client project.
        index (AssemblyIndex): Metadata of the client assembly and its references.

    Returns:
        list[InterfaceType]: The remote service interfaces, unique by full name, in discovery order.
    """
    service_types: dict[str, InterfaceType] = {}
    visited: set[str] = set()
    worklist = [startup_module]

    while worklist:
        module = worklist.pop(0)
        if module.full_name in visited:
            continue
        visited.add(module.full_name)

        for interface in index.interfaces_in(module.assembly):
            if interface.is_remote_service:
                service_types.setdefault(interface.full_name, interface)

        for dependency_name in module.depends_on:
            if not is_proxy_module(dependency_name) or dependency_name in visited:
                continue

            dependency = index.module(dependency_name)
            if dependency is None:
                logger.debug(f"Module {dependency_name} is not described by the assembly metadata, skipping.")
                continue

            worklist.append(dependency)

    logger.info(f"Found {len(service_types)} remote service interface(s).")
    return list(service_types.values())

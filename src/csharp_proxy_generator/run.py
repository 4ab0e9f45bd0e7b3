"""Top-level module for proxy generation."""

from __future__ import annotations

import argparse
import glob
import logging
import os.path
import pathlib
import shutil
import xml.etree.ElementTree as ElementTree
from collections.abc import Callable
from typing import Protocol

from csharp_proxy_generator import dotnet_types
from csharp_proxy_generator.api_model import ApplicationApiDescriptionModel, ControllerApiDescriptionModel
from csharp_proxy_generator.assembly import AssemblyIndex, load_assembly_index, metadata_path_for
from csharp_proxy_generator.client import ApiDescriptionClient
from csharp_proxy_generator.discovery import find_remote_service_types
from csharp_proxy_generator.writer import ProxyWriter
from csharp_proxy_generator.writer_dto import GeneratedProxy

logger = logging.getLogger(__name__)

GENERATE_COMMAND = "generate"
REMOVE_COMMAND = "remove"


class CliUsageError(Exception):
    """Raised when the command was invoked in a way that cannot work, e.g. on a missing directory."""

    pass


class ApiDescriptionSource(Protocol):
    """Anything that can provide the application API description model of a server."""

    def get_application_api_description_model(self) -> ApplicationApiDescriptionModel: ...


AssemblyLoader = Callable[[pathlib.Path], AssemblyIndex]


def check_work_directory(directory: str) -> pathlib.Path:
    """Validate the working directory and find its client project file.

    Args:
        directory (str): The working directory.

    Raises:
        CliUsageError: If the directory does not exist or does not hold exactly one client project file.

    Returns:
        pathlib.Path: Path to the project file.
    """
    if not os.path.isdir(directory):
        raise CliUsageError("Specified directory does not exist.")

    project_files = sorted(glob.glob(os.path.join(glob.escape(directory), dotnet_types.PROJECT_FILE_PATTERN)))
    if not project_files:
        raise CliUsageError(
            "No project file found in the directory. The working directory must have a HttpApi.Client project file."
        )

    if len(project_files) > 1:
        raise CliUsageError(
            f"Found {len(project_files)} HttpApi.Client project files in the directory, expected exactly one: "
            + ", ".join(os.path.basename(p) for p in project_files)
        )

    return pathlib.Path(project_files[0])


def get_target_framework_version(project_file_path: pathlib.Path) -> str:
    """Read the target framework of a project file.

    Multi-targeting projects use their first framework.

    Args:
        project_file_path (pathlib.Path): Path to the `.csproj` file.

    Raises:
        CliUsageError: If the file cannot be parsed or declares no target framework.

    Returns:
        str: The target framework moniker, e.g. "net8.0".
    """
    try:
        document = ElementTree.parse(project_file_path)
    except (ElementTree.ParseError, OSError) as e:
        raise CliUsageError(f"Could not read project file {project_file_path}: {e}") from e

    root = document.getroot()
    target_framework = root.findtext(".//TargetFramework")
    if target_framework and target_framework.strip():
        return target_framework.strip()

    target_frameworks = root.findtext(".//TargetFrameworks")
    if target_frameworks:
        frameworks = [framework.strip() for framework in target_frameworks.split(";") if framework.strip()]
        if frameworks:
            return frameworks[0]

    raise CliUsageError(f"No TargetFramework found in project file {project_file_path}.")


def get_assembly_path(work_directory: str, project_file_path: pathlib.Path) -> pathlib.Path:
    """The path the project's assembly is built to."""
    target_framework = get_target_framework_version(project_file_path)
    return (
        pathlib.Path(work_directory)
        / "bin"
        / dotnet_types.BUILD_CONFIGURATION
        / target_framework
        / f"{project_file_path.stem}.dll"
    )


def get_output_folder(args: argparse.Namespace) -> str:
    folder = getattr(args, "folder", None)
    if not folder or not folder.strip():
        return dotnet_types.DEFAULT_FOLDER
    return folder


def remove_client_proxy_files(args: argparse.Namespace) -> None:
    """Delete the generated proxy folder. Nothing happens if it does not exist.

    Args:
        args (argparse.Namespace): The run arguments.
    """
    folder_path = os.path.join(args.working_directory, get_output_folder(args))

    if os.path.isdir(folder_path):
        shutil.rmtree(folder_path)
        logger.info(f"Removed client proxies from: {folder_path}")
    else:
        logger.info(f"No client proxies to remove at: {folder_path}")


def should_generate_proxy(controller: ControllerApiDescriptionModel) -> bool:
    """Whether a controller exposes an application service that warrants a proxy."""
    service_interface = controller.service_interface
    if service_interface is None:
        return False

    return service_interface.type.upper().endswith(dotnet_types.APP_SERVICE_POSTFIX)


def write_client_proxy_files(proxy: GeneratedProxy, output_directory: pathlib.Path) -> None:
    """Write a proxy and its extension file, replacing whatever was there.

    Args:
        proxy (GeneratedProxy): The generated sources.
        output_directory (pathlib.Path): The folder to write into; created if needed.
    """
    output_directory.mkdir(parents=True, exist_ok=True)

    for path, source in (
        (proxy.proxy_path(output_directory), proxy.proxy_source),
        (proxy.extension_path(output_directory), proxy.extension_source),
    ):
        with open(path, "w", encoding="utf8", newline="\n") as f:
            f.write(source)
        logger.info(f"Wrote: {path}")


def _load_assembly(assembly_path: pathlib.Path, load_assembly: AssemblyLoader) -> AssemblyIndex:
    try:
        return load_assembly(assembly_path)
    except FileNotFoundError as e:
        raise CliUsageError(
            f"No assembly metadata found at {metadata_path_for(assembly_path)}. Build the client project first."
        ) from e


def generate_client_proxies(
    args: argparse.Namespace,
    project_file_path: pathlib.Path,
    api_client: ApiDescriptionSource | None,
    load_assembly: AssemblyLoader,
) -> list[GeneratedProxy]:
    """Generate proxies for every application service of the configured module.

    Args:
        args (argparse.Namespace): The run arguments.
        project_file_path (pathlib.Path): The client project file.
        api_client (ApiDescriptionSource | None): Source of the API description; an HTTP client for
            `args.url` is created if omitted.
        load_assembly (AssemblyLoader): Loads the metadata of the built assembly.

    Raises:
        CliUsageError: If the project is not built, has no single module, no url was given,
            or the server does not know the module.

    Returns:
        list[GeneratedProxy]: The proxies that were written.
    """
    project_name = project_file_path.stem
    assembly_path = get_assembly_path(args.working_directory, project_file_path)
    index = _load_assembly(assembly_path, load_assembly)

    try:
        startup_module = index.startup_module(project_name)
    except LookupError as e:
        raise CliUsageError(str(e)) from e

    service_types = find_remote_service_types(startup_module, index)

    if api_client is None:
        if not getattr(args, "url", None):
            raise CliUsageError("The url of the remote server is required to generate proxies.")
        api_client = ApiDescriptionClient(args.url)

    api_description = api_client.get_application_api_description_model()

    module_api_description = api_description.modules.get(args.module)
    if module_api_description is None:
        raise CliUsageError(f"Module '{args.module}' was not found in the API description of the server.")

    folder = get_output_folder(args)
    output_directory = pathlib.Path(args.working_directory) / folder
    writer = ProxyWriter(startup_module.namespace, folder)

    proxies: list[GeneratedProxy] = []
    for controller in module_api_description.controllers.values():
        if not should_generate_proxy(controller):
            continue

        proxy = writer.assemble(controller, service_types)
        if proxy is None:
            continue

        write_client_proxy_files(proxy, output_directory)
        proxies.append(proxy)

    logger.info(f"Generated {len(proxies)} client proxy(ies) in: {output_directory}")
    return proxies


def run(
    args: argparse.Namespace,
    api_client: ApiDescriptionSource | None = None,
    load_assembly: AssemblyLoader = load_assembly_index,
) -> None:
    """Run the command for the given arguments.

    Args:
        args (argparse.Namespace): The arguments of the run.
        api_client (ApiDescriptionSource | None): Source of the API description, defaults to an HTTP client.
        load_assembly (AssemblyLoader): Loads the metadata of the built client assembly.

    Raises:
        CliUsageError: If the run was invoked in a way that cannot work.
    """
    project_file_path = check_work_directory(args.working_directory)
    logger.info(f"Using project file: {project_file_path}")

    if getattr(args, "command", GENERATE_COMMAND) == REMOVE_COMMAND:
        remove_client_proxy_files(args)
        return

    generate_client_proxies(args, project_file_path, api_client, load_assembly)

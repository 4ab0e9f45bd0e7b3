"""Pytest configuration and fixtures for C# proxy generator tests.

The fixtures describe a small "BookStore" solution: a built HttpApi.Client project whose
contracts declare `IBookAppService`, and a server that exposes it next to services the client
does not know about.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from csharp_proxy_generator.api_model import ApplicationApiDescriptionModel
from csharp_proxy_generator.assembly import AssemblyIndex

PROJECT_NAME = "Acme.BookStore.HttpApi.Client"
CONTRACTS_ASSEMBLY = "Acme.BookStore.Application.Contracts"
TARGET_FRAMEWORK = "net8.0"

CSPROJ_TEMPLATE = """<Project Sdk="Microsoft.NET.Sdk">

  <PropertyGroup>
    <TargetFramework>{target_framework}</TargetFramework>
    <RootNamespace>Acme.BookStore</RootNamespace>
  </PropertyGroup>

</Project>
"""


def clr_type(name: str, namespace: str | None = "System", *generic_arguments: dict[str, Any]) -> dict[str, Any]:
    """Build the manifest entry of a type reference."""
    data: dict[str, Any] = {"name": name, "namespace": namespace}
    if generic_arguments:
        data["genericArguments"] = list(generic_arguments)
    return data


def task_of(payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build `Task` or `Task<payload>`."""
    if payload is None:
        return clr_type("Task", "System.Threading.Tasks")
    return clr_type("Task`1", "System.Threading.Tasks", payload)


def method(name: str, return_type: dict[str, Any], **parameters: dict[str, Any]) -> dict[str, Any]:
    """Build the manifest entry of an interface method."""
    return {
        "name": name,
        "returnType": return_type,
        "parameters": [{"name": param_name, "type": param_type} for param_name, param_type in parameters.items()],
    }


INT32 = clr_type("Int32")
GUID = clr_type("Guid")
BOOK_DTO = clr_type("BookDto", "Acme.BookStore.Books")
CREATE_BOOK_DTO = clr_type("CreateUpdateBookDto", "Acme.BookStore.Books")
PAGED_REQUEST = clr_type("PagedAndSortedResultRequestDto", "Volo.Abp.Application.Dtos")
PAGED_BOOKS = clr_type("PagedResultDto`1", "Volo.Abp.Application.Dtos", BOOK_DTO)

REMOTE_SERVICE = {"name": "IRemoteService", "namespace": "Volo.Abp", "methods": []}
APPLICATION_SERVICE = {
    "name": "IApplicationService",
    "namespace": "Volo.Abp.Application.Services",
    "methods": [],
}


def action(unique_name: str, name: str, http_method: str, url: str, **parameters: str) -> dict[str, Any]:
    """Build an action description the way the server serializes it."""
    return {
        "uniqueName": unique_name,
        "name": name,
        "httpMethod": http_method,
        "url": url,
        "supportedVersions": [],
        "parametersOnMethod": [
            {
                "name": param_name,
                "typeAsString": f"{param_type}, System.Private.CoreLib",
                "type": param_type,
                "typeSimple": param_type.rsplit(".", 1)[-1].lower(),
                "isOptional": False,
                "defaultValue": None,
            }
            for param_name, param_type in parameters.items()
        ],
        "parameters": [
            {
                "nameOnMethod": param_name,
                "name": param_name,
                "jsonName": None,
                "type": param_type,
                "typeSimple": param_type.rsplit(".", 1)[-1].lower(),
                "isOptional": False,
                "defaultValue": None,
                "constraintTypes": None,
                "bindingSourceId": "Path",
                "descriptorName": "",
            }
            for param_name, param_type in parameters.items()
        ],
        "returnValue": {"type": "Acme.BookStore.Books.BookDto", "typeSimple": "Acme.BookStore.Books.BookDto"},
        "allowAnonymous": None,
        "implementFrom": "Acme.BookStore.Books.IBookAppService",
    }


@pytest.fixture
def assembly_metadata() -> dict[str, Any]:
    """Manifest of the built client assembly and the contracts assembly it references."""
    return {
        "assemblies": [
            {
                "name": PROJECT_NAME,
                "modules": [
                    {
                        "name": "BookStoreHttpApiClientModule",
                        "namespace": "Acme.BookStore",
                        "dependsOn": [
                            "Acme.BookStore.BookStoreApplicationContractsModule",
                            "Volo.Abp.Http.Client.AbpHttpClientModule",
                        ],
                    }
                ],
                "interfaces": [],
            },
            {
                "name": CONTRACTS_ASSEMBLY,
                "modules": [
                    {
                        "name": "BookStoreApplicationContractsModule",
                        "namespace": "Acme.BookStore",
                        "dependsOn": ["Acme.BookStore.BookStoreDomainSharedModule"],
                    }
                ],
                "interfaces": [
                    {
                        "name": "IBookAppService",
                        "namespace": "Acme.BookStore.Books",
                        "interfaces": [APPLICATION_SERVICE, REMOTE_SERVICE],
                        "methods": [
                            method("GetAsync", task_of(BOOK_DTO), id=INT32),
                            method("GetListAsync", task_of(PAGED_BOOKS), input=PAGED_REQUEST),
                            method("CreateAsync", task_of(BOOK_DTO), input=CREATE_BOOK_DTO),
                            method("DeleteAsync", task_of(), id=INT32),
                            method("GetCount", INT32),
                            method("GetLocalOnlyAsync", task_of(BOOK_DTO)),
                        ],
                    },
                    {
                        "name": "IBookLookup",
                        "namespace": "Acme.BookStore.Books",
                        "interfaces": [],
                        "methods": [method("FindAsync", task_of(BOOK_DTO), id=INT32)],
                    },
                ],
            },
        ]
    }


@pytest.fixture
def assembly_index(assembly_metadata) -> AssemblyIndex:
    return AssemblyIndex.from_dict(assembly_metadata)


@pytest.fixture
def api_description() -> dict[str, Any]:
    """The API description the server publishes, in its JSON form."""
    return {
        "modules": {
            "app": {
                "rootPath": "app",
                "remoteServiceName": "Default",
                "controllers": {
                    "Acme.BookStore.Books.BookAppService": {
                        "controllerName": "Book",
                        "type": "Acme.BookStore.Books.BookAppService",
                        "interfaces": [{"type": "Acme.BookStore.Books.IBookAppService"}],
                        "actions": {
                            "GetAsyncById": action(
                                "GetAsyncById", "GetAsync", "GET", "api/app/book/{id}", id="System.Int32"
                            ),
                            "GetListAsyncByInput": action(
                                "GetListAsyncByInput",
                                "GetListAsync",
                                "GET",
                                "api/app/book",
                                input="Volo.Abp.Application.Dtos.PagedAndSortedResultRequestDto",
                            ),
                            "CreateAsyncByInput": action(
                                "CreateAsyncByInput",
                                "CreateAsync",
                                "POST",
                                "api/app/book",
                                input="Acme.BookStore.Books.CreateUpdateBookDto",
                            ),
                            "DeleteAsyncById": action(
                                "DeleteAsyncById", "DeleteAsync", "DELETE", "api/app/book/{id}", id="System.Int32"
                            ),
                            "GetCount": action("GetCount", "GetCount", "GET", "api/app/book/count"),
                            "GetServerOnlyAsync": action(
                                "GetServerOnlyAsync", "GetServerOnlyAsync", "GET", "api/app/book/server-only"
                            ),
                        },
                    },
                    "Acme.BookStore.Orders.OrderAppService": {
                        "controllerName": "Order",
                        "type": "Acme.BookStore.Orders.OrderAppService",
                        "interfaces": [{"type": "Acme.BookStore.Orders.IOrderAppService"}],
                        "actions": {
                            "GetAsync": action("GetAsync", "GetAsync", "GET", "api/app/order/{id}", id="System.Int32")
                        },
                    },
                    "Acme.BookStore.Controllers.HealthController": {
                        "controllerName": "Health",
                        "type": "Acme.BookStore.Controllers.HealthController",
                        "interfaces": [],
                        "actions": {},
                    },
                    "Acme.BookStore.Controllers.LookupController": {
                        "controllerName": "Lookup",
                        "type": "Acme.BookStore.Controllers.LookupController",
                        "interfaces": [{"type": "Acme.BookStore.Books.IBookLookup"}],
                        "actions": {
                            "FindAsync": action("FindAsync", "FindAsync", "GET", "api/lookup/{id}", id="System.Int32")
                        },
                    },
                },
            }
        }
    }


@pytest.fixture
def api_model(api_description) -> ApplicationApiDescriptionModel:
    return ApplicationApiDescriptionModel.from_dict(api_description)


class FakeApiClient:
    """Test double for :class:`csharp_proxy_generator.client.ApiDescriptionClient`."""

    def __init__(self, model: ApplicationApiDescriptionModel) -> None:
        self.model = model
        self.calls = 0

    def get_application_api_description_model(self) -> ApplicationApiDescriptionModel:
        self.calls += 1
        return self.model


@pytest.fixture
def fake_api_client(api_model) -> FakeApiClient:
    return FakeApiClient(api_model)


@pytest.fixture
def client_project(tmp_path, assembly_metadata) -> Path:
    """A built HttpApi.Client project with its assembly metadata exported."""
    project_dir = tmp_path / "Acme.BookStore.HttpApi.Client"
    project_dir.mkdir()
    (project_dir / f"{PROJECT_NAME}.csproj").write_text(
        CSPROJ_TEMPLATE.format(target_framework=TARGET_FRAMEWORK), encoding="utf8"
    )

    build_dir = project_dir / "bin" / "Debug" / TARGET_FRAMEWORK
    build_dir.mkdir(parents=True)
    (build_dir / f"{PROJECT_NAME}.metadata.json").write_text(json.dumps(assembly_metadata), encoding="utf8")

    return project_dir

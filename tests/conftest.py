"""Shared fixtures: a small petstore document in the shape of the sample service."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from swagger_scaffold.codegen.core.config import GeneratorConfig
from swagger_scaffold.codegen.core.formats import create_default_registry
from swagger_scaffold.codegen.languages.go.types import GoTypeMapper
from swagger_scaffold.spec import SpecDocument


PETSTORE: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "basePath": "/v1",
    "paths": {
        "/pet": {
            "post": {
                "tags": ["pets"],
                "summary": "Add a new pet to the store",
                "operationId": "addPet",
                "parameters": [
                    {"in": "body", "name": "body", "required": True, "schema": {"$ref": "#/definitions/Pet"}}
                ],
                "responses": {"405": {"description": "Invalid input"}},
            },
            "put": {
                "tags": ["pets"],
                "operationId": "updatePet",
                "parameters": [
                    {"in": "body", "name": "body", "required": True, "schema": {"$ref": "#/definitions/Pet"}}
                ],
                "responses": {"400": {"description": "Invalid ID supplied"}},
            },
        },
        "/pet/findByStatus": {
            "get": {
                "tags": ["pets"],
                "operationId": "findPetsByStatus",
                "parameters": [
                    {
                        "in": "query",
                        "name": "status",
                        "required": True,
                        "type": "array",
                        "items": {"type": "string"},
                    }
                ],
                "responses": {
                    "200": {
                        "description": "successful operation",
                        "schema": {"type": "array", "items": {"$ref": "#/definitions/Pet"}},
                    }
                },
            }
        },
        "/pet/{petId}": {
            "get": {
                "tags": ["pets"],
                "operationId": "getPetById",
                "parameters": [
                    {"in": "path", "name": "petId", "required": True, "type": "integer", "format": "int64"}
                ],
                "responses": {
                    "200": {"description": "successful operation", "schema": {"$ref": "#/definitions/Pet"}}
                },
            },
            "post": {
                "tags": ["pets"],
                "operationId": "updatePetWithForm",
                "parameters": [
                    {"in": "path", "name": "petId", "required": True, "type": "string"},
                    {"in": "formData", "name": "name", "required": True, "type": "string"},
                    {"in": "formData", "name": "status", "required": False, "type": "string"},
                ],
                "responses": {"405": {"description": "Invalid input"}},
            },
            "delete": {
                "tags": ["pets"],
                "operationId": "deletePet",
                "parameters": [
                    {"in": "header", "name": "api_key", "required": False, "type": "string"},
                    {"in": "path", "name": "petId", "required": True, "type": "integer", "format": "int64"},
                ],
                "responses": {"400": {"description": "Invalid pet value"}},
            },
        },
        "/store/order": {
            "post": {
                "tags": ["store"],
                "operationId": "placeOrder",
                "parameters": [
                    {"in": "body", "name": "body", "required": True, "schema": {"$ref": "#/definitions/Order"}}
                ],
                "responses": {
                    "200": {"description": "successful operation", "schema": {"$ref": "#/definitions/Order"}}
                },
            }
        },
        "/store/order/{orderId}": {
            "get": {
                "tags": ["store"],
                "operationId": "getOrderById",
                "parameters": [
                    {"in": "path", "name": "orderId", "required": True, "type": "integer", "format": "int64"}
                ],
                "responses": {
                    "200": {"description": "successful operation", "schema": {"$ref": "#/definitions/Order"}}
                },
            },
            "delete": {
                "tags": ["store"],
                "operationId": "deleteOrder",
                "parameters": [{"in": "path", "name": "orderId", "required": True, "type": "string"}],
                "responses": {"404": {"description": "Order not found"}},
            },
        },
        "/users/login": {
            "get": {
                "tags": ["users"],
                "operationId": "loginUser",
                "parameters": [
                    {"in": "query", "name": "username", "required": True, "type": "string"},
                    {"in": "query", "name": "password", "required": True, "type": "string"},
                ],
                "responses": {"200": {"description": "successful operation", "schema": {"type": "string"}}},
            }
        },
        "/users/search": {
            "get": {
                "tags": ["users"],
                "operationId": "searchUsers",
                "parameters": [
                    {"in": "query", "name": "limit", "required": False, "type": "integer", "format": "int32"}
                ],
                "responses": {
                    "200": {
                        "description": "successful operation",
                        "schema": {"type": "array", "items": {"$ref": "#/definitions/User"}},
                    }
                },
            }
        },
    },
    "definitions": {
        "Category": {
            "type": "object",
            "properties": {
                "id": {"type": "integer", "format": "int64"},
                "name": {"type": "string"},
            },
        },
        "Tag": {
            "type": "object",
            "properties": {
                "id": {"type": "integer", "format": "int64"},
                "name": {"type": "string"},
            },
        },
        "Pet": {
            "type": "object",
            "required": ["name", "photoUrls"],
            "properties": {
                "id": {"type": "integer", "format": "int64"},
                "category": {"$ref": "#/definitions/Category"},
                "name": {
                    "type": "string",
                    "maxLength": 30,
                    "minLength": 6,
                    "pattern": "^[a-zA-Z]+$",
                    "example": "doggie",
                },
                "photoUrls": {"type": "array", "items": {"type": "string"}},
                "tags": {"type": "array", "items": {"$ref": "#/definitions/Tag"}},
                "status": {
                    "type": "string",
                    "description": "pet status in the store",
                    "enum": ["available", "pending", "sold"],
                },
            },
        },
        "Order": {
            "type": "object",
            "required": ["id"],
            "properties": {
                "id": {"type": "integer", "format": "int64"},
                "petId": {"type": "integer", "format": "int64", "minimum": 10},
                "quantity": {
                    "type": "integer",
                    "format": "int32",
                    "multipleOf": 2,
                    "minimum": 1,
                    "maximum": 10,
                    "enum": [1, 2, 3],
                },
                "shipDate": {"type": "string", "format": "date-time"},
                "status": {"type": "string", "enum": ["suspend", "shipment", "received"]},
                "complete": {"type": "boolean"},
                "contact": {"type": "string", "format": "email"},
            },
        },
        "User": {
            "type": "object",
            "required": ["username"],
            "properties": {
                "username": {"type": "string", "minLength": 3},
                "email": {"type": "string", "format": "email"},
                "phone": {"type": "string"},
                "userStatus": {"type": "integer", "format": "int32"},
            },
        },
    },
}


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """A fresh copy of the raw petstore mapping, safe to mutate."""
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def petstore(petstore_raw) -> SpecDocument:
    """The petstore parsed into a SpecDocument."""
    return SpecDocument.from_dict(petstore_raw)


@pytest.fixture
def config() -> GeneratorConfig:
    return GeneratorConfig()


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def type_mapper() -> GoTypeMapper:
    return GoTypeMapper()

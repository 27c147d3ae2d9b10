from typing import Any, Callable, List, Optional, Type
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.core.bases.base_service import BaseService
from src.core.response.handlers import success_response, error_response
from src.core import exceptions


class BaseRouter:
    """Base router class with JSON CRUD endpoints addressed by key."""

    def __init__(
        self,
        get_service: Callable[..., BaseService],
        tags: Optional[List[str]] = None,
        prefix: str = "",
        create_schema: Optional[Type[BaseModel]] = None,
        update_schema: Optional[Type[BaseModel]] = None,
        key_type: Type = str,
        dependencies: Optional[List[Any]] = None,
    ):
        self.get_service = get_service
        self.tags = tags or [self.__class__.__name__.replace("Router", "")]
        self.prefix = prefix
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.key_type = key_type

        self.router = APIRouter(
            prefix=self.prefix,
            tags=self.tags,  # type:ignore
            dependencies=dependencies or [],
        )

        self._register_routes()

    def _register_routes(self) -> None:
        """Register all CRUD routes."""
        self._register_list()
        self._register_create()
        self._register_get_by_key()
        self._register_update()
        self._register_delete()

    @staticmethod
    def _error(e: exceptions.AppException) -> JSONResponse:
        return error_response(
            error_code=e.error_code,
            message=str(e.detail),
            status_code=e.status_code,
            details=[detail.model_dump() for detail in e.error_details],
        )

    def _register_list(self) -> None:
        """Register GET / route."""
        @self.router.get(
            "",
            summary="List items",
            responses={
                200: {"description": "Items retrieved successfully"},
                500: {"description": "Internal server error"},
            },
        )
        async def list_items(service: BaseService = Depends(self.get_service)):
            try:
                result = await service.get_list()
                return success_response(data=result["data"], message=result["message"])
            except exceptions.AppException as e:
                return self._error(e)

    def _register_get_by_key(self) -> None:
        """Register GET /{key} route."""
        key_type = self.key_type

        @self.router.get(
            "/{key}",
            summary="Get item by key",
            responses={
                200: {"description": "Item retrieved successfully"},
                404: {"description": "Item not found"},
            },
        )
        async def get_by_key(
            key: key_type,  # type: ignore
            service: BaseService = Depends(self.get_service),
        ):
            try:
                result = await service.get_by_key(key)
                return success_response(data=result["data"], message=result["message"])
            except exceptions.AppException as e:
                return self._error(e)

    def _register_create(self) -> None:
        """Register POST / route."""
        if not self.create_schema:
            return
        create_schema = self.create_schema

        @self.router.post(
            "",
            status_code=status.HTTP_201_CREATED,
            summary="Create new item",
            responses={
                201: {"description": "Item created successfully"},
                409: {"description": "Key already taken"},
                422: {"description": "Validation error"},
            },
        )
        async def create_item(
            item_data: create_schema,  # type: ignore
            service: BaseService = Depends(self.get_service),
        ):
            try:
                result = await service.create(item_data)
                return success_response(
                    data=result["data"],
                    message=result["message"],
                    status_code=status.HTTP_201_CREATED,
                )
            except exceptions.AppException as e:
                return self._error(e)

    def _register_update(self) -> None:
        """Register PUT /{key} route."""
        if not self.update_schema:
            return
        update_schema = self.update_schema
        key_type = self.key_type

        @self.router.put(
            "/{key}",
            summary="Update item",
            responses={
                200: {"description": "Item updated successfully"},
                404: {"description": "Item not found"},
                422: {"description": "Validation error"},
            },
        )
        async def update_item(
            key: key_type,  # type: ignore
            item_data: update_schema,  # type: ignore
            service: BaseService = Depends(self.get_service),
        ):
            try:
                result = await service.update(key, item_data)
                return success_response(data=result["data"], message=result["message"])
            except exceptions.AppException as e:
                return self._error(e)

    def _register_delete(self) -> None:
        """Register DELETE /{key} route."""
        key_type = self.key_type

        @self.router.delete(
            "/{key}",
            summary="Delete item",
            responses={
                200: {"description": "Item deleted successfully"},
                404: {"description": "Item not found"},
            },
        )
        async def delete_item(
            key: key_type,  # type: ignore
            service: BaseService = Depends(self.get_service),
        ):
            try:
                result = await service.delete(key)
                return success_response(data=result["data"], message=result["message"])
            except exceptions.AppException as e:
                return self._error(e)

    def get_router(self) -> APIRouter:
        """Get the FastAPI router instance."""
        return self.router

from typing import Any, Dict, Generic, TypeVar

from pydantic import BaseModel
from sqlmodel import SQLModel

from src.core.bases.base_repository import BaseRepository
from src.core.exceptions import NotFoundException

T = TypeVar("T", bound=SQLModel)


class BaseService(Generic[T]):
    """Wraps a repository with existence checks.

    Results are dicts with ``data`` and ``message`` keys, ready for the
    response helpers.
    """

    def __init__(self, repository: BaseRepository[T]):
        self.repository = repository

    @property
    def model_name(self) -> str:
        return self.repository.model.__name__

    async def _get_or_404(self, key: Any) -> T:
        item = await self.repository.get_by_key(key)
        if item is None:
            raise NotFoundException(f"{self.model_name} not found: {key}")
        return item

    async def get_list(self) -> Dict[str, Any]:
        items = await self.repository.get_all()
        return {"data": items, "message": f"{self.model_name} list retrieved"}

    async def get_by_key(self, key: Any) -> Dict[str, Any]:
        item = await self._get_or_404(key)
        return {"data": item, "message": f"{self.model_name} retrieved"}

    async def create(self, data: BaseModel) -> Dict[str, Any]:
        item = await self.repository.create(data.model_dump())
        return {"data": item, "message": f"{self.model_name} created"}

    async def update(self, key: Any, data: BaseModel) -> Dict[str, Any]:
        await self._get_or_404(key)
        item = await self.repository.update_by_key(key, data.model_dump(exclude_unset=True))
        return {"data": item, "message": f"{self.model_name} updated"}

    async def delete(self, key: Any) -> Dict[str, Any]:
        await self._get_or_404(key)
        await self.repository.delete_by_key(key)
        return {"data": None, "message": f"{self.model_name} deleted"}

"""
CRUD 基类模块

封装单表的通用增删改查，实体 CRUD 类在此基础上扩展查询
"""
from typing import Generic, TypeVar, Type, Optional, List, Any, Dict, Iterable
from pydantic import BaseModel as PydanticModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """
    CRUD 基类

    所有写操作只 flush 不 commit，事务由 get_db 依赖统一提交
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: str) -> Optional[ModelType]:
        """根据 ID 获取单条记录"""
        result = await db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_many(self, db: AsyncSession, ids: Iterable[str]) -> Dict[str, ModelType]:
        """按 ID 批量获取，返回 {id: obj}"""
        ids = {i for i in ids if i}
        if not ids:
            return {}
        result = await db.execute(
            select(self.model).where(self.model.id.in_(ids))
        )
        return {obj.id: obj for obj in result.scalars().all()}

    async def get_all(self, db: AsyncSession) -> List[ModelType]:
        """获取全部记录（导出用）"""
        result = await db.execute(
            select(self.model).order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: PydanticModel | Dict[str, Any]
    ) -> ModelType:
        """创建记录，支持传入 Schema 或 dict"""
        if isinstance(obj_in, dict):
            data = obj_in
        else:
            data = obj_in.model_dump()
        db_obj = self.model(**data)

        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: PydanticModel | Dict[str, Any]
    ) -> ModelType:
        """
        更新记录

        支持传入 Schema 或 dict，值为 None 的字段不覆盖
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if value is not None:
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, db_obj: ModelType) -> None:
        """删除记录"""
        await db.delete(db_obj)
        await db.flush()

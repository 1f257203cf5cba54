"""
测试配置文件

提供测试用的 fixtures：内存数据库、测试客户端、测试数据工厂等
"""
import os
import tempfile

# 必须在导入 jobboard 之前设置，配置在导入时读取
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="jobboard-test-uploads-"))

from typing import AsyncGenerator, Optional  # noqa: E402
from dataclasses import dataclass, field  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from jobboard.core.database import Base, get_db  # noqa: E402
from jobboard.main import create_app  # noqa: E402
from jobboard import models  # noqa: E402,F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

JOB_DESCRIPTION = (
    "Help our customers at the front desk, answer phone calls and keep "
    "the store organised during afternoon shifts."
)


# ========== 测试数据工厂 ==========

@dataclass
class Account:
    """已注册账号"""
    id: str
    email: str
    role: str
    token: str
    password: str = "secret123"

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}


@dataclass
class DataFactory:
    """
    测试数据工厂类

    集中管理测试数据创建，避免各测试文件重复代码
    字段变更时只需修改此处
    """
    client: AsyncClient
    _counter: int = field(default=0, repr=False)

    def _next_id(self) -> str:
        """生成唯一后缀，避免数据冲突"""
        self._counter += 1
        return str(self._counter)

    async def register(self, role: str = "student", **overrides) -> Account:
        """注册账号（资料为空）"""
        suffix = self._next_id()
        data = {
            "email": f"{role}{suffix}@example.com",
            "password": "secret123",
            "confirmPassword": "secret123",
            "role": role,
            **overrides
        }
        resp = await self.client.post("/api/v1/auth/register", json=data)
        assert resp.status_code == 201, f"注册失败: {resp.text}"
        body = resp.json()["data"]
        return Account(
            id=body["user"]["id"],
            email=body["user"]["email"],
            role=role,
            token=body["token"],
            password=data["password"],
        )

    async def update_profile(self, account: Account, **fields) -> dict:
        resp = await self.client.put("/api/v1/auth/profile", json=fields, headers=account.headers)
        assert resp.status_code == 200, f"更新资料失败: {resp.text}"
        return resp.json()["data"]["user"]

    async def create_student(self, complete: bool = True, **profile) -> Account:
        """注册学生，默认填写完整资料"""
        account = await self.register("student")
        if complete:
            await self.update_profile(account, **{
                "firstName": "Ana",
                "lastName": "Lopez",
                "age": 21,
                "career": "Computer Science",
                "university": "UNAM",
                "skills": ["Python", "Excel"],
                **profile
            })
        return account

    async def create_business(self, complete: bool = True, **profile) -> Account:
        """注册企业，默认填写完整资料"""
        account = await self.register("business")
        if complete:
            await self.update_profile(account, **{
                "companyName": f"Cafe Central {account.id[:4]}",
                "contactName": "Luis Perez",
                "phone": "5551234567",
                "address": "Av. Reforma 100",
                "city": "Mexico City",
                "businessType": "Restaurant",
                **profile
            })
        return account

    async def create_job(self, business: Optional[Account] = None, **overrides) -> dict:
        """发布职位，默认自动创建企业"""
        if business is None:
            business = await self.create_business()
        suffix = self._next_id()
        data = {
            "title": f"Store Assistant {suffix}",
            "description": JOB_DESCRIPTION,
            "requirements": ["Good communication"],
            "location": {"address": "Av. Reforma 100", "city": "Mexico City", "state": "CDMX"},
            "employmentType": "part-time",
            "category": "retail",
            "salary": {"min": 60, "max": 90},
            "tags": ["Retail", "Customer Service"],
            **overrides
        }
        resp = await self.client.post("/api/v1/jobs", json=data, headers=business.headers)
        assert resp.status_code == 201, f"发布职位失败: {resp.text}"
        return resp.json()["data"]

    async def apply(self, student: Account, job_id: str, **overrides) -> dict:
        """学生投递"""
        data = {"jobId": job_id, "coverLetter": "I would love to join your team.", **overrides}
        resp = await self.client.post("/api/v1/applications", json=data, headers=student.headers)
        assert resp.status_code == 201, f"投递失败: {resp.text}"
        return resp.json()["data"]


@pytest_asyncio.fixture
async def factory(client: AsyncClient) -> DataFactory:
    """提供测试数据工厂实例"""
    return DataFactory(client=client)


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    每个测试函数独立的内存数据库

    StaticPool 让所有会话共用同一个连接（同一个内存库）
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """
    提供测试用的 HTTP 客户端

    覆盖 get_db 依赖，每个请求一个会话，使用测试数据库
    """
    app = create_app()
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    # 覆盖数据库依赖
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    # 创建异步测试客户端
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    # 清理依赖覆盖
    app.dependency_overrides.clear()

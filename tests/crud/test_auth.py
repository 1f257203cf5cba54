"""
认证 API 测试

注册、登录、资料读写、修改密码、令牌校验
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient

from jobboard.core.auth import create_access_token


@pytest.mark.asyncio
async def test_register_and_login_flow(client: AsyncClient):
    """注册 -> 登录 -> 获取资料"""

    # 1. Register（邮箱统一小写）
    data = {
        "email": "Maria@Example.com",
        "password": "secret123",
        "confirmPassword": "secret123",
        "role": "student",
    }
    response = await client.post("/api/v1/auth/register", json=data)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["code"] == 201
    user = body["data"]["user"]
    assert user["email"] == "maria@example.com"
    assert user["role"] == "student"
    assert user["profile_complete"] is False
    assert "password_hash" not in user
    assert body["data"]["token"]

    # 2. Login
    response = await client.post("/api/v1/auth/login", json={
        "email": "maria@example.com",
        "password": "secret123",
    })
    assert response.status_code == 200
    login = response.json()["data"]
    assert login["profile_complete"] is False
    assert login["user"]["id"] == user["id"]
    token = login["token"]

    # 3. Profile
    response = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    profile_user = response.json()["data"]["user"]
    assert profile_user["last_login"] is not None
    assert profile_user["profile"]["skills"] == []


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, factory):
    account = await factory.register("business")

    response = await client.post("/api/v1/auth/register", json={
        "email": account.email.upper(),
        "password": "secret123",
        "confirmPassword": "secret123",
        "role": "student",
    })
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_register_validation_errors(client: AsyncClient):
    """密码不一致、密码过短、非法角色"""
    response = await client.post("/api/v1/auth/register", json={
        "email": "a@example.com",
        "password": "secret123",
        "confirmPassword": "other123",
        "role": "student",
    })
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid input data"
    assert any("Passwords do not match" in e["message"] for e in body["data"]["errors"])

    response = await client.post("/api/v1/auth/register", json={
        "email": "b@example.com",
        "password": "123",
        "confirmPassword": "123",
        "role": "admin",
    })
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["data"]["errors"]}
    assert {"password", "role"} <= fields


@pytest.mark.asyncio
async def test_login_invalid_credentials(client: AsyncClient, factory):
    account = await factory.register("student")

    response = await client.post("/api/v1/auth/login", json={
        "email": account.email,
        "password": "wrong-password",
    })
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"

    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "secret123",
    })
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_missing_and_invalid_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/profile")
    assert response.status_code == 401
    assert response.json()["message"] == "Access token required"

    response = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient, factory):
    account = await factory.register("student")
    token = create_access_token(account.id, expires_delta=timedelta(seconds=-10))

    response = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


@pytest.mark.asyncio
async def test_update_profile_role_fields(client: AsyncClient, factory):
    """学生只能更新学生字段，资料补全后 profile_complete 为 True"""
    student = await factory.register("student")

    response = await client.put("/api/v1/auth/profile", json={
        "firstName": "Ana",
        "lastName": "Lopez",
        "age": 20,
        "career": "Design",
        "skills": [" Photoshop ", "", "Figma"],
        "companyName": "Ignored Inc",
    }, headers=student.headers)
    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["profile_complete"] is True
    assert user["full_name"] == "Ana Lopez"
    assert user["profile"]["skills"] == ["Photoshop", "Figma"]
    assert "company_name" not in user["profile"]

    # 年龄超出范围
    response = await client.put(
        "/api/v1/auth/profile", json={"age": 40}, headers=student.headers
    )
    assert response.status_code == 400
    assert response.json()["data"]["errors"][0]["field"] == "age"


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, factory):
    account = await factory.register("business")

    # 1. 当前密码错误
    response = await client.put("/api/v1/auth/change-password", json={
        "currentPassword": "wrong",
        "newPassword": "newsecret1",
    }, headers=account.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Current password is incorrect"

    # 2. 修改成功
    response = await client.put("/api/v1/auth/change-password", json={
        "currentPassword": account.password,
        "newPassword": "newsecret1",
        "confirmPassword": "newsecret1",
    }, headers=account.headers)
    assert response.status_code == 200

    # 3. 旧密码失效，新密码可登录
    response = await client.post("/api/v1/auth/login", json={
        "email": account.email, "password": account.password,
    })
    assert response.status_code == 401
    response = await client.post("/api/v1/auth/login", json={
        "email": account.email, "password": "newsecret1",
    })
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_verify_token(client: AsyncClient, factory):
    account = await factory.register("student")

    response = await client.post("/api/v1/auth/verify-token", headers=account.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["valid"] is True
    assert data["user"]["id"] == account.id


@pytest.mark.asyncio
async def test_deactivated_account_rejected(client: AsyncClient, factory):
    """停用后令牌与登录均被拒绝"""
    account = await factory.register("student")

    response = await client.post("/api/v1/users/deactivate", headers=account.headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/auth/profile", headers=account.headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Account deactivated"

    response = await client.post("/api/v1/auth/login", json={
        "email": account.email, "password": account.password,
    })
    assert response.status_code == 401
    assert response.json()["message"] == "Account deactivated"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "healthy"

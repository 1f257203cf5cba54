"""
用户 API 测试

CV 上传下载、公开资料、账号设置、学生搜索、仪表盘
"""
import io

import pytest
from httpx import AsyncClient
from PyPDF2 import PdfWriter

from jobboard.core.config import settings
from jobboard.core.exceptions import BadRequestException
from jobboard.crud import user_crud


def make_pdf() -> bytes:
    """生成一页空白 PDF"""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


async def upload_cv(client: AsyncClient, account, content: bytes = None,
                    content_type: str = "application/pdf"):
    content = make_pdf() if content is None else content
    return await client.post(
        "/api/v1/users/upload-cv",
        files={"cv": ("resume.pdf", content, content_type)},
        headers=account.headers,
    )


# ========== CV ==========

@pytest.mark.asyncio
async def test_cv_upload_download_delete(client: AsyncClient, factory):
    student = await factory.create_student()

    # 1. Upload
    response = await upload_cv(client, student)
    assert response.status_code == 200
    filename = response.json()["data"]["cv_path"]
    assert filename.startswith(f"cv-{student.id}-")
    assert filename.endswith(".pdf")

    response = await client.get("/api/v1/auth/profile", headers=student.headers)
    assert response.json()["data"]["user"]["profile"]["cv_path"] == filename

    # 2. Download（本人）
    response = await client.get(f"/api/v1/users/cv/{filename}", headers=student.headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")

    # 3. 重新上传替换旧文件
    response = await upload_cv(client, student)
    new_filename = response.json()["data"]["cv_path"]
    assert new_filename != filename
    response = await client.get(f"/api/v1/users/cv/{filename}", headers=student.headers)
    assert response.status_code == 404

    # 4. Delete
    response = await client.delete("/api/v1/users/cv", headers=student.headers)
    assert response.status_code == 200
    response = await client.get(f"/api/v1/users/cv/{new_filename}", headers=student.headers)
    assert response.status_code == 404
    response = await client.delete("/api/v1/users/cv", headers=student.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cv_upload_rejections(client: AsyncClient, factory):
    student = await factory.create_student()

    response = await upload_cv(client, student, b"plain text", content_type="text/plain")
    assert response.status_code == 400
    assert response.json()["message"] == "Only PDF files are allowed"

    response = await upload_cv(client, student, b"definitely not a pdf")
    assert response.status_code == 400

    business = await factory.create_business()
    response = await upload_cv(client, business)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_cv_file_removed_when_profile_update_fails(client: AsyncClient, factory, monkeypatch):
    """资料写入失败时不留下孤立的 CV 文件"""
    student = await factory.create_student()

    async def failing_update(db, *, user, data):
        raise BadRequestException("Profile update failed")

    monkeypatch.setattr(user_crud, "update_profile", failing_update)

    response = await upload_cv(client, student)
    assert response.status_code == 400
    assert response.json()["message"] == "Profile update failed"
    assert list(settings.cv_dir.glob(f"cv-{student.id}-*")) == []


@pytest.mark.asyncio
async def test_cv_access_for_businesses(client: AsyncClient, factory):
    """只有收到过该学生申请的企业可以下载 CV"""
    student = await factory.create_student()
    filename = (await upload_cv(client, student)).json()["data"]["cv_path"]

    hiring = await factory.create_business()
    stranger = await factory.create_business()
    other_student = await factory.create_student()
    job = await factory.create_job(hiring)
    await factory.apply(student, job["id"])

    response = await client.get(f"/api/v1/users/cv/{filename}", headers=hiring.headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/users/cv/{filename}", headers=stranger.headers)
    assert response.status_code == 403

    response = await client.get(f"/api/v1/users/cv/{filename}", headers=other_student.headers)
    assert response.status_code == 403

    response = await client.get(f"/api/v1/users/cv/{filename}")
    assert response.status_code == 401


# ========== 公开资料与设置 ==========

@pytest.mark.asyncio
async def test_public_profile(client: AsyncClient, factory):
    student = await factory.create_student()
    business = await factory.create_business(website="https://cafe.example.com")

    response = await client.get(f"/api/v1/users/profile/{student.id}", headers=business.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "student"
    assert data["full_name"] == "Ana Lopez"
    assert data["profile"]["career"] == "Computer Science"
    assert "email" not in data

    response = await client.get(f"/api/v1/users/profile/{business.id}", headers=student.headers)
    data = response.json()["data"]
    assert data["company_name"].startswith("Cafe Central")
    assert data["business_type"] == "Restaurant"
    assert data["verified"] is False
    assert data["profile"] is None

    response = await client.get("/api/v1/users/profile/unknown", headers=student.headers)
    assert response.status_code == 404

    # 停用账号不可见
    await client.post("/api/v1/users/deactivate", headers=business.headers)
    response = await client.get(f"/api/v1/users/profile/{business.id}", headers=student.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_settings(client: AsyncClient, factory):
    student = await factory.create_student()
    other = await factory.create_student()

    response = await client.put("/api/v1/users/settings", json={
        "email": "New.Address@Example.com",
        "notifications": False,
    }, headers=student.headers)
    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["email"] == "new.address@example.com"
    assert user["notifications"] is False

    # 邮箱已被占用
    response = await client.put(
        "/api/v1/users/settings", json={"email": other.email}, headers=student.headers
    )
    assert response.status_code == 400

    # 学生不能修改账号状态
    response = await client.put(
        "/api/v1/users/settings", json={"isActive": False}, headers=student.headers
    )
    assert response.status_code == 403

    business = await factory.create_business()
    response = await client.put(
        "/api/v1/users/settings", json={"isActive": True}, headers=business.headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["is_active"] is True


# ========== 学生搜索 ==========

@pytest.mark.asyncio
async def test_search_students(client: AsyncClient, factory):
    await factory.create_student()
    await factory.create_student(firstName="Carlos", lastName="Ruiz",
                                 career="Marketing", skills=["Design", "Sales"])
    await factory.create_student(complete=False)
    business = await factory.create_business()

    response = await client.get("/api/v1/users/search", headers=business.headers)
    assert response.status_code == 200
    assert response.json()["data"]["total"] == 3

    response = await client.get(
        "/api/v1/users/search", params={"q": "carlos"}, headers=business.headers
    )
    items = response.json()["data"]["items"]
    assert [i["full_name"] for i in items] == ["Carlos Ruiz"]

    response = await client.get(
        "/api/v1/users/search", params={"career": "computer"}, headers=business.headers
    )
    assert response.json()["data"]["total"] == 1

    response = await client.get(
        "/api/v1/users/search", params={"skills": "python, sales"}, headers=business.headers
    )
    assert response.json()["data"]["total"] == 2

    student = await factory.create_student()
    response = await client.get("/api/v1/users/search", headers=student.headers)
    assert response.status_code == 403


# ========== 仪表盘 ==========

@pytest.mark.asyncio
async def test_student_dashboard(client: AsyncClient, factory):
    business = await factory.create_business()
    tech_job = await factory.create_job(business, title="Junior Web Helper", category="technology")
    await factory.create_job(business, title="Excel Data Entry", tags=["excel"])
    await factory.create_job(business, title="Cleaning Crew", category="cleaning", tags=[])

    student = await factory.create_student()
    await factory.apply(student, tech_job["id"])

    response = await client.get("/api/v1/users/dashboard-stats", headers=student.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["applications"]["total"] == 1
    assert data["applications"]["pending"] == 1
    assert data["profile_complete"] is True
    assert data["missing_fields"] == []
    titles = {j["title"] for j in data["recommended_jobs"]}
    assert titles == {"Junior Web Helper", "Excel Data Entry"}

    incomplete = await factory.create_student(complete=False)
    response = await client.get("/api/v1/users/dashboard-stats", headers=incomplete.headers)
    data = response.json()["data"]
    assert data["profile_complete"] is False
    assert data["recommended_jobs"] == []


@pytest.mark.asyncio
async def test_business_dashboard(client: AsyncClient, factory):
    business = await factory.create_business()
    job = await factory.create_job(business)
    await factory.create_job(business, status="closed")
    student = await factory.create_student()
    await factory.apply(student, job["id"])
    await client.get(f"/api/v1/jobs/{job['id']}")

    response = await client.get("/api/v1/users/dashboard-stats", headers=business.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["jobs"] == {"total": 2, "active": 1, "total_views": 1}
    assert data["applications"]["total"] == 1
    assert len(data["recent_applications"]) == 1
    assert data["recent_applications"][0]["applicant"]["id"] == student.id

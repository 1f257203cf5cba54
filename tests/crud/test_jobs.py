"""
职位 API 测试

发布、公开搜索、推荐 / 分类、企业职位列表、详情浏览量、更新与删除
"""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

JOB_DESCRIPTION = (
    "Prepare coffee drinks, take orders at the counter and keep the "
    "seating area clean during morning shifts."
)


@pytest.mark.asyncio
async def test_job_crud_flow(client: AsyncClient, factory):
    """测试职位完整 CRUD 流程"""
    business = await factory.create_business()

    # 1. Create
    job = await factory.create_job(
        business,
        schedule={"startTime": "14:00", "endTime": "20:00", "days": ["monday", "friday"]},
        salary={"min": 70, "max": 100, "currency": "MXN", "period": "hourly"},
    )
    job_id = job["id"]
    assert job["company_id"] == business.id
    assert job["status"] == "active"
    assert job["applications_count"] == 0
    assert job["tags"] == ["retail", "customer service"]
    assert job["location"]["city"] == "Mexico City"
    assert job["schedule"]["days"] == ["monday", "friday"]
    assert job["salary"] == {
        "min": 70, "max": 100, "currency": "MXN", "period": "hourly", "is_negotiable": False,
    }

    # 2. Read（公开视图不含内部字段）
    response = await client.get(f"/api/v1/jobs/{job_id}")
    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["title"] == job["title"]
    assert detail["company"]["id"] == business.id
    assert detail["company"]["contact_name"] == "Luis Perez"
    assert "company_id" not in detail
    assert "applications_count" not in detail
    assert detail["has_applied"] is None

    # 3. Update
    response = await client.put(f"/api/v1/jobs/{job_id}", json={
        "title": "Senior Store Assistant",
        "location": {"city": "Guadalajara"},
        "status": "paused",
    }, headers=business.headers)
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["title"] == "Senior Store Assistant"
    assert updated["location"]["city"] == "Guadalajara"
    assert updated["location"]["state"] == "CDMX"
    assert updated["status"] == "paused"

    # 4. Delete
    response = await client.delete(f"/api/v1/jobs/{job_id}", headers=business.headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/jobs/{job_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_job_requires_complete_business(client: AsyncClient, factory):
    """资料不完整的企业不能发布；学生不能发布"""
    business = await factory.create_business(complete=False)
    payload = {
        "title": "Barista Part Time",
        "description": JOB_DESCRIPTION,
        "requirements": ["Friendly"],
        "location": {"address": "Calle 1", "city": "Puebla", "state": "Puebla"},
        "employmentType": "part-time",
        "category": "food-service",
    }

    response = await client.post("/api/v1/jobs", json=payload, headers=business.headers)
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Please complete your profile first"
    assert "company_name" in body["data"]["missing_fields"]

    student = await factory.create_student()
    response = await client.post("/api/v1/jobs", json=payload, headers=student.headers)
    assert response.status_code == 403

    response = await client.post("/api/v1/jobs", json=payload)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_job_validation(client: AsyncClient, factory):
    business = await factory.create_business()

    response = await client.post("/api/v1/jobs", json={
        "title": "Bad",
        "description": "too short",
        "requirements": [],
        "location": {"address": "Calle 1", "city": "Puebla", "state": "Puebla"},
        "employmentType": "gig",
        "category": "retail",
        "salary": {"min": 100, "max": 50},
    }, headers=business.headers)
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["data"]["errors"]}
    assert {"title", "description", "requirements", "employmentType", "salary"} <= fields


@pytest.mark.asyncio
async def test_search_filters_and_pagination(client: AsyncClient, factory):
    business = await factory.create_business()
    await factory.create_job(business, title="Python Tutor", category="tutoring",
                             salary={"min": 150, "max": 200})
    await factory.create_job(business, title="Remote Support Agent",
                             category="customer-service",
                             location={"address": "N/A", "city": "Monterrey",
                                       "state": "Nuevo Leon", "isRemote": True})
    await factory.create_job(business, title="Cashier Weekend", employmentType="temporary")
    # 不公开的职位
    await factory.create_job(business, title="Paused Position", status="paused")
    await factory.create_job(business, title="Closed Applications", allowApplications=False)
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    await factory.create_job(business, title="Expired Deadline", applicationDeadline=past)

    # 1. 全部公开职位
    response = await client.get("/api/v1/jobs")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 3
    titles = {j["title"] for j in data["items"]}
    assert titles == {"Python Tutor", "Remote Support Agent", "Cashier Weekend"}

    # 2. 关键字 / 城市 / 分类 / 雇佣类型 / 远程 / 最低薪资
    response = await client.get("/api/v1/jobs", params={"search": "tutor"})
    assert [j["title"] for j in response.json()["data"]["items"]] == ["Python Tutor"]

    response = await client.get("/api/v1/jobs", params={"city": "monterrey"})
    assert response.json()["data"]["total"] == 1

    response = await client.get("/api/v1/jobs", params={"category": "tutoring"})
    assert response.json()["data"]["total"] == 1

    response = await client.get("/api/v1/jobs", params={"employment_type": "temporary"})
    assert [j["title"] for j in response.json()["data"]["items"]] == ["Cashier Weekend"]

    response = await client.get("/api/v1/jobs", params={"remote": "true"})
    assert [j["title"] for j in response.json()["data"]["items"]] == ["Remote Support Agent"]

    response = await client.get("/api/v1/jobs", params={"min_salary": 100})
    assert [j["title"] for j in response.json()["data"]["items"]] == ["Python Tutor"]

    # 3. 分页
    response = await client.get("/api/v1/jobs", params={"page": 2, "limit": 2})
    data = response.json()["data"]
    assert data["total"] == 3
    assert len(data["items"]) == 1
    assert data["pages"] == 2
    assert data["has_prev"] is True
    assert data["has_next"] is False

    # 4. 非法参数
    response = await client.get("/api/v1/jobs", params={"limit": 100})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_featured_first_and_categories(client: AsyncClient, factory):
    business = await factory.create_business()
    await factory.create_job(business, title="Regular Retail Job")
    await factory.create_job(business, title="Featured Tutor Job", category="tutoring", isFeatured=True)
    await factory.create_job(business, title="Another Retail Job")

    # 推荐职位排在最前
    response = await client.get("/api/v1/jobs")
    assert response.json()["data"]["items"][0]["title"] == "Featured Tutor Job"

    response = await client.get("/api/v1/jobs/featured")
    assert response.status_code == 200
    assert [j["title"] for j in response.json()["data"]] == ["Featured Tutor Job"]

    response = await client.get("/api/v1/jobs/categories")
    assert response.status_code == 200
    categories = response.json()["data"]
    assert categories[0] == {"value": "retail", "label": "Retail", "count": 2}
    assert categories[1]["value"] == "tutoring"


@pytest.mark.asyncio
async def test_my_jobs(client: AsyncClient, factory):
    """企业职位列表包含全部状态"""
    business = await factory.create_business()
    other = await factory.create_business()
    await factory.create_job(business, title="Active Job One")
    await factory.create_job(business, title="Draft Job Two", status="draft")
    await factory.create_job(other, title="Someone Else's Job")

    response = await client.get("/api/v1/jobs/my-jobs", headers=business.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 2
    assert all(j["company_id"] == business.id for j in data["items"])

    response = await client.get(
        "/api/v1/jobs/my-jobs", params={"status": "draft"}, headers=business.headers
    )
    assert [j["title"] for j in response.json()["data"]["items"]] == ["Draft Job Two"]

    student = await factory.create_student()
    response = await client.get("/api/v1/jobs/my-jobs", headers=student.headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_job_detail_views_and_has_applied(client: AsyncClient, factory):
    job = await factory.create_job()
    student = await factory.create_student()

    for expected in (1, 2):
        response = await client.get(f"/api/v1/jobs/{job['id']}")
        assert response.json()["data"]["views"] == expected

    response = await client.get(f"/api/v1/jobs/{job['id']}", headers=student.headers)
    assert response.json()["data"]["has_applied"] is False

    await factory.apply(student, job["id"])
    response = await client.get(f"/api/v1/jobs/{job['id']}", headers=student.headers)
    detail = response.json()["data"]
    assert detail["has_applied"] is True
    assert detail["views"] == 4

    # 无效令牌按匿名处理
    response = await client.get(
        f"/api/v1/jobs/{job['id']}", headers={"Authorization": "Bearer broken"}
    )
    assert response.status_code == 200
    assert response.json()["data"]["has_applied"] is None


@pytest.mark.asyncio
async def test_only_owner_can_modify_job(client: AsyncClient, factory):
    owner = await factory.create_business()
    other = await factory.create_business()
    job = await factory.create_job(owner)

    response = await client.put(
        f"/api/v1/jobs/{job['id']}", json={"title": "Hijacked title"}, headers=other.headers
    )
    assert response.status_code == 403

    response = await client.delete(f"/api/v1/jobs/{job['id']}", headers=other.headers)
    assert response.status_code == 403

    response = await client.put(
        "/api/v1/jobs/does-not-exist", json={"title": "Whatever title"}, headers=owner.headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_salary_range_checked(client: AsyncClient, factory):
    """部分更新后薪资区间仍需合法"""
    business = await factory.create_business()
    job = await factory.create_job(business, salary={"min": 60, "max": 90})

    response = await client.put(
        f"/api/v1/jobs/{job['id']}", json={"salary": {"min": 120}}, headers=business.headers
    )
    assert response.status_code == 400

    response = await client.get(f"/api/v1/jobs/{job['id']}")
    assert response.json()["data"]["salary"]["min"] == 60


@pytest.mark.asyncio
async def test_update_clears_nullable_fields(client: AsyncClient, factory):
    """显式传 null 清空截止日期和薪资下限"""
    business = await factory.create_business()
    deadline = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()
    job = await factory.create_job(business, applicationDeadline=deadline)
    assert job["application_deadline"] is not None

    response = await client.put(
        f"/api/v1/jobs/{job['id']}",
        json={"applicationDeadline": None, "salary": {"min": None}},
        headers=business.headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["application_deadline"] is None
    assert data["salary"]["min"] is None
    assert data["salary"]["max"] == 90

    response = await client.get(f"/api/v1/jobs/{job['id']}")
    data = response.json()["data"]
    assert data["application_deadline"] is None
    assert data["salary"]["min"] is None


@pytest.mark.asyncio
async def test_delete_job_removes_applications(client: AsyncClient, factory):
    business = await factory.create_business()
    job = await factory.create_job(business)
    student = await factory.create_student()
    await factory.apply(student, job["id"])

    response = await client.delete(f"/api/v1/jobs/{job['id']}", headers=business.headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/applications/my-applications", headers=student.headers)
    assert response.json()["data"]["total"] == 0

"""
Excel 导出服务

把用户 / 职位 / 申请逐行映射为带标题的扁平记录，
再用 pandas + openpyxl 写成 xlsx 字节流
"""
import io
import time
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.core.exceptions import BadRequestException
from jobboard.crud import user_crud, job_crud, application_crud
from jobboard.models import User, Job, Application

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_KINDS = ("users", "jobs", "applications", "all")


def _yes_no(value) -> str:
    return "Yes" if value else "No"


def _fmt(value: Optional[datetime], default: str = "") -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else default


def _join(values, sep: str = ", ") -> str:
    return sep.join(str(v) for v in (values or []))


# ========== 行映射 ==========

def user_row(user: User) -> dict:
    row = {
        "ID": user.id,
        "Email": user.email,
        "Role": user.role,
        "Active": _yes_no(user.is_active),
        "Email Verified": _yes_no(user.email_verified),
        "Last Login": _fmt(user.last_login, "Never"),
        "Created At": _fmt(user.created_at),
        "Updated At": _fmt(user.updated_at),
    }
    if user.is_student:
        p = user.student_profile
        experience = (p.experience if p else None) or []
        row.update({
            "First Name": (p.first_name if p else None) or "",
            "Last Name": (p.last_name if p else None) or "",
            "Age": (p.age if p else None) or "",
            "Career": (p.career if p else None) or "",
            "University": (p.university if p else None) or "",
            "Semester": (p.semester if p else None) or "",
            "Skills": _join(p.skills if p else None),
            "Availability": (p.availability if p else None) or "",
            "Preferred Location": (p.preferred_location if p else None) or "",
            "CV Path": (p.cv_path if p else None) or "",
            "Experience": "; ".join(
                f"{e.get('position') or ''} at {e.get('company') or ''} ({e.get('duration') or ''})"
                for e in experience
            ),
        })
    else:
        p = user.business_profile
        row.update({
            "Company Name": (p.company_name if p else None) or "",
            "Contact Name": (p.contact_name if p else None) or "",
            "Phone": (p.phone if p else None) or "",
            "Address": (p.address if p else None) or "",
            "City": (p.city if p else None) or "",
            "State": (p.state if p else None) or "",
            "Zip Code": (p.zip_code if p else None) or "",
            "Business Type": (p.business_type if p else None) or "",
            "Website": (p.website if p else None) or "",
            "Description": (p.description if p else None) or "",
            "Verified": _yes_no(p.verified if p else False),
        })
    return row


def job_row(job: Job, company: Optional[User]) -> dict:
    bp = company.business_profile if company else None
    return {
        "ID": job.id,
        "Title": job.title,
        "Description": job.description,
        "Company": (bp.company_name if bp else None) or "N/A",
        "Company City": (bp.city if bp else None) or "N/A",
        "Category": job.category,
        "Employment Type": job.employment_type,
        "Status": job.status,
        "Requirements": _join(job.requirements, "; "),
        "Responsibilities": _join(job.responsibilities, "; "),
        "Benefits": _join(job.benefits, "; "),
        "Address": job.address or "",
        "City": job.city or "",
        "State": job.state or "",
        "Zip Code": job.zip_code or "",
        "Remote": _yes_no(job.is_remote),
        "Hybrid": _yes_no(job.is_hybrid),
        "Schedule Days": _join(job.days),
        "Start Time": job.start_time or "",
        "End Time": job.end_time or "",
        "Flexible Schedule": _yes_no(job.flexible),
        "Salary Min": job.salary_min if job.salary_min is not None else "",
        "Salary Max": job.salary_max if job.salary_max is not None else "",
        "Salary Currency": job.salary_currency or "",
        "Salary Period": job.salary_period or "",
        "Salary Negotiable": _yes_no(job.salary_negotiable),
        "Tags": _join(job.tags),
        "Views": job.views or 0,
        "Applications Count": job.applications_count or 0,
        "Featured": _yes_no(job.is_featured),
        "Application Deadline": _fmt(job.application_deadline),
        "Start Date": _fmt(job.start_date),
        "Created At": _fmt(job.created_at),
        "Updated At": _fmt(job.updated_at),
    }


def application_row(
    application: Application,
    job: Optional[Job],
    applicant: Optional[User],
    company: Optional[User]
) -> dict:
    sp = applicant.student_profile if applicant else None
    bp = company.business_profile if company else None
    return {
        "ID": application.id,
        "Job Title": job.title if job else "N/A",
        "Job Category": job.category if job else "N/A",
        "Job Type": job.employment_type if job else "N/A",
        "Job City": job.city if job else "N/A",
        "Applicant Email": applicant.email if applicant else "N/A",
        "Applicant Name": (applicant.full_name if applicant else "") or "N/A",
        "Applicant Career": (sp.career if sp else None) or "",
        "Applicant University": (sp.university if sp else None) or "",
        "Company": (bp.company_name if bp else None) or "N/A",
        "Status": application.status,
        "Cover Letter": application.cover_letter or "",
        "Employer Notes": application.employer_notes or "",
        "Applied At": _fmt(application.applied_at),
        "Reviewed At": _fmt(application.reviewed_at),
        "Interview Scheduled At": _fmt(application.interview_scheduled_at),
        "Responded At": _fmt(application.responded_at),
        "Source": application.source or "",
        "IP Address": application.ip_address or "",
        "Created At": _fmt(application.created_at),
        "Updated At": _fmt(application.updated_at),
    }


# ========== 数据加载 ==========

async def load_user_rows(db: AsyncSession) -> List[dict]:
    return [user_row(u) for u in await user_crud.get_all(db)]


async def load_job_rows(db: AsyncSession) -> List[dict]:
    jobs = await job_crud.get_all(db)
    companies = await user_crud.get_many(db, (j.company_id for j in jobs))
    return [job_row(j, companies.get(j.company_id)) for j in jobs]


async def load_application_rows(db: AsyncSession) -> List[dict]:
    applications = await application_crud.get_all(db)
    jobs = await job_crud.get_many(db, (a.job_id for a in applications))
    users = await user_crud.get_many(
        db,
        [a.applicant_id for a in applications] + [a.company_id for a in applications],
    )
    return [
        application_row(a, jobs.get(a.job_id), users.get(a.applicant_id), users.get(a.company_id))
        for a in applications
    ]


# ========== 工作簿 ==========

def build_workbook(sheets: Dict[str, List[dict]]) -> bytes:
    """
    {sheet 名: 行列表} -> xlsx 字节

    没有数据的 sheet 写出为空表
    """
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, index=False)
    return buffer.getvalue()


def export_filename(kind: str) -> str:
    return f"{kind}_export_{int(time.time() * 1000)}.xlsx"


async def export(db: AsyncSession, kind: str) -> bytes:
    """按导出类型生成工作簿"""
    if kind not in EXPORT_KINDS:
        raise BadRequestException(f"Unknown export type: {kind}")

    if kind == "users":
        sheets = {"Users": await load_user_rows(db)}
    elif kind == "jobs":
        sheets = {"Jobs": await load_job_rows(db)}
    elif kind == "applications":
        sheets = {"Applications": await load_application_rows(db)}
    else:
        sheets = {
            "Users": await load_user_rows(db),
            "Jobs": await load_job_rows(db),
            "Applications": await load_application_rows(db),
        }

    content = build_workbook(sheets)
    counts = {name: len(rows) for name, rows in sheets.items()}
    logger.info(f"Export generated: kind={kind} rows={counts} bytes={len(content)}")
    return content

"""
申请状态流转规则

企业侧只能沿 pending < reviewing < shortlisted < interview < accepted/rejected
单向推进（允许跳级），accepted / rejected / withdrawn 为终态；
学生只能在 pending 时撤回
"""
from dataclasses import dataclass
from typing import Optional

from jobboard.models.application import Application, ApplicationStatus
from jobboard.models.base import utcnow

# 企业可推进的顺序（accepted 与 rejected 同级）
_RANK = {
    ApplicationStatus.PENDING.value: 0,
    ApplicationStatus.REVIEWING.value: 1,
    ApplicationStatus.SHORTLISTED.value: 2,
    ApplicationStatus.INTERVIEW.value: 3,
    ApplicationStatus.ACCEPTED.value: 4,
    ApplicationStatus.REJECTED.value: 4,
}

TERMINAL_STATUSES = frozenset({
    ApplicationStatus.ACCEPTED.value,
    ApplicationStatus.REJECTED.value,
    ApplicationStatus.WITHDRAWN.value,
})

# 状态 -> 需要记录的时间字段
_STATUS_TIMESTAMPS = {
    ApplicationStatus.REVIEWING.value: "reviewed_at",
    ApplicationStatus.SHORTLISTED.value: "shortlisted_at",
    ApplicationStatus.INTERVIEW.value: "interview_scheduled_at",
    ApplicationStatus.WITHDRAWN.value: "withdrawn_at",
}


@dataclass(frozen=True)
class TransitionCheck:
    """状态流转校验结果"""
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


def check_employer_transition(current: str, target: str) -> TransitionCheck:
    """企业更新状态的合法性"""
    if target == ApplicationStatus.WITHDRAWN.value:
        return TransitionCheck(False, "Only the applicant can withdraw an application")
    if current == target:
        # 重复提交相同状态只更新备注
        return TransitionCheck(True)
    if current in TERMINAL_STATUSES:
        return TransitionCheck(False, f"Application is already {current}")
    if _RANK[target] <= _RANK[current]:
        return TransitionCheck(False, f"Cannot change status from {current} to {target}")
    return TransitionCheck(True)


def check_withdrawal(current: str) -> TransitionCheck:
    """学生撤回的合法性"""
    if current != ApplicationStatus.PENDING.value:
        return TransitionCheck(False, "Only pending applications can be withdrawn")
    return TransitionCheck(True)


def apply_transition(application: Application, target: str, notes: Optional[str] = None) -> None:
    """
    写入新状态及时间戳

    调用前需通过 check_employer_transition / check_withdrawal 校验
    """
    now = utcnow()
    changed = application.status != target

    if changed:
        application.status = target
        stamp = _STATUS_TIMESTAMPS.get(target)
        if stamp:
            setattr(application, stamp, now)
        if target != ApplicationStatus.WITHDRAWN.value:
            application.responded_at = now

    if notes is not None:
        application.employer_notes = notes

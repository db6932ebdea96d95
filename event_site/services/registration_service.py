"""
报名校验与队伍标签服务
流程: 表单校验 -> 队伍名查重 -> 队内 USN 查重 -> 历史 USN 查重 -> 赛道判定 -> 生成标签 -> 保存

各步骤之间没有事务保护，并发提交时查重与序号都可能冲突 (已知并接受)。
"""
import time
import uuid
from typing import Callable, List, Optional
from pydantic import ValidationError as PydanticValidationError
from event_site.core.exceptions import ConfigError, ConflictError, ValidationError
from event_site.core.logger import get_logger
from event_site.schemas.registration import (
    EXPERIENCE_FIELD,
    IDENTIFIER_FIELD,
    MEMBER_SLOTS,
    RegistrationForm,
    RegistrationRecord,
)
from event_site.services.content_service import ContentRepository
from event_site.services.registration_repository import RegistrationRepository, normalize_usn

logger = get_logger("registration_service")

TRACK_ADVANCED = "Advanced"
TRACK_BASIC = "Basic"


def first_error_message(exc: PydanticValidationError) -> str:
    """只取第一个校验错误的提示"""
    errors = exc.errors()
    if not errors:
        return "Invalid payload"
    return errors[0].get("msg") or "Invalid payload"


def parse_hackathons(value: Optional[str]) -> int:
    """无法解析或未填写按 0 处理"""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def count_advanced_members(form) -> int:
    """参加过 2 次及以上黑客松的成员数 (所有槽位)"""
    return sum(
        1 for slot in MEMBER_SLOTS
        if parse_hackathons(form.value(slot, EXPERIENCE_FIELD)) >= 2
    )


def classify_track(advanced_members: int) -> str:
    return TRACK_ADVANCED if advanced_members >= 2 else TRACK_BASIC


def build_team_tag(prefix: str, section: str, sequence: int, track: str) -> str:
    """例: HTT + B + 7 + A -> HTTB7A"""
    track_code = "A" if track == TRACK_ADVANCED else "B"
    return f"{prefix}{section.strip().upper()}{sequence}{track_code}"


class RegistrationService:
    """报名服务 (本身不持有状态)"""

    def __init__(
        self,
        repository: RegistrationRepository,
        content: ContentRepository = None,
        tag_prefix: str = "HTT",
        id_factory: Callable[[], str] = None,
        clock: Callable[[], int] = None,
    ):
        self.repository = repository
        self.content = content
        self.tag_prefix = tag_prefix
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self.clock = clock or (lambda: int(time.time() * 1000))

    # ==================== 校验 ====================

    def validate(self, payload) -> RegistrationForm:
        if not isinstance(payload, dict):
            raise ValidationError("Invalid payload")
        try:
            return RegistrationForm.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(first_error_message(e))

    def _submitted_identifiers(self, form) -> List[tuple]:
        """(原始 USN, 规范化 USN)，只包含已填写的成员"""
        pairs = []
        for slot in form.present_slots():
            raw = form.value(slot, IDENTIFIER_FIELD)
            if raw:
                pairs.append((raw.strip(), normalize_usn(raw)))
        return pairs

    def check_unique(self, form):
        if self.repository.exists_by_team_name(form.teamName):
            raise ConflictError("Team name already registered")

        submitted = self._submitted_identifiers(form)

        seen = set()
        for raw, key in submitted:
            if key in seen:
                raise ConflictError(f"USN {raw} is repeated within this team.", status_code=400)
            seen.add(key)

        existing = self.repository.collect_identifiers()
        for raw, key in submitted:
            if key in existing:
                raise ConflictError(f"USN {raw} is already registered.")

    # ==================== 报名 ====================

    def register(self, payload) -> RegistrationRecord:
        form = self.validate(payload)
        self.check_unique(form)

        advanced_members = count_advanced_members(form)
        track = classify_track(advanced_members)
        sequence = self.repository.count() + 1
        team_tag = build_team_tag(self.tag_prefix, form.leaderSection, sequence, track)

        data = form.model_dump(exclude_none=True)
        data.update(
            id=self.id_factory(),
            createdAt=self.clock(),
            teamName=form.teamName.strip(),
            teamTag=team_tag,
            track=track,
            advancedMembers=advanced_members,
        )
        record = RegistrationRecord.model_validate(data)

        try:
            self.repository.save(record)
        except Exception as e:
            logger.error(f"保存报名记录失败: {e}")
            raise ConfigError("Storage not configured")

        logger.info(f"报名成功: team={record.teamName}, tag={team_tag}, track={track}")
        return record

    def registration_status(self) -> dict:
        """活动内容已发布时报名开放"""
        content = self.content.read() if self.content else None
        return {
            "open": content is not None,
            "registerNote": content.registerNote if content else None,
        }

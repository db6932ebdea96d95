"""
报名表单与报名记录模型

成员信息的结构由下方的槽位表声明，表单模型据此动态生成：
- leader / member1-3 为必填槽位，member4-5 为选填槽位
- 队长填写完整联系方式，其余成员填写姓名、USN 和参赛经历
- 请求字段名为 <槽位><字段>，例如 leaderUSN、member4Hackathons
"""
import re
from typing import Annotated, Dict, List, Optional
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, create_model
from pydantic_core import PydanticCustomError

# ==================== 槽位声明 ====================

REQUIRED_SLOTS = ("leader", "member1", "member2", "member3")
OPTIONAL_SLOTS = ("member4", "member5")
MEMBER_SLOTS = REQUIRED_SLOTS + OPTIONAL_SLOTS

LEADER_FIELDS = ("Name", "Section", "USN", "Whatsapp", "Email", "Hackathons")
MEMBER_FIELDS = ("Name", "USN", "Hackathons")

IDENTIFIER_FIELD = "USN"
EXPERIENCE_FIELD = "Hackathons"


def slot_fields(slot: str) -> tuple:
    return LEADER_FIELDS if slot == "leader" else MEMBER_FIELDS


def slot_key(slot: str, field: str) -> str:
    return f"{slot}{field}"


# ==================== 字段规则 ====================
# 规则均为整串匹配 (fullmatch)，数字只接受 ASCII 0-9

_SECTION_RE = re.compile(r"[A-Da-d]")
_USN_RE = re.compile(r"[A-Za-z0-9]{10}")
_PHONE_RE = re.compile(r"[0-9]{10}")
_EMAIL_RE = re.compile(r"[A-Za-z0-9.+_-]+@[A-Za-z0-9.-]+\.[A-Za-z0-9.-]+")
_COUNT_RE = re.compile(r"[0-9]+")

# 字段 -> (校验函数, 错误提示)
FIELD_RULES = {
    "Name": (lambda v: len(v.strip()) >= 2, "Name is required"),
    "Section": (lambda v: bool(_SECTION_RE.fullmatch(v)), "Section must be A, B, C, or D"),
    "USN": (lambda v: bool(_USN_RE.fullmatch(v)), "USN must be 10 alphanumeric characters"),
    "Whatsapp": (lambda v: bool(_PHONE_RE.fullmatch(v)), "WhatsApp must be 10 digits"),
    "Email": (
        lambda v: bool(_EMAIL_RE.fullmatch(v)),
        "Email can only use letters, numbers, ., -, _, + and must contain @ and a domain",
    ),
    "Hackathons": (lambda v: bool(_COUNT_RE.fullmatch(v)), "Enter a number (0 if none)"),
}


def _to_text(value):
    """缺失视为空串；数字转为文本，其余类型交给 str 校验"""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _blank_to_none(value):
    """选填槽位: 空串/空白视为未填写"""
    value = _to_text(value)
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def _rule(check, message: str):
    def validate(value):
        if value is None:
            return value
        if not check(value):
            raise PydanticCustomError("field_rule", message)
        return value
    return validate


def _required(check, message: str):
    return Annotated[str, BeforeValidator(_to_text), AfterValidator(_rule(check, message))]


def _optional(check, message: str):
    return Annotated[Optional[str], BeforeValidator(_blank_to_none), AfterValidator(_rule(check, message))]


# ==================== 表单模型 ====================

class RegistrationFormBase(BaseModel):
    model_config = ConfigDict(validate_default=True)

    teamName: _required(lambda v: len(v.strip()) >= 2, "Team name is required") = ""

    def value(self, slot: str, field: str) -> Optional[str]:
        return getattr(self, slot_key(slot, field), None)

    def present_slots(self) -> List[str]:
        """已填写的成员槽位 (必填槽位始终在内)"""
        return [
            slot for slot in MEMBER_SLOTS
            if slot in REQUIRED_SLOTS or self.value(slot, "Name") or self.value(slot, IDENTIFIER_FIELD)
        ]


def _build_form_model():
    fields = {}
    for slot in MEMBER_SLOTS:
        optional = slot in OPTIONAL_SLOTS
        for field in slot_fields(slot):
            check, message = FIELD_RULES[field]
            if optional:
                fields[slot_key(slot, field)] = (_optional(check, message), None)
            else:
                fields[slot_key(slot, field)] = (_required(check, message), "")
    return create_model("RegistrationForm", __base__=RegistrationFormBase, **fields)


RegistrationForm = _build_form_model()


# ==================== 报名记录 ====================

class RegistrationRecord(BaseModel):
    """已保存的报名记录 (只增删，不修改)；成员字段以额外字段保存"""
    model_config = ConfigDict(extra="allow")

    id: str
    createdAt: int = 0
    teamName: str = ""
    teamTag: Optional[str] = None
    track: Optional[str] = None
    advancedMembers: int = 0

    def to_storage(self) -> Dict[str, str]:
        """转为哈希字段，空值字段不写入"""
        return {
            key: str(value)
            for key, value in self.model_dump().items()
            if value is not None and value != ""
        }


# CSV 导出列顺序
EXPORT_COLUMNS = ["id", "createdAt", "teamTag", "teamName", "track", "advancedMembers"] + [
    slot_key(slot, field) for slot in MEMBER_SLOTS for field in slot_fields(slot)
]

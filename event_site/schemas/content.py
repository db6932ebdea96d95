from copy import deepcopy
from pydantic import BaseModel, Field
from typing import List, Optional, Tuple


# --- 子模型 ---
class Hero(BaseModel):
    title: str
    tagline: str
    badges: List[str] = Field(default_factory=list)  # 首屏徽章，按顺序展示


class DetailCard(BaseModel):
    title: str
    body: str


class ScheduleEntry(BaseModel):
    time: str
    title: str
    body: str


class TeamMember(BaseModel):
    name: str
    role: str


class FaqEntry(BaseModel):
    q: str
    a: str


class StatCard(BaseModel):
    title: str
    value: str
    caption: str


# --- 核心模型：当前活动内容 (全站唯一) ---
class ContentDocument(BaseModel):
    hero: Hero
    details: List[DetailCard]
    schedule: List[ScheduleEntry]
    team: List[TeamMember]
    faqs: List[FaqEntry]
    stats: Optional[List[StatCard]] = None
    registerNote: Optional[str] = None

    def to_storage(self) -> dict:
        """未填写的可选字段不写入；空列表原样保留"""
        return self.model_dump(exclude_none=True)


def migrate_legacy(raw: dict, fill_defaults: bool = True) -> Tuple[dict, bool]:
    """
    将旧版本结构升级为当前结构，返回 (新文档, 是否有改动)
    fill_defaults=False 时只改写旧字段名，不补缺失的列表 (用于校验提交的内容)
    旧版本差异:
    - FAQ 字段名为 faq，条目为 {question, answer}
    - 缺少 details / schedule / team 列表
    - hero 缺少 badges
    """
    doc = deepcopy(raw)
    changed = False

    if "faqs" not in doc and "faq" in doc:
        doc["faqs"] = doc.pop("faq")
        changed = True

    faqs = doc.get("faqs")
    if isinstance(faqs, list):
        upgraded = []
        for item in faqs:
            if isinstance(item, dict) and "q" not in item and "question" in item:
                item = {"q": item.get("question", ""), "a": item.get("answer", "")}
                changed = True
            upgraded.append(item)
        doc["faqs"] = upgraded

    if not fill_defaults:
        return doc, changed

    for key in ("details", "schedule", "team", "faqs"):
        if key not in doc:
            doc[key] = []
            changed = True

    hero = doc.get("hero")
    if isinstance(hero, dict) and "badges" not in hero:
        hero["badges"] = []
        changed = True

    return doc, changed

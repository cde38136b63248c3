"""实体名称归一化与模糊匹配。"""
from __future__ import annotations

from models.scene import Shot
from planner.tables import PLACEHOLDER_TOKENS


def normalize_name(name: str | None) -> str:
    return (name or "").strip().lower()


def is_placeholder(name: str | None) -> bool:
    """空名、转场/虚焦标记、下划线技术标签。"""
    n = normalize_name(name)
    return not n or any(token in n for token in PLACEHOLDER_TOKENS)


def valid_names(names: list[str]) -> list[str]:
    return [normalize_name(n) for n in names if not is_placeholder(n)]


def subject_names(shot: Shot) -> tuple[list[str], list[str]]:
    """(主体名, 次要主体名)，小写并过滤占位符。"""
    return (
        valid_names(shot.subject_primary.names()),
        valid_names(shot.subject_secondary.names()),
    )


def visible_names(shot: Shot) -> list[str]:
    primary, secondary = subject_names(shot)
    return primary + secondary


def raw_subject_names(shot: Shot) -> list[str]:
    """主体 + 次要主体的小写原名，不过滤占位符（如 shaun_pov）。"""
    names = shot.subject_primary.names() + shot.subject_secondary.names()
    return [n for n in (normalize_name(name) for name in names) if n]


def fuzzy_match(a: str, b: str) -> bool:
    """双向子串匹配。"""
    a, b = normalize_name(a), normalize_name(b)
    if not a or not b:
        return False
    return a in b or b in a


def first_fuzzy_match(name: str, candidates: list[str] | tuple[str, ...]) -> str | None:
    """按候选顺序返回第一个匹配项，无匹配返回 None。"""
    for candidate in candidates:
        if fuzzy_match(name, candidate):
            return candidate
    return None


def any_overlap(left: list[str], right: list[str]) -> bool:
    return any(first_fuzzy_match(name, right) is not None for name in left)

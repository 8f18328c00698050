"""Pattern tables used to score messages for each destination.

Patterns are matched with ``re.search`` against the lower-cased message, so
they are written in lower case. Alternation keeps English and Japanese
synonyms in a single entry.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from agentrouter.schemas import (
    CodexTaskType,
    Destination,
    GeminiTaskType,
    InternalTaskType,
)


@dataclass(frozen=True)
class PatternEntry:
    """A weighted pattern contributing to a destination's score."""

    pattern: re.Pattern[str]
    weight: float

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class RefinementRule:
    """Sub-pattern that narrows the default sub-type."""

    label: str
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class PatternSet:
    """Ordered pattern entries and refinement rules for one destination."""

    destination: Destination
    default_subtype: str
    entries: tuple[PatternEntry, ...]
    refinements: tuple[RefinementRule, ...] = ()


def _entry(pattern: str, weight: float) -> PatternEntry:
    if not 0.0 < weight <= 1.0:
        raise ValueError(f"Pattern weight must be in (0, 1], got {weight}")
    return PatternEntry(re.compile(pattern), weight)


def _rule(label: str, pattern: str) -> RefinementRule:
    return RefinementRule(label, re.compile(pattern))


CODEX_PATTERNS = PatternSet(
    destination=Destination.CODEX,
    default_subtype=CodexTaskType.IMPLEMENT.value,
    entries=(
        _entry(r"実装|implement|作成して|作って|\bbuild\b|\bcreate\b", 0.8),
        _entry(r"リファクタ|refactor", 0.8),
        _entry(r"テスト|\btests?\b|\btesting\b|unit test", 0.7),
        _entry(r"レビュー|\breview\b|コードチェック", 0.7),
        _entry(r"バグ|\bbug\b|\bfix\b|修正|デバッグ|\bdebug\b", 0.7),
        _entry(r"関数|\bfunction\b|クラス|\bclass\b|コンポーネント|\bcomponent\b", 0.5),
        _entry(r"\bapi\b|エンドポイント|\bendpoint\b", 0.4),
        _entry(r"コード|\bcode\b|スクリプト|\bscript\b", 0.3),
    ),
    refinements=(
        _rule(CodexTaskType.TEST.value, r"テスト|\btests?\b|\btesting\b"),
        _rule(CodexTaskType.REFACTOR.value, r"リファクタ|refactor"),
        _rule(CodexTaskType.REVIEW.value, r"レビュー|\breview\b"),
    ),
)

GEMINI_PATTERNS = PatternSet(
    destination=Destination.GEMINI,
    default_subtype=GeminiTaskType.RESEARCH.value,
    entries=(
        _entry(r"調査|調べ|リサーチ|research|investigate", 0.8),
        _entry(r"比較|\bcompare\b|\bcomparison\b|\bvs\b|\bversus\b", 0.9),
        _entry(r"ライブラリ|\blibrar(y|ies)\b|フレームワーク|\bframeworks?\b", 0.75),
        _entry(r"ベストプラクティス|best practices?", 0.7),
        _entry(r"分析|解析|\banaly[sz]e\b|\banalysis\b", 0.7),
        _entry(r"アーキテクチャ|\barchitecture\b", 0.6),
        _entry(r"最新|トレンド|\blatest\b|\btrends?\b", 0.6),
        _entry(r"ドキュメント|\bdocumentation\b|\bdocs\b", 0.4),
    ),
    refinements=(
        _rule(GeminiTaskType.COMPARE.value, r"比較|\bcompare\b|\bcomparison\b|\bvs\b|\bversus\b"),
        _rule(GeminiTaskType.ANALYZE.value, r"分析|解析|\banaly[sz]e\b|\banalysis\b"),
        _rule(GeminiTaskType.ARCHITECTURE.value, r"アーキテクチャ|\barchitecture\b"),
    ),
)

INTERNAL_PATTERNS = PatternSet(
    destination=Destination.INTERNAL,
    default_subtype=InternalTaskType.GENERAL.value,
    entries=(
        _entry(r"設計|\bdesign\b", 0.7),
        _entry(r"説明|教えて|\bexplain\b|とは|what is", 0.7),
        _entry(r"計画|相談|\bplan\b|\bplanning\b", 0.6),
        _entry(r"要件|仕様|\brequirements?\b|\bspec\b", 0.6),
        _entry(r"なぜ|\bwhy\b|how does", 0.5),
    ),
    refinements=(
        _rule(InternalTaskType.DESIGN.value, r"設計|\bdesign\b|計画|\bplan\b"),
        _rule(InternalTaskType.EXPLAIN.value, r"説明|教えて|\bexplain\b|とは|what is"),
    ),
)

PATTERN_SETS: Mapping[Destination, PatternSet] = MappingProxyType({
    Destination.CODEX: CODEX_PATTERNS,
    Destination.GEMINI: GEMINI_PATTERNS,
    Destination.INTERNAL: INTERNAL_PATTERNS,
})


def get_pattern_set(destination: Destination) -> PatternSet:
    """Get the pattern set for a destination."""
    return PATTERN_SETS[destination]

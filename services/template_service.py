import random
import logging
from enum import Enum
from types import MappingProxyType
from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

from services.asset_service import Asset, Provenance
from utils.errors import EmptyCatalog

logger = logging.getLogger(__name__)


class StyleLabel(str, Enum):
    WARM = "warm"
    LIVELY = "lively"
    FORMAL = "formal"
    MINIMAL = "minimal"


FALLBACK_STYLE = StyleLabel.MINIMAL

# checked in this order when mapping AI free text onto a label
STYLE_ORDER = (StyleLabel.WARM, StyleLabel.LIVELY, StyleLabel.FORMAL, StyleLabel.MINIMAL)


@dataclass(frozen=True)
class StyleKeywords:
    """Lookup tables driving style classification and template scoring.

    ``keywords``  – words whose presence in a template name scores +2
    ``related``   – words scoring +1 per rationale keyword hit
    ``markers``   – words that identify the style in AI free text
    """

    keywords: Mapping[StyleLabel, Tuple[str, ...]]
    related: Mapping[StyleLabel, Tuple[str, ...]]
    markers: Mapping[StyleLabel, Tuple[str, ...]]

    @classmethod
    def build(cls, keywords, related, markers):
        def freeze(table):
            return MappingProxyType(
                {StyleLabel(k): tuple(w.lower() for w in v) for k, v in table.items()}
            )
        return cls(freeze(keywords), freeze(related), freeze(markers))

    def keywords_for(self, style):
        return self.keywords.get(style) or self.keywords.get(FALLBACK_STYLE, ())

    def related_for(self, style):
        return self.related.get(style, ())


DEFAULT_STYLE_KEYWORDS = StyleKeywords.build(
    keywords={
        StyleLabel.WARM: [
            "温馨", "温暖", "暖", "家", "爱", "心", "花", "粉色", "红色", "柔和", "温柔", "舒适",
            "warm", "cozy", "home", "love", "heart", "flower", "pink", "soft", "gentle",
        ],
        StyleLabel.LIVELY: [
            "活泼", "可爱", "卡通", "彩色", "亮", "动", "童", "趣味", "生动", "鲜艳", "明快",
            "lively", "cute", "cartoon", "colorful", "bright", "kid", "fun", "vivid", "playful",
        ],
        StyleLabel.FORMAL: [
            "正式", "严肃", "商务", "专业", "简洁", "简约", "黑白", "灰", "稳重", "端庄",
            "formal", "serious", "business", "professional", "classic", "gray", "grey", "elegant",
        ],
        StyleLabel.MINIMAL: [
            "简洁", "简约", "简单", "纯", "白", "素", "淡", "清", "干净", "清爽", "极简",
            "minimal", "simple", "plain", "pure", "white", "clean", "blank",
        ],
    },
    related={
        StyleLabel.WARM: ["花", "心", "爱", "家", "flower", "heart", "love", "home"],
        StyleLabel.LIVELY: ["彩", "亮", "动", "color", "bright"],
        StyleLabel.FORMAL: ["简", "素", "纯", "simple", "plain"],
        StyleLabel.MINIMAL: ["白", "纯", "素", "white", "pure", "plain"],
    },
    markers={
        StyleLabel.WARM: ["温馨", "温暖", "warm", "cozy"],
        StyleLabel.LIVELY: ["活泼", "可爱", "lively", "cute"],
        StyleLabel.FORMAL: ["正式", "严肃", "formal", "serious"],
        StyleLabel.MINIMAL: ["简洁", "简约", "minimal", "simple"],
    },
)


@dataclass(frozen=True)
class ScoredAsset:
    asset: Asset
    score: int


def classify_style(text: str, keywords: StyleKeywords = DEFAULT_STYLE_KEYWORDS) -> StyleLabel:
    if not text:
        return FALLBACK_STYLE
    lowered = text.lower()
    for style in STYLE_ORDER:
        if any(marker in lowered for marker in keywords.markers.get(style, ())):
            return style
    return FALLBACK_STYLE


def score_template(name: str, style: StyleLabel, rationale: str = "",
                   keywords: StyleKeywords = DEFAULT_STYLE_KEYWORDS) -> int:
    name_lower = name.lower()
    words = keywords.keywords_for(style)

    score = sum(2 for kw in words if kw in name_lower)

    if rationale:
        desc_lower = rationale.lower()
        related_hits = sum(1 for word in keywords.related_for(style) if word in name_lower)
        # every keyword echoed in the rationale re-rewards the related words in the name
        score += related_hits * sum(1 for kw in words if kw in desc_lower)

    return score


def rank_templates(assets: Sequence[Asset], style: StyleLabel, rationale: str = "",
                   keywords: StyleKeywords = DEFAULT_STYLE_KEYWORDS):
    scored = [
        ScoredAsset(asset, score_template(asset.name, style, rationale, keywords))
        for asset in assets
    ]
    # stable sort: equal (score, provenance) keeps discovery order
    scored.sort(key=lambda s: (-s.score, 0 if s.asset.provenance is Provenance.USER else 1))
    return scored


def recommend(assets: Sequence[Asset], style: StyleLabel, rationale: str = "",
              keywords: StyleKeywords = DEFAULT_STYLE_KEYWORDS, rng=None) -> Asset:
    """Pick the template that best fits ``style``.

    Highest score wins, user templates win ties. When nothing matches at all a
    template is drawn uniformly from ``assets`` so the first catalog entry is
    not returned every time.
    """
    assets = list(assets)
    if not assets:
        raise EmptyCatalog()

    ranked = rank_templates(assets, style, rationale, keywords)
    best = ranked[0]

    if best.score > 0:
        logger.info("style match, score=%d template=%s", best.score, best.asset.name)
        return best.asset

    logger.info("no template matched style %s, choosing randomly", style.value)
    return (rng or random).choice(assets)

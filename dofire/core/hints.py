"""Deterministic portfolio hints: rule matching and localized messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from dofire.models import PortfolioAgg
from dofire.schemas.hints import AiHint, HintShares, RuleId

MAX_HINT_LENGTH = 160
DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("pl-PL", "pl", "en-US", "en")


@dataclass(frozen=True)
class HintRule:
    id: RuleId
    condition: Callable[[HintShares], bool]
    priority: int


# lower priority number is checked first
HINT_RULES: List[HintRule] = sorted(
    [
        HintRule("stock_plus_etf_ge_80", lambda s: s.stock + s.etf >= 80, 1),
        HintRule("bond_ge_50", lambda s: s.bond >= 50, 2),
        HintRule("cash_ge_30", lambda s: s.cash >= 30, 3),
        HintRule("stock_plus_etf_lt_40", lambda s: s.stock + s.etf < 40, 4),
    ],
    key=lambda rule: rule.priority,
)

HINT_MESSAGES: Dict[str, Dict[str, str]] = {
    "stock_plus_etf_ge_80": {
        "pl": "Wysokie ryzyko – duży udział akcji i ETF.",
        "en": "High risk \u2014 large share of stocks and ETFs.",
    },
    "bond_ge_50": {
        "pl": "Bezpieczny portfel – przewaga obligacji.",
        "en": "Conservative \u2014 bonds dominate.",
    },
    "cash_ge_30": {
        "pl": "Zbyt dużo gotówki – rozważ inwestowanie nadwyżki.",
        "en": "Too much cash \u2014 consider investing surplus.",
    },
    "stock_plus_etf_lt_40": {
        "pl": "Zbyt mało akcji – niższy potencjał wzrostu.",
        "en": "Low equity \u2014 limited growth potential.",
    },
}

DEFAULT_MESSAGES: Dict[str, str] = {
    "pl": "Portfel zrównoważony.",
    "en": "Balanced portfolio.",
}


def parse_accept_language(header: Optional[str]) -> str:
    """
    Pick a supported locale from an Accept-Language header.

    Only the leading entry matters: "pl-PL"/"pl,..." map to pl-PL,
    "en-US"/"en,..." to en-US, bare language prefixes to "pl"/"en".
    Anything else falls back to "en".
    """
    if not header:
        return DEFAULT_LOCALE

    normalized = header.strip().lower()
    if normalized.startswith("pl-pl") or normalized.startswith("pl,"):
        return "pl-PL"
    if normalized.startswith("en-us") or normalized.startswith("en,"):
        return "en-US"
    if normalized.startswith("pl"):
        return "pl"
    return DEFAULT_LOCALE


def _language(locale: str) -> str:
    return locale.split("-")[0] if locale in SUPPORTED_LOCALES else DEFAULT_LOCALE


def localized_hint(rule_id: str, locale: str) -> str:
    messages = HINT_MESSAGES.get(rule_id)
    if messages is None:
        return default_hint(locale)
    return messages.get(_language(locale), messages[DEFAULT_LOCALE])


def default_hint(locale: str) -> str:
    return DEFAULT_MESSAGES.get(_language(locale), DEFAULT_MESSAGES[DEFAULT_LOCALE])


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def match_rules(shares: HintShares) -> List[RuleId]:
    """First matching rule only, checked against shares clamped to 0..100."""
    clamped = HintShares(
        stock=_clamp(shares.stock),
        etf=_clamp(shares.etf),
        bond=_clamp(shares.bond),
        cash=_clamp(shares.cash),
    )
    for rule in HINT_RULES:
        if rule.condition(clamped):
            return [rule.id]
    return []


def generate_hint(portfolio: PortfolioAgg, locale: str) -> AiHint:
    shares = HintShares(
        stock=portfolio.share_stock,
        etf=portfolio.share_etf,
        bond=portfolio.share_bond,
        cash=portfolio.share_cash,
    )
    matched = match_rules(shares)
    hint = localized_hint(matched[0], locale) if matched else default_hint(locale)
    if len(hint) > MAX_HINT_LENGTH:
        hint = hint[: MAX_HINT_LENGTH - 3] + "..."
    return AiHint(hint=hint, rules_matched=matched, shares=shares)

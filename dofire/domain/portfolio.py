from __future__ import annotations

from typing import Optional

from dofire.core.hints import generate_hint, parse_accept_language
from dofire.models import PortfolioAgg
from dofire.schemas.hints import AiHint
from dofire.storage import Repository


def get_portfolio(repo: Repository, user_id: str) -> PortfolioAgg:
    return repo.get_portfolio_agg(user_id)


def get_hint(repo: Repository, user_id: str, accept_language: Optional[str]) -> AiHint:
    locale = parse_accept_language(accept_language)
    return generate_hint(repo.get_portfolio_agg(user_id), locale)

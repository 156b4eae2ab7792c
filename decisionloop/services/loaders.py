"""Load one user's history from storage, scoped through the ownership boundary."""

from sqlalchemy.ext.asyncio import AsyncSession

from decisionloop.db.repositories import decision_repo, option_repo, outcome_repo
from decisionloop.history import UserHistory, scope_to_user


async def load_user_history(session: AsyncSession, user_id: str) -> UserHistory:
    decisions = await decision_repo.list_for_user(session, user_id)
    decision_ids = [d.id for d in decisions]
    outcomes = await outcome_repo.list_for_decisions(session, decision_ids)
    options = await option_repo.list_for_decisions(session, decision_ids)
    return scope_to_user(user_id, decisions, outcomes, options)

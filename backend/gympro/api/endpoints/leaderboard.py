"""
Leaderboard
Served from the stored snapshot when one exists, computed on the fly otherwise
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db, require_admin
from gympro.models.leaderboard import CATEGORIES, PERIODS, LeaderboardEntry
from gympro.models.user import User
from gympro.schemas.common import ApiResponse, ok
from gympro.schemas.leaderboard import (
    Category, LeaderboardResponse, LeaderboardRow, MyRankResponse, Period, RefreshResult,
)
from gympro.services.leaderboard_service import TOP_N, compute_scores, rank_of, refresh_snapshot

router = APIRouter()


def _row(rank: int, score: float, user: User, current_user_id: str) -> LeaderboardRow:
    return LeaderboardRow(
        rank=rank,
        score=score,
        user_id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        avatar_url=user.avatar_url,
        is_current_user=user.id == current_user_id,
    )


async def _from_snapshot(db: AsyncSession, period: str, category: str, user_id: str) -> Dict[str, Any]:
    result = await db.execute(
        select(LeaderboardEntry)
        .options(selectinload(LeaderboardEntry.user))
        .where(LeaderboardEntry.period == period, LeaderboardEntry.category == category)
        .order_by(LeaderboardEntry.rank.asc())
        .limit(TOP_N)
    )
    entries = [_row(e.rank, e.score, e.user, user_id) for e in result.scalars().all()]
    if not entries:
        return {}

    my_rank = None
    if not any(e.is_current_user for e in entries):
        mine = (await db.execute(
            select(LeaderboardEntry)
            .options(selectinload(LeaderboardEntry.user))
            .where(
                LeaderboardEntry.user_id == user_id,
                LeaderboardEntry.period == period,
                LeaderboardEntry.category == category,
            )
        )).scalar_one_or_none()
        if mine:
            my_rank = _row(mine.rank, mine.score, mine.user, user_id)
    return {"entries": entries, "my_rank": my_rank}


async def _computed(db: AsyncSession, period: str, category: str, user_id: str) -> Dict[str, Any]:
    scores = await compute_scores(db, period, category)
    top = scores[:TOP_N]

    wanted = {s.user_id for s in top} | {user_id}
    users = {
        u.id: u for u in (await db.execute(select(User).where(User.id.in_(wanted)))).scalars().all()
    }

    entries: List[LeaderboardRow] = []
    for index, score in enumerate(top):
        user = users.get(score.user_id)
        if user:
            entries.append(_row(index + 1, score.score, user, user_id))

    my_rank = None
    if not any(e.is_current_user for e in entries):
        rank = rank_of(scores, user_id)
        if rank is not None and user_id in users:
            my_rank = _row(rank, scores[rank - 1].score, users[user_id], user_id)
    return {"entries": entries, "my_rank": my_rank}


@router.get("", response_model=ApiResponse[LeaderboardResponse])
async def get_leaderboard(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    period: Period = Query("WEEKLY"),
    category: Category = Query("WORKOUTS"),
) -> Any:
    board = await _from_snapshot(db, period, category, user.id)
    if not board:
        board = await _computed(db, period, category, user.id)
    return ok({**board, "period": period, "category": category})


@router.get("/my-rank", response_model=ApiResponse[MyRankResponse])
async def get_my_rank(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
) -> Any:
    """Rank and score per period and category; rank 0 when the caller has no score"""
    stored = {
        (e.period, e.category): e
        for e in (await db.execute(
            select(LeaderboardEntry).where(LeaderboardEntry.user_id == user.id)
        )).scalars().all()
    }

    rankings: Dict[str, Dict[str, Dict[str, float]]] = {}
    for period in PERIODS:
        rankings[period] = {}
        for category in CATEGORIES:
            entry = stored.get((period, category))
            if entry:
                rankings[period][category] = {"rank": entry.rank, "score": entry.score}
                continue
            scores = await compute_scores(db, period, category)
            rank = rank_of(scores, user.id)
            if rank is None:
                rankings[period][category] = {"rank": 0, "score": 0}
            else:
                rankings[period][category] = {"rank": rank, "score": scores[rank - 1].score}
    return ok(rankings)


@router.post("/refresh", response_model=ApiResponse[RefreshResult])
async def refresh_leaderboard(
    *,
    db: AsyncSession = Depends(get_db),
    admin: TokenUser = Depends(require_admin),
) -> Any:
    written = await refresh_snapshot(db)
    return ok({"message": "Leaderboard refreshed", "total_entries": written})

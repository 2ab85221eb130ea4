"""Integration tests for leaderboard ranking, windows and user rank."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import make_session, make_user
from wordgame.errors import InvalidInput
from wordgame.leaderboard.service import get_leaderboard, get_user_rank, window_cutoff

NOW = datetime.now(timezone.utc)
LONG_AGO = NOW - timedelta(days=120)


@pytest_asyncio.fixture
async def players(db_session: AsyncSession):
    """Five students with distinct points, plus staff that must never rank."""
    students = [
        await make_user(db_session, f"s{i}@example.com", points=p, created_at=LONG_AGO + timedelta(hours=i))
        for i, p in enumerate([120, 40, 300, 0, 75])
    ]
    await make_user(db_session, "teacher@example.com", role="teacher", points=10_000)
    await make_user(db_session, "admin@example.com", role="admin", points=9_000)
    return students


class TestOrdering:

    @pytest.mark.asyncio
    async def test_sorted_by_points_with_positional_ranks(self, db_session, players):
        board = await get_leaderboard(db_session, limit=50)

        assert [e["points"] for e in board] == [300, 120, 75, 40, 0]
        assert [e["rank"] for e in board] == [1, 2, 3, 4, 5]
        for upper, lower in zip(board, board[1:]):
            assert upper["points"] >= lower["points"]

    @pytest.mark.asyncio
    async def test_staff_excluded(self, db_session, players):
        board = await get_leaderboard(db_session, limit=50)
        ids = {e["id"] for e in board}
        assert ids == {str(s.id) for s in players}

    @pytest.mark.asyncio
    async def test_tie_broken_by_signup_time(self, db_session: AsyncSession):
        """[50, 50, 30] with limit 3: the earlier account wins the tie."""
        late = await make_user(db_session, "late@example.com", points=50, created_at=NOW - timedelta(days=1))
        early = await make_user(db_session, "early@example.com", points=50, created_at=NOW - timedelta(days=2))
        third = await make_user(db_session, "third@example.com", points=30)

        board = await get_leaderboard(db_session, limit=3)

        assert [e["id"] for e in board] == [str(early.id), str(late.id), str(third.id)]
        assert [e["rank"] for e in board] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_tie_on_points_and_time_falls_back_to_id(self, db_session: AsyncSession):
        joined = NOW - timedelta(days=3)
        first = await make_user(db_session, "a@example.com", points=10, created_at=joined)
        second = await make_user(db_session, "b@example.com", points=10, created_at=joined)

        board = await get_leaderboard(db_session)

        assert [e["id"] for e in board] == [str(first.id), str(second.id)]

    @pytest.mark.asyncio
    async def test_entry_shape(self, db_session: AsyncSession):
        user = await make_user(db_session, "kavi@example.com", full_name="Kavi", points=15)
        await make_session(db_session, user.id, score=10)
        await make_session(db_session, user.id, score=5, completed_at=LONG_AGO)

        (entry,) = await get_leaderboard(db_session)

        assert entry == {
            "id": str(user.id),
            "fullName": "Kavi",
            "points": 15,
            "avatar_url": None,
            "games_played": 2,
            "rank": 1,
        }


class TestLimit:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [1, 3, 5, 50])
    async def test_length_is_min_of_limit_and_candidates(self, db_session, players, limit):
        board = await get_leaderboard(db_session, limit=limit)
        assert len(board) == min(limit, len(players))

    @pytest.mark.asyncio
    async def test_default_limit_is_ten(self, db_session: AsyncSession):
        for i in range(12):
            await make_user(db_session, f"p{i}@example.com", points=i)
        assert len(await get_leaderboard(db_session)) == 10

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1])
    async def test_non_positive_limit_rejected(self, db_session: AsyncSession, limit):
        with pytest.raises(InvalidInput):
            await get_leaderboard(db_session, limit=limit)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [101, 2**63])
    async def test_oversized_limit_rejected(self, db_session: AsyncSession, limit):
        with pytest.raises(InvalidInput, match="exceed"):
            await get_leaderboard(db_session, limit=limit)

    @pytest.mark.asyncio
    async def test_no_candidates_is_empty(self, db_session: AsyncSession):
        await make_user(db_session, "teacher@example.com", role="teacher", points=10)
        assert await get_leaderboard(db_session) == []


class TestTimeWindows:

    @pytest_asyncio.fixture
    async def mixed(self, db_session: AsyncSession):
        """Veteran played this week; newcomer joined this week but has not played."""
        veteran = await make_user(db_session, "veteran@example.com", points=500, created_at=LONG_AGO)
        await make_session(db_session, veteran.id, completed_at=NOW - timedelta(days=2))
        await make_session(db_session, veteran.id, completed_at=LONG_AGO)

        newcomer = await make_user(db_session, "newcomer@example.com", points=0, created_at=NOW - timedelta(days=1))

        dormant = await make_user(db_session, "dormant@example.com", points=800, created_at=LONG_AGO)
        await make_session(db_session, dormant.id, completed_at=NOW - timedelta(days=20))
        return veteran, newcomer, dormant

    @pytest.mark.asyncio
    async def test_week_by_activity(self, db_session, mixed):
        veteran, _, _ = mixed
        board = await get_leaderboard(db_session, "week", window_basis="activity")
        assert [e["id"] for e in board] == [str(veteran.id)]
        # Games outside the window still count
        assert board[0]["games_played"] == 2

    @pytest.mark.asyncio
    async def test_month_by_activity(self, db_session, mixed):
        veteran, _, dormant = mixed
        board = await get_leaderboard(db_session, "month", window_basis="activity")
        assert [e["id"] for e in board] == [str(dormant.id), str(veteran.id)]

    @pytest.mark.asyncio
    async def test_week_by_signup(self, db_session, mixed):
        _, newcomer, _ = mixed
        board = await get_leaderboard(db_session, "week", window_basis="signup")
        assert [e["id"] for e in board] == [str(newcomer.id)]

    @pytest.mark.asyncio
    async def test_all_ignores_windows(self, db_session, mixed):
        board = await get_leaderboard(db_session, "all")
        assert len(board) == 3

    @pytest.mark.asyncio
    async def test_unknown_filter_and_basis(self, db_session: AsyncSession):
        with pytest.raises(InvalidInput):
            await get_leaderboard(db_session, "year")
        with pytest.raises(InvalidInput):
            await get_leaderboard(db_session, "week", window_basis="login")

    def test_window_cutoffs(self):
        now = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)
        assert window_cutoff("all", now) is None
        assert window_cutoff("week", now) == datetime(2026, 3, 24, 12, 0, tzinfo=timezone.utc)
        assert window_cutoff("month", now) == datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestUserRank:

    @pytest.mark.asyncio
    async def test_rank_matches_unlimited_board(self, db_session, players):
        board = await get_leaderboard(db_session, limit=100)
        by_id = {e["id"]: e["rank"] for e in board}
        for student in players:
            assert await get_user_rank(db_session, student) == by_id[str(student.id)]

    @pytest.mark.asyncio
    async def test_rank_with_ties(self, db_session: AsyncSession):
        early = await make_user(db_session, "early@example.com", points=50, created_at=NOW - timedelta(days=2))
        late = await make_user(db_session, "late@example.com", points=50, created_at=NOW - timedelta(days=1))

        assert await get_user_rank(db_session, early) == 1
        assert await get_user_rank(db_session, late) == 2

    @pytest.mark.asyncio
    async def test_staff_have_no_rank(self, db_session: AsyncSession):
        teacher = await make_user(db_session, "teacher@example.com", role="teacher", points=10)
        assert await get_user_rank(db_session, teacher) is None

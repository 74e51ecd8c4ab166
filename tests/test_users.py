import uuid

import pytest

from apps.moderation.filters import Page, UserFilter
from apps.moderation.resolution import resolve_report
from apps.moderation.sanctions import create_sanction
from apps.moderation.users import UserUpdate, get_user, list_users, update_user
from core.errors import (
    InvalidDomain,
    InvalidRole,
    InvalidXp,
    NoUpdates,
    NotFound,
    SelfDemotion,
    Unauthorized,
    ValidationFailed,
)
from models import ModerationAction, User


async def test_xp_update_recomputes_level_and_is_audited(world, session_factory, fetch, count):
    async with session_factory() as db:
        user = await update_user(db, world.admin, world.author_id, UserUpdate(xp=1234, domain="Game Art"))

    assert user.xp == 1234
    assert user.level == 13
    stored = await fetch(User, world.author_id)
    assert stored.level == 13
    assert stored.domain == "Game Art"

    async with session_factory() as db:
        audit = (await db.execute(ModerationAction.__table__.select())).one()
    assert audit.action == "update"
    assert audit.content_type == "user"
    assert audit.content_id == world.author_id
    assert audit.notes == {"updates": {"xp": 1234, "domain": "Game Art"}}


async def test_reactivate_user(world, session_factory, fetch):
    async with session_factory() as db:
        await create_sanction(db, world.admin, world.author_id, "permanent_ban", "fraud")
    async with session_factory() as db:
        await update_user(db, world.admin, world.author_id, UserUpdate(is_active=True))

    assert (await fetch(User, world.author_id)).is_active is True


async def test_admin_cannot_demote_themselves(world, session_factory, fetch, count):
    async with session_factory() as db:
        with pytest.raises(SelfDemotion):
            await update_user(db, world.admin, world.admin.id, UserUpdate(role="member"))

    assert (await fetch(User, world.admin.id)).role == "admin"
    assert await count(ModerationAction) == 0


async def test_admin_can_demote_another_admin(world, session_factory, fetch):
    async with session_factory() as db:
        await update_user(db, world.admin, world.other_admin.id, UserUpdate(role="domain_lead"))

    assert (await fetch(User, world.other_admin.id)).role == "domain_lead"


@pytest.mark.parametrize(
    ("changes", "error"),
    [
        (UserUpdate(), NoUpdates),
        (UserUpdate(role="owner"), InvalidRole),
        (UserUpdate(domain="Sports"), InvalidDomain),
        (UserUpdate(xp=-5), InvalidXp),
    ],
)
async def test_invalid_updates(world, session_factory, count, changes, error):
    async with session_factory() as db:
        with pytest.raises(error):
            await update_user(db, world.admin, world.author_id, changes)

    assert await count(ModerationAction) == 0


async def test_update_unknown_user(world, session_factory, count):
    async with session_factory() as db:
        with pytest.raises(NotFound):
            await update_user(db, world.admin, uuid.uuid4(), UserUpdate(xp=10))

    assert await count(ModerationAction) == 0


async def test_get_user_includes_sanctions(world, session_factory):
    async with session_factory() as db:
        await create_sanction(db, world.admin, world.author_id, "warning", "language")

    async with session_factory() as db:
        detail = await get_user(db, world.admin, world.author_id)
        with pytest.raises(Unauthorized):
            await get_user(db, world.member, world.author_id)

    assert detail.user.username == "u1"
    assert [s.type for s, _ in detail.sanctions] == ["warning"]


async def test_get_user_moderation_counters(world, session_factory):
    async with session_factory() as db:
        author = await get_user(db, world.admin, world.author_id)
        reporter = await get_user(db, world.admin, world.reporter_id)

    assert author.stats.to_dict() == {"post_count": 1, "comment_count": 1, "reports_made": 0, "reports_received": 2}
    assert reporter.stats.reports_made == 3
    assert reporter.stats.reports_received == 0

    async with session_factory() as db:
        await resolve_report(db, world.admin, world.post_report_id, "resolve_delete", None)
    async with session_factory() as db:
        author = await get_user(db, world.admin, world.author_id)

    assert author.stats.post_count == 0
    assert author.stats.reports_received == 2


async def _usernames(session_factory, actor, filters, page=None):
    async with session_factory() as db:
        rows, _ = await list_users(db, actor, filters, page or Page.of(1, 20))
    return [user.username for user, _ in rows]


async def test_list_users_sorting_and_post_counts(world, session_factory):
    async with session_factory() as db:
        rows, pagination = await list_users(db, world.admin, UserFilter(sort_by="username", sort_order="asc"), Page())

    assert [(user.username, posts) for user, posts in rows] == [("a1", 1), ("a2", 0), ("reporter", 0), ("u1", 1)]
    assert pagination["total"] == 4
    assert (await _usernames(session_factory, world.admin, UserFilter(sort_by="xp")))[0] == "u1"
    assert await _usernames(session_factory, world.admin, UserFilter(sort_by="username"), Page.of(1, 2)) == [
        "u1",
        "reporter",
    ]


async def test_list_users_filters(world, session_factory):
    async with session_factory() as db:
        await update_user(db, world.admin, world.author_id, UserUpdate(domain="Game Art"))
    async with session_factory() as db:
        await update_user(db, world.admin, world.reporter_id, UserUpdate(is_active=False))

    admins = UserFilter(role="admin", sort_by="username", sort_order="asc")
    assert await _usernames(session_factory, world.admin, UserFilter(search="U1")) == ["u1"]
    assert await _usernames(session_factory, world.admin, UserFilter(search="%")) == []
    assert len(await _usernames(session_factory, world.admin, UserFilter(search="@EXAMPLE.com"))) == 4
    assert await _usernames(session_factory, world.admin, UserFilter(domain="Game Art")) == ["u1"]
    assert await _usernames(session_factory, world.admin, admins) == ["a1", "a2"]
    assert await _usernames(session_factory, world.admin, UserFilter(is_active=False)) == ["reporter"]
    assert "reporter" not in await _usernames(session_factory, world.admin, UserFilter(is_active=True))


@pytest.mark.parametrize(
    "kwargs",
    [{"sort_by": "password_hash"}, {"sort_by": "created_at; DROP TABLE users"}, {"sort_order": "sideways"}],
)
def test_user_filter_sort_whitelist(kwargs):
    with pytest.raises(ValidationFailed):
        UserFilter(**kwargs)


def test_user_filter_orders_by_whitelisted_column_with_id_tiebreak():
    ordering = [str(clause) for clause in UserFilter(sort_by="level", sort_order="asc").ordering()]

    assert ordering == ["users.level ASC", "users.id ASC"]


async def test_member_cannot_list_users(world, session_factory):
    async with session_factory() as db:
        with pytest.raises(Unauthorized):
            await list_users(db, world.member, UserFilter(), Page())

import math

import pytest

from core.errors import InvalidArgumentError
from core.pagination import SortOrder, build_page_meta, paginate
from models.db_models import User


@pytest.mark.parametrize(
    "total,page,limit",
    [(0, 1, 5), (1, 1, 1), (25, 1, 10), (25, 3, 10), (30, 3, 10), (7, 4, 2), (100, 7, 15)],
)
def test_page_meta_navigation(total, page, limit):
    meta = build_page_meta(total, page, limit)

    assert meta.total_pages == math.ceil(total / limit)
    assert meta.has_prev_page == (page > 1)
    assert meta.has_next_page == (page < meta.total_pages)
    assert meta.prev_page == (page - 1 if page > 1 else None)
    assert meta.next_page == (page + 1 if page < meta.total_pages else None)


@pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, -5)])
def test_page_meta_rejects_bad_window(page, limit):
    with pytest.raises(InvalidArgumentError):
        build_page_meta(10, page, limit)


def test_sort_order_parse_is_case_insensitive():
    assert SortOrder.parse("desc") is SortOrder.DESC
    assert SortOrder.parse("ASC") is SortOrder.ASC
    with pytest.raises(InvalidArgumentError):
        SortOrder.parse("sideways")


async def _add_users(session, count, name=None):
    users = [
        User(name=name or f"User {i:02d}", email=f"user{i:02d}@mail.com", auth="form")
        for i in range(1, count + 1)
    ]
    session.add_all(users)
    await session.commit()
    return users


@pytest.mark.asyncio
async def test_last_partial_page(session):
    """25 users, limit 10, page 3 -> the last 5 users."""
    await _add_users(session, 25)

    result = await paginate(session, User, page=3, limit=10, sort_by="name", order="ASC")

    assert [u.name for u in result.items] == [f"User {i}" for i in range(21, 26)]
    assert result.total_elements == 25
    assert result.total_pages == 3
    assert result.has_prev_page is True
    assert result.has_next_page is False
    assert result.prev_page == 2
    assert result.next_page is None
    assert result.sorted_by == "name"
    assert result.ordered is SortOrder.ASC


@pytest.mark.asyncio
async def test_descending_order_and_serializer(session):
    await _add_users(session, 4)

    result = await paginate(
        session, User, page=1, limit=2, sort_by="email", order="desc",
        serializer=lambda u: u.email,
    )

    assert result.items == ["user04@mail.com", "user03@mail.com"]
    assert result.has_next_page is True
    assert result.next_page == 2


@pytest.mark.asyncio
async def test_ties_are_broken_by_id(session):
    users = await _add_users(session, 6, name="Same Name")
    expected = sorted(u.id for u in users)

    first = await paginate(session, User, page=1, limit=3, sort_by="name")
    second = await paginate(session, User, page=2, limit=3, sort_by="name")

    assert [u.id for u in first.items + second.items] == expected


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(session):
    await _add_users(session, 3)

    result = await paginate(session, User, page=5, limit=2, sort_by="name")

    assert result.items == []
    assert result.total_pages == 2
    assert result.has_next_page is False
    assert result.prev_page == 4


@pytest.mark.asyncio
async def test_unknown_sort_field_is_rejected(session):
    with pytest.raises(InvalidArgumentError, match="Cannot sort by"):
        await paginate(session, User, page=1, limit=5, sort_by="name; DROP TABLE users")


@pytest.mark.asyncio
async def test_zero_limit_is_rejected(session):
    with pytest.raises(InvalidArgumentError):
        await paginate(session, User, page=1, limit=0, sort_by="name")

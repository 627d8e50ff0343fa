"""Shared fixtures for service-level unit tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from fakes import make_user


@pytest.fixture
def db():
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def notifications():
    svc = MagicMock()
    svc.send_outbid = AsyncMock(return_value=True)
    svc.send_auction_won = AsyncMock(return_value=True)
    svc.send_payment_status = AsyncMock(return_value=True)
    return svc


@pytest.fixture
def user_repo():
    users = {u: make_user(u) for u in ("user-a", "user-b", "user-c")}
    repo = MagicMock()
    repo.get_by_id = AsyncMock(side_effect=lambda db, user_id: users.get(user_id))
    return repo

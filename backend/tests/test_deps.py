import asyncio
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request

from recipe_api.core.deps import get_current_user_id, get_recipe_service
from recipe_api.core.errors import Unauthenticated
from recipe_api.services.recipes import RecipeService


def _request(**state):
    return Request({"type": "http", "method": "GET", "path": "/", "headers": [], "state": state})


@pytest.mark.parametrize(
    "state, expected",
    [
        ({"user_id": "abc"}, "abc"),
        ({"user": {"_id": "u1", "email": "a@b.c"}}, "u1"),
        ({"user": {"id": "u2"}}, "u2"),
        ({"user": SimpleNamespace(id="u3")}, "u3"),
    ],
)
def test_current_user_id_from_request_state(state, expected):
    assert get_current_user_id(_request(**state)) == expected


@pytest.mark.parametrize("state", [{}, {"user": None}, {"user": {}}, {"user_id": ""}])
def test_missing_user_is_unauthenticated(state):
    with pytest.raises(Unauthenticated):
        get_current_user_id(_request(**state))


def test_recipe_service_wiring_closes_generator(settings):
    db = MagicMock()

    async def use():
        gen = get_recipe_service(db=db, settings=settings)
        svc = await gen.__anext__()
        assert isinstance(svc, RecipeService)
        assert svc.settings is settings
        with patch.object(svc.generator, "aclose") as aclose:
            with pytest.raises(StopAsyncIteration):
                await gen.__anext__()
            aclose.assert_awaited_once()

    asyncio.run(use())

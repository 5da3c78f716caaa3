import pytest

from core.http.session import SessionState, cleanup_session, get_session


@pytest.mark.asyncio
async def test_session_reuse_and_cleanup() -> None:
    session_a = await get_session()
    session_b = await get_session()

    assert session_a is session_b
    assert session_a.headers["Accept"] == "application/json"

    await cleanup_session()
    assert session_a.closed
    assert SessionState.session is None

    session_c = await get_session()
    assert session_c is not session_a

    await cleanup_session()


@pytest.mark.asyncio
async def test_session_inherited_from_other_process_is_replaced() -> None:
    session_a = await get_session()
    SessionState.session_owner_pid = -1

    session_b = await get_session()

    assert session_b is not session_a
    await session_a.close()
    await cleanup_session()

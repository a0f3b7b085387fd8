import pytest

from client_reporter import pre_start


@pytest.mark.asyncio
async def test_wait_for_database_succeeds():
    await pre_start.wait_for_database()


@pytest.mark.asyncio
async def test_wait_for_database_retries(mocker):
    connect = mocker.patch.object(
        pre_start,
        "create_async_engine",
        side_effect=[ConnectionError("refused"), pre_start.create_async_engine(pre_start.settings.database_url)],
    )

    await pre_start.wait_for_database()

    assert connect.call_count == 2

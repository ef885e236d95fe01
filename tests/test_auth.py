import asyncio

import pytest

from canasta.auth import AuthExchangeError, SqlIdentityGateway


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def gateway(db_engine):
    return SqlIdentityGateway(db_engine, code_ttl_seconds=300)


async def sign_in(gateway, email="coach@example.com"):
    code = await gateway.issue_code(email)
    return await gateway.exchange_code_for_session(code)


def test_code_exchange_opens_a_session(gateway):
    token = run(sign_in(gateway, "Coach@Example.com "))
    user = run(gateway.get_current_user(token))
    assert user is not None
    assert user.email == "coach@example.com"


def test_same_email_is_the_same_user(gateway):
    first = run(gateway.get_current_user(run(sign_in(gateway))))
    second = run(gateway.get_current_user(run(sign_in(gateway))))
    assert first.id == second.id


def test_codes_are_single_use(gateway):
    code = run(gateway.issue_code("coach@example.com"))
    run(gateway.exchange_code_for_session(code))
    with pytest.raises(AuthExchangeError, match="already used"):
        run(gateway.exchange_code_for_session(code))


def test_unknown_and_expired_codes_are_rejected(db_engine):
    with pytest.raises(AuthExchangeError, match="Invalid"):
        run(SqlIdentityGateway(db_engine).exchange_code_for_session("nope"))

    expired = SqlIdentityGateway(db_engine, code_ttl_seconds=-1)
    code = run(expired.issue_code("coach@example.com"))
    with pytest.raises(AuthExchangeError, match="expired"):
        run(expired.exchange_code_for_session(code))


def test_blank_email_is_refused(gateway):
    with pytest.raises(ValueError):
        run(gateway.issue_code("   "))


def test_sign_out_ends_the_session(gateway):
    token = run(sign_in(gateway))
    run(gateway.sign_out(token))
    assert run(gateway.get_current_user(token)) is None
    run(gateway.sign_out(token))
    run(gateway.sign_out(None))


def test_no_token_means_no_user(gateway):
    assert run(gateway.get_current_user(None)) is None
    assert run(gateway.get_current_user("")) is None
    assert run(gateway.get_current_user("unknown")) is None

"""Session-fixation scenarios for HTTP Basic authentication.

Both scenarios obtain a session token first, then authenticate as the
admin principal while presenting that token, and finally check that the
token on its own does not grant admin access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sessionprobe._internal.logging import get_logger
from sessionprobe.scenarios.context import SessionHolder
from sessionprobe.scenarios.expect import (
    expect_denied,
    expect_same_token,
    expect_status,
    expect_token,
)
from sessionprobe.scenarios.registry import scenario

if TYPE_CHECKING:
    from sessionprobe.driver.http_client import RequestDriver
    from sessionprobe.scenarios.context import Accounts

logger = get_logger("scenarios.fixation")


@scenario(name="authenticated-user")
async def authenticated_user(driver: RequestDriver, accounts: Accounts) -> None:
    """Log in as user, then attempt admin login on the user's session."""
    holder = SessionHolder()

    login = await driver.send(accounts.user_path, accounts.user, name="user login")
    expect_status(login, 200)
    holder.token = expect_token(login)
    user_token = holder.token

    expect_status(
        await driver.send(accounts.user_path, session_token=holder.token, name="user session on user resource"),
        200,
    )
    expect_status(
        await driver.send(accounts.admin_path, session_token=holder.token, name="user session on admin resource"),
        403,
    )

    escalation = await driver.send(
        accounts.admin_path,
        accounts.admin,
        holder.token,
        name="admin login on user session",
    )
    expect_status(escalation, 200)
    expect_same_token("admin login on user session", user_token, escalation.sent_token)
    logger.debug(
        "Admin login presented %s, server answered with %s",
        escalation.sent_token,
        escalation.session_token,
    )

    expect_denied(
        await driver.send(accounts.admin_path, session_token=holder.token, name="user session after admin login"),
    )


@scenario(name="anonymous-start")
async def anonymous_start(driver: RequestDriver, accounts: Accounts) -> None:
    """Start anonymously, then attempt admin login on the anonymous session."""
    holder = SessionHolder()

    landing = await driver.send(accounts.public_path, name="anonymous visit")
    expect_status(landing, 200)
    holder.token = expect_token(landing)
    anonymous_token = holder.token

    expect_status(
        await driver.send(accounts.user_path, session_token=holder.token, name="anonymous session on user resource"),
        401,
    )
    expect_status(
        await driver.send(accounts.admin_path, session_token=holder.token, name="anonymous session on admin resource"),
        401,
    )

    escalation = await driver.send(
        accounts.admin_path,
        accounts.admin,
        holder.token,
        name="admin login on anonymous session",
    )
    expect_status(escalation, 200)
    expect_same_token("admin login on anonymous session", anonymous_token, escalation.sent_token)
    logger.debug(
        "Admin login presented %s, admin session is %s",
        escalation.sent_token,
        escalation.session_token,
    )

    expect_denied(
        await driver.send(
            accounts.admin_path,
            session_token=holder.token,
            name="anonymous session after admin login",
        ),
    )

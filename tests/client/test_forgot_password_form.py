import asyncio

from authdash.client.auth_client import AuthErrorPayload, AuthResult
from authdash.client.forms import ForgotPasswordForm
from tests.conftest import StubAuthClient

DELAY = 0.05


def _form(stub: StubAuthClient, **kwargs) -> ForgotPasswordForm:
    form = ForgotPasswordForm(stub, success_delay=DELAY, **kwargs)
    form.set_value("email", "ada@example.com")
    return form


def test_email_rules(stub_client: StubAuthClient):
    form = ForgotPasswordForm(stub_client)
    form.blur("email")
    assert form.errors_for("email") == ["Email is required"]

    form.set_value("email", "ada")
    assert form.errors_for("email") == ["Invalid email address"]

    form.set_value("email", "ada@example.com")
    assert form.errors_for("email") == []
    assert form.can_submit


async def test_sends_fixed_redirect_target(stub_client: StubAuthClient):
    form = _form(stub_client)

    await form.submit()

    assert stub_client.calls == [
        (
            "forget_password",
            {"email": "ada@example.com", "redirect_to": "/reset-password"},
        )
    ]
    form.close()


async def test_error_payload_sets_error_not_success(stub_client: StubAuthClient):
    stub_client.results["forget_password"] = AuthResult(
        error=AuthErrorPayload(message="no such user", status=404)
    )
    form = _form(stub_client)

    assert await form.submit() is False

    assert form.error == "no such user"
    assert form.success is False
    assert form.show_confirmation is False


async def test_error_without_message_uses_fallback(stub_client: StubAuthClient):
    stub_client.results["forget_password"] = AuthResult(
        error=AuthErrorPayload(message=None, status=500)
    )
    form = _form(stub_client)

    await form.submit()

    assert form.error == "Failed to send reset email"


async def test_success_shows_confirmation_then_calls_back_after_delay(
    stub_client: StubAuthClient,
):
    done = []
    form = _form(stub_client, on_success=lambda: done.append(True))

    assert await form.submit() is True

    assert form.success is True
    assert form.show_confirmation is True
    assert form.error is None
    assert done == []

    await asyncio.sleep(DELAY / 2)
    assert done == []

    await asyncio.sleep(DELAY * 2)
    assert done == [True]


async def test_success_clears_prior_error(stub_client: StubAuthClient):
    stub_client.results["forget_password"] = AuthResult(
        error=AuthErrorPayload(message="try again", status=503)
    )
    form = _form(stub_client)
    await form.submit()
    assert form.error == "try again"

    stub_client.results["forget_password"] = AuthResult(data={"status": True})
    await form.submit()

    assert form.error is None
    assert form.success is True
    form.close()


async def test_error_clears_prior_success(stub_client: StubAuthClient):
    form = _form(stub_client)
    await form.submit()
    assert form.success is True

    stub_client.results["forget_password"] = RuntimeError("network down")
    await form.submit()

    assert form.success is False
    assert form.error == "network down"


async def test_close_cancels_pending_callback(stub_client: StubAuthClient):
    done = []
    form = _form(stub_client, on_success=lambda: done.append(True))
    await form.submit()

    form.close()
    await asyncio.sleep(DELAY * 2)

    assert done == []


async def test_back_to_login(stub_client: StubAuthClient):
    seen = []
    done = []
    form = _form(
        stub_client,
        on_success=lambda: done.append(True),
        on_back_to_login=lambda: seen.append("login"),
    )
    await form.submit()

    await form.back_to_login()
    await asyncio.sleep(DELAY * 2)

    assert seen == ["login"]
    assert done == []


async def test_resubmit_while_submitting_is_noop(stub_client: StubAuthClient):
    stub_client.gate = asyncio.Event()
    form = _form(stub_client)

    first = asyncio.create_task(form.submit())
    await asyncio.sleep(0)
    await form.submit()
    stub_client.gate.set()
    await first

    assert stub_client.methods == ["forget_password"]
    form.close()


async def test_success_callback_closing_the_form_does_not_cancel_itself(
    stub_client: StubAuthClient,
):
    closed_during_callback = []

    def on_success():
        # Navigating away unmounts the page, which closes the form
        form.close()
        closed_during_callback.append(True)

    form = _form(stub_client, on_success=on_success)
    await form.submit()
    task = form._success_task
    assert task is not None

    await asyncio.wait({task}, timeout=1)

    assert closed_during_callback == [True]
    assert not task.cancelled()

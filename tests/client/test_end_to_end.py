"""Drive the dashboard client against the in-process service."""

import asyncio

from authdash.client.app import DashboardApp
from authdash.client.auth_client import AuthClient
from authdash.client.forms import ForgotPasswordForm, LoginForm, SignupForm
from authdash.client.pages import (
    DashboardPage,
    DashboardView,
    SettingsView,
    SignInPromptView,
    UserMenuView,
)
from authdash.client.views import AuthPage, AuthView
from tests.conftest import TEST_PASSWORD


async def test_sign_up_flow_lands_on_dashboard(auth_client: AuthClient, client_settings):
    app = DashboardApp(settings=client_settings, auth_client=auth_client)

    page = await app.start("/")
    assert isinstance(page.render(), SignInPromptView)
    assert app.user_menu.render() is None

    auth_page = await app.router.navigate("/auth")
    assert isinstance(auth_page, AuthPage)
    auth_page.switch_to(AuthView.SIGNUP)
    form = auth_page.render()
    assert isinstance(form, SignupForm)
    for name, value in {
        "name": "Grace Hopper",
        "username": "grace",
        "email": "grace@example.com",
        "password": "secret1",
        "confirm_password": "secret1",
    }.items():
        form.set_value(name, value)

    assert await form.submit() is True

    assert app.router.location == "/"
    dashboard = app.router.current.render()
    assert isinstance(dashboard, DashboardView)
    assert dashboard.heading == "Welcome back, Grace Hopper!"
    assert isinstance(app.user_menu.rendered, UserMenuView)

    await app.close()


async def test_login_with_username_then_sign_out(
    auth_client: AuthClient, client_settings, make_user
):
    make_user()
    app = DashboardApp(settings=client_settings, auth_client=auth_client)
    auth_page = await app.start("/auth")
    form = auth_page.render()
    assert isinstance(form, LoginForm)
    form.set_value("email_or_username", "ada")
    form.set_value("password", TEST_PASSWORD)

    await form.submit()

    settings_page = await app.router.navigate("/settings")
    view = settings_page.render()
    assert isinstance(view, SettingsView)
    assert view.username == "@ada"

    await app.user_menu.sign_out()

    assert app.router.location == "/auth"
    assert auth_client.session.value.data is None
    assert app.user_menu.rendered is None

    await app.close()


async def test_wrong_password_stays_on_form(
    auth_client: AuthClient, client_settings, make_user
):
    make_user()
    app = DashboardApp(settings=client_settings, auth_client=auth_client)
    auth_page = await app.start("/auth")
    form = auth_page.render()
    form.set_value("email_or_username", "ada@example.com")
    form.set_value("password", "wrong-password")

    assert await form.submit() is False

    assert form.error == "Invalid email or password"
    assert app.router.location == "/auth"

    await app.close()


async def test_reset_request_redirects_home_with_app_settings(
    auth_client: AuthClient, client_settings, make_user
):
    make_user()
    settings = client_settings.model_copy(
        update={"RESET_PASSWORD_REDIRECT": "/account/reset"}
    )
    auth_client.settings = settings
    app = DashboardApp(settings=settings, auth_client=auth_client)
    auth_page = await app.start("/auth")
    auth_page.switch_to(AuthView.FORGOT_PASSWORD)
    form = auth_page.render()
    assert isinstance(form, ForgotPasswordForm)
    assert form.success_delay == 0.05
    assert form.redirect_to == "/account/reset"
    form.set_value("email", "ada@example.com")

    assert await form.submit() is True
    task = form._success_task
    assert task is not None
    await asyncio.wait({task}, timeout=1)

    assert task.done()
    assert not task.cancelled()
    assert app.router.location == "/"
    assert isinstance(app.router.current, DashboardPage)

    await app.close()

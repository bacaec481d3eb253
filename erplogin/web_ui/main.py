"""NiceGUI entrypoint for the login web UI."""

from __future__ import annotations

import argparse
import os
from typing import Any, Dict

from nicegui import app, run, ui

from erplogin.utils import logging as logging_utils
from erplogin.web_ui.runtime import LOGIN_PATH, WebRuntime

AUTH_STORAGE_KEY = "auth"


def _install_theme() -> None:
    """Install CSS tokens for the current page."""
    ui.add_head_html(
        """
<style>
:root {
  --erp-bg: #f4f6fb;
  --erp-card: #ffffff;
  --erp-border: #d5dbe7;
  --erp-accent: #714b67;
}
body { background: var(--erp-bg); }
.erp-card { background: var(--erp-card); border: 1px solid var(--erp-border); min-width: 22rem; }
</style>
"""
    )
    ui.colors(primary="#714b67")


def _notify_error(exc: Exception) -> None:
    """Show exception text as a persistent notification."""
    ui.notify(str(exc), color="negative", close_button="OK")


def _current_auth() -> Dict[str, Any]:
    return dict(app.storage.user.get(AUTH_STORAGE_KEY) or {})


def _build_ui(runtime: WebRuntime) -> None:
    """Register NiceGUI pages bound to the runtime."""

    @ui.page("/")
    def index() -> None:
        ui.navigate.to(runtime.post_login_path if _current_auth() else LOGIN_PATH)

    @ui.page(LOGIN_PATH)
    def login_page() -> None:
        _install_theme()
        vm = runtime.new_login_vm()

        async def submit() -> None:
            if vm.in_progress:
                return
            if not vm.can_submit():
                ui.notify("Enter database, login and password.", color="warning")
                return
            outcome = await run.io_bound(vm.submit)
            if outcome.ok and outcome.navigate_to:
                app.storage.user[AUTH_STORAGE_KEY] = runtime.session_summary(outcome)
                ui.navigate.to(outcome.navigate_to)
            else:
                ui.notify(outcome.error or "Login failed.", color="negative")

        with ui.column().classes("absolute-center items-stretch"):
            with ui.card().classes("erp-card q-pa-lg"):
                ui.label("Sign in").classes("text-h5")
                ui.label(runtime.settings_vm.server_url or "No server configured").classes("text-caption")
                ui.input("Database").bind_value(vm, "database").props("outlined dense")
                ui.input("Login").bind_value(vm, "login").props("outlined dense autofocus")
                (
                    ui.input("Password", password=True, password_toggle_button=True)
                    .bind_value(vm, "password")
                    .props("outlined dense")
                    .on("keydown.enter", submit)
                )
                with ui.row().classes("w-full justify-center"):
                    ui.button("Log in", on_click=submit).classes("w-full").bind_visibility_from(
                        vm, "in_progress", backward=lambda busy: not busy
                    )
                    ui.spinner(size="lg").bind_visibility_from(vm, "in_progress")
            ui.link("Settings", "/settings").classes("self-center")

    def home_page() -> None:
        _install_theme()
        auth = _current_auth()
        if not auth:
            ui.navigate.to(LOGIN_PATH)
            return

        def logout() -> None:
            app.storage.user.pop(AUTH_STORAGE_KEY, None)
            ui.navigate.to(LOGIN_PATH)

        with ui.column().classes("absolute-center items-center"):
            with ui.card().classes("erp-card q-pa-lg"):
                ui.label(f"Welcome, {auth.get('username') or 'user'}").classes("text-h5")
                ui.label(f"User id: {auth.get('uid')}")
                if auth.get("database"):
                    ui.label(f"Database: {auth['database']}")
                ui.button("Log out", on_click=logout)

    ui.page(runtime.post_login_path)(home_page)

    @ui.page("/settings")
    def settings_page() -> None:
        _install_theme()
        form: Dict[str, Any] = runtime.settings_payload()

        def save() -> None:
            try:
                runtime.apply_settings_payload(form)
                runtime.save_settings()
            except (ValueError, OSError) as exc:
                _notify_error(exc)
                return
            ui.notify("Settings saved.", color="positive")

        with ui.column().classes("absolute-center items-stretch"):
            with ui.card().classes("erp-card q-pa-lg"):
                ui.label("Server settings").classes("text-h6")
                ui.input("Server URL", placeholder="https://erp.example.com").bind_value(form, "server_url")
                ui.input("Database").bind_value(form, "database")
                ui.number("Request timeout (s, 0 = none)", min=0, format="%d").bind_value(
                    form, "request_timeout_s", forward=lambda v: int(v or 0)
                )
                ui.switch("Debug logging").bind_value(form, "debug_logging")
                with ui.row():
                    ui.button("Save", on_click=save)
                    ui.link("Back to login", LOGIN_PATH)


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the login NiceGUI web UI.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--demo", action="store_true", help="use the offline demo server")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    logging_utils.configure_root()
    args = _parse_args()
    runtime = WebRuntime(demo=args.demo)
    if args.smoke_test:
        payload = runtime.settings_payload()
        print("web-smoke-ok", payload.get("server_url") or "-", payload.get("database") or "-")
        return
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="ERP Login",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("ERPLOGIN_WEB_STORAGE_SECRET", "erplogin-web-ui-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()

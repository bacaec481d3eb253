"""Command-line login against the configured server.

Usage::

    erplogin-login --url https://erp.example.com --db prod --login admin

The password is read with ``getpass`` unless ``--password-stdin`` is given.
Exit codes: 0 on success, 1 when the server rejects the login or reports an
error, 2 on transport failures or invalid configuration.
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys
from typing import Optional, Sequence, TextIO

from ..adapters.storage_local import StorageLocal
from ..domain.errors import LoginErrorKind
from ..domain.login_state import LoginOutcome
from ..utils import logging as logging_utils
from .controller import AppController, load_settings

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_UNAVAILABLE = 2

_log = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Log in to a JSON-RPC business server.")
    parser.add_argument("--url", help="server address, overrides saved settings")
    parser.add_argument("--db", help="database name, overrides saved settings")
    parser.add_argument("--login", required=True)
    parser.add_argument("--password-stdin", action="store_true", help="read the password from stdin")
    parser.add_argument("--demo", action="store_true", help="use the offline demo server")
    parser.add_argument("--json", action="store_true", help="print the raw session record as JSON")
    parser.add_argument("--save", action="store_true", help="persist --url/--db as defaults")
    return parser.parse_args(argv)


def _read_password(args: argparse.Namespace, stdin: TextIO) -> str:
    if args.password_stdin:
        return stdin.readline().rstrip("\r\n")
    return getpass.getpass("Password: ")


def exit_code_for(outcome: LoginOutcome) -> int:
    if outcome.ok:
        return EXIT_OK
    if outcome.error_kind is LoginErrorKind.TRANSPORT:
        return EXIT_UNAVAILABLE
    return EXIT_REJECTED


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
    stderr: TextIO = sys.stderr,
) -> int:
    logging_utils.configure_root(logging.WARNING)
    args = _parse_args(argv)
    storage = StorageLocal(root_dir=os.environ.get("ERPLOGIN_STORAGE_ROOT") or ".")

    try:
        settings_vm = load_settings(storage)
        overrides = {}
        if args.url:
            overrides["server_url"] = args.url
        if args.db:
            overrides["database"] = args.db
        if overrides:
            settings_vm.apply_dict(overrides)
    except ValueError as exc:
        print(f"Invalid settings: {exc}", file=stderr)
        return EXIT_UNAVAILABLE

    controller = AppController.demo(settings_vm) if args.demo else AppController(settings_vm)
    if not controller.ensure_ready():
        print("No server configured. Pass --url or set ERPLOGIN_SERVER_URL.", file=stderr)
        return EXIT_UNAVAILABLE

    vm = controller.build_login_vm()
    vm.login = args.login
    vm.password = _read_password(args, stdin)
    if not vm.can_submit():
        print("Database, login and password are required.", file=stderr)
        return EXIT_UNAVAILABLE

    outcome = vm.submit()
    if not outcome.ok:
        print(f"Login failed: {outcome.error}", file=stderr)
        return exit_code_for(outcome)

    if args.save and not args.demo:
        settings_vm.on_save = storage.save_user_settings
        try:
            settings_vm.cmd_save()
        except (ValueError, OSError) as exc:
            print(f"Could not save settings: {exc}", file=stderr)
        else:
            _log.info("Saved settings to %s", storage.settings_path)
    session = outcome.session
    assert session is not None
    if args.json:
        json.dump(dict(session.payload), stdout, indent=2, sort_keys=True, default=str)
        stdout.write("\n")
    else:
        print(f"Logged in as {session.username or args.login} (uid={session.uid})", file=stdout)
        if session.session_id:
            print(f"session_id={session.session_id}", file=stdout)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line entry point for the workspace provisioner.

Usage:
    workspace-provisioner create-workspace acme
    workspace-provisioner create-workspace acme --role admin --role viewer \\
        --user-username alice --user-email alice@acme.io --user-password 'S3cret!pw' \\
        --user-first-name Alice --user-last-name Doe
    workspace-provisioner create-user acme alice --email alice@acme.io ...
    workspace-provisioner login acme alice --password 'S3cret!pw'
    workspace-provisioner realm-exists acme
    workspace-provisioner certs acme
    workspace-provisioner set-client-secret acme <client-uuid>

Admin credentials and defaults come from the environment (or a .env file):
    KEYCLOAK_URL, KEYCLOAK_ADMIN_REALM, KEYCLOAK_ADMIN_CLIENT_ID,
    KEYCLOAK_ADMIN_CLIENT_SECRET, WORKSPACE_ROLES, WORKSPACE_CLIENT_SECRET_SEED
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from .errors import WorkspaceError
from .handlers import handle_create_user, handle_create_workspace, handle_login_user
from .handlers.user import build_user_credentials
from .models.commands import CreateUserCommand, CreateWorkspaceCommand, LoginUserCommand
from .models.user import InitialUser
from .observability.logging import setup_structured_logging
from .observability.tracing import setup_tracing, shutdown_tracing
from .services import WorkspaceProvisioner
from .settings import settings
from .utils.oidc_endpoints import construct_oidc_endpoints

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 3


def configure_logging() -> None:
    """Configure structured logging based on settings."""
    setup_structured_logging(
        log_level=settings.log_level.upper(),
        enable_json_formatting=settings.json_logs,
        correlation_id_enabled=settings.correlation_ids,
    )


def configure_tracing() -> None:
    """Configure tracing based on settings."""
    setup_tracing(
        enabled=settings.tracing_enabled,
        endpoint=settings.tracing_endpoint,
        service_name=settings.tracing_service_name,
        sample_rate=settings.tracing_sample_rate,
        use_simple_processor=True,
    )


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workspace-provisioner",
        description="Provision multi-tenant workspaces in Keycloak",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    workspace = subparsers.add_parser(
        "create-workspace", help="Create realm, client, roles and role mapper"
    )
    workspace.add_argument("domain", help="Domain name; becomes the realm name")
    workspace.add_argument(
        "--client-secret",
        help="Secret of the workspace client (default: derived or random)",
    )
    workspace.add_argument(
        "--role",
        dest="roles",
        action="append",
        help="Client role to create; repeat for several (default: WORKSPACE_ROLES)",
    )
    workspace.add_argument(
        "--no-rollback",
        action="store_true",
        help="Leave committed stages in place when a later stage fails",
    )
    workspace.add_argument("--user-username", help="Create an initial user")
    workspace.add_argument("--user-first-name", default="")
    workspace.add_argument("--user-last-name", default="")
    workspace.add_argument("--user-email")
    workspace.add_argument("--user-password")

    user = subparsers.add_parser("create-user", help="Create a user in a workspace")
    user.add_argument("realm")
    user.add_argument("username")
    user.add_argument("--first-name", required=True)
    user.add_argument("--last-name", required=True)
    user.add_argument("--email", required=True)
    user.add_argument("--password", required=True)

    login = subparsers.add_parser("login", help="Log a user in to a workspace")
    login.add_argument("realm")
    login.add_argument("username")
    login.add_argument("--password", required=True)

    exists = subparsers.add_parser("realm-exists", help="Check whether a realm exists")
    exists.add_argument("realm")

    certs = subparsers.add_parser("certs", help="Print a realm's public signing keys")
    certs.add_argument("realm")

    secret = subparsers.add_parser(
        "set-client-secret", help="Replace the secret of a workspace client"
    )
    secret.add_argument("realm")
    secret.add_argument("client_uuid")
    secret.add_argument("--secret", help="New secret (default: random)")

    return parser


async def run_command(args: argparse.Namespace) -> int:
    """Execute one parsed sub-command and return the exit code."""
    if args.command == "create-workspace":
        provisioner = WorkspaceProvisioner(
            roles=args.roles,
            rollback_on_failure=False if args.no_rollback else None,
        )
        initial_user = None
        if args.user_username:
            email, password = build_user_credentials(
                args.user_email or "", args.user_password or ""
            )
            initial_user = InitialUser(
                username=args.user_username,
                first_name=args.user_first_name,
                last_name=args.user_last_name,
                email=email,
                password=password,
            )
        result = await handle_create_workspace(
            CreateWorkspaceCommand(domain_name=args.domain),
            provisioner,
            initial_user=initial_user,
            client_secret=args.client_secret,
        )
        output = result.model_dump(by_alias=True)
        output["endpoints"] = construct_oidc_endpoints(
            provisioner.credentials.server_url, result.realm_name
        )
        _print_json(output)
        return EXIT_OK

    if args.command == "create-user":
        command = CreateUserCommand(
            realm_name=args.realm,
            username=args.username,
            first_name=args.first_name,
            last_name=args.last_name,
            email=args.email,
            password=args.password,
        )
        created = await handle_create_user(command)
        _print_json({"realm": args.realm, "username": args.username, "created": created})
        return EXIT_OK

    if args.command == "login":
        command = LoginUserCommand(
            username=args.username, password=args.password, realm_name=args.realm
        )
        token_set = await handle_login_user(command)
        _print_json(token_set.model_dump(exclude_none=True))
        return EXIT_OK

    if args.command == "realm-exists":
        exists = await WorkspaceProvisioner().realm_exists(args.realm)
        _print_json({"realm": args.realm, "exists": exists})
        return EXIT_OK if exists else EXIT_NOT_FOUND

    if args.command == "certs":
        keys = await WorkspaceProvisioner().get_realm_certificates(args.realm)
        _print_json(keys.model_dump())
        return EXIT_OK

    if args.command == "set-client-secret":
        secret = await WorkspaceProvisioner().set_client_secret(
            args.realm, args.client_uuid, args.secret
        )
        _print_json(secret.model_dump())
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "create-workspace" and not args.user_username:
        if args.user_email or args.user_password:
            parser.error("--user-email and --user-password require --user-username")

    configure_logging()
    configure_tracing()

    try:
        return asyncio.run(run_command(args))
    except WorkspaceError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.failed_stage:
            print(
                f"Failed stage: {e.failed_stage}; "
                f"completed: {e.completed_stages or 'none'}; "
                f"rolled back: {e.compensated_stages or 'none'}",
                file=sys.stderr,
            )
        return EXIT_FAILURE
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    sys.exit(main())

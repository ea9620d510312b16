#!/usr/bin/env python3
import argparse
import getpass
import sys

from fintrack.core.exceptions import FinanceTrackerError
from fintrack.database import Base, SessionLocal, engine
from fintrack.users import crud, service


def prompt_hidden(prompt_text: str) -> str:
    return getpass.getpass(prompt_text)


def create_admin(db, args) -> int:
    name = args.name or input("Admin name: ").strip()
    email = args.email or input("Admin email: ").strip()

    new_pass = prompt_hidden("Enter NEW admin password (hidden): ").strip()
    if not new_pass:
        print("No password entered. Exiting.")
        return 1
    new_pass2 = prompt_hidden("Confirm NEW admin password: ").strip()
    if new_pass != new_pass2:
        print("Passwords do not match. Exiting.")
        return 1

    user = service.register_user(db, name, email, new_pass)
    user.role = "admin"
    db.commit()
    print(f"[OK] Admin {user.email} created with id {user.id}.")
    return 0


def set_active(db, args, active: bool) -> int:
    user = crud.get_user_by_email(db, args.email, include_inactive=True)
    if not user:
        print(f"[ERROR] No user with email {args.email}.")
        return 2
    service.set_active(db, user.id, active)
    print(f"[OK] {user.email} is now {'active' if active else 'inactive'}.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fintrack-admin",
        description="Manage finance tracker accounts against the configured database.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    admin = sub.add_parser("create-admin", help="Create an admin account (password prompted)")
    admin.add_argument("--name", help="Display name")
    admin.add_argument("--email", help="Login email")

    deactivate = sub.add_parser("deactivate", help="Soft-disable an account")
    deactivate.add_argument("email")

    activate = sub.add_parser("activate", help="Re-enable a disabled account")
    activate.add_argument("email")

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if args.command == "create-admin":
            return create_admin(db, args)
        if args.command == "deactivate":
            return set_active(db, args, False)
        return set_active(db, args, True)
    except FinanceTrackerError as exc:
        print(f"[ERROR] {exc.message}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

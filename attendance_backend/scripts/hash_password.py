# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Generate a DEVADMIN_PASSWORD_HASH or check the devadmin setup."""

from __future__ import annotations

import argparse
import getpass
import sys

from attendance_backend.application.services.password_hashing import (
    MIN_BCRYPT_ROUNDS,
    AdaptivePasswordHasher,
)
from attendance_backend.shared.config import AppConfig


def generate_hash(password: str, rounds: int = MIN_BCRYPT_ROUNDS) -> str:
    return AdaptivePasswordHasher(rounds=rounds).hash(password)


def check_configuration(config: AppConfig) -> list[str]:
    problems = []
    if not config.devadmin.username:
        problems.append("DEVADMIN_USERNAME is not set")
    if not config.devadmin.password_hash:
        problems.append("DEVADMIN_PASSWORD_HASH is not set")
    if config.devadmin.jwt_secret is None:
        problems.append("JWT_SECRET is not set (or is the fallback value)")
    elif len(config.devadmin.jwt_secret) < 32:
        problems.append("JWT_SECRET is shorter than 32 characters")
    return problems


def _read_password() -> str:
    password = getpass.getpass("Devadmin password: ")
    if password != getpass.getpass("Repeat password: "):
        raise SystemExit("Passwords do not match")
    return password


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--rounds",
        type=int,
        default=MIN_BCRYPT_ROUNDS,
        help=f"bcrypt cost factor (minimum {MIN_BCRYPT_ROUNDS})",
    )
    parser.add_argument(
        "--password",
        help="Password to hash; prompted for when omitted",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Report whether devadmin login is configured instead of hashing",
    )
    args = parser.parse_args(argv)

    if args.check:
        problems = check_configuration(AppConfig())  # type: ignore[call-arg]
        if problems:
            for problem in problems:
                print(f"✗ {problem}")
            return 1
        print("✓ devadmin is configured")
        return 0

    if args.rounds < MIN_BCRYPT_ROUNDS:
        parser.error(f"--rounds must be at least {MIN_BCRYPT_ROUNDS}")

    password = args.password or _read_password()
    if not password:
        parser.error("password must not be empty")

    print(f"DEVADMIN_PASSWORD_HASH={generate_hash(password, args.rounds)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

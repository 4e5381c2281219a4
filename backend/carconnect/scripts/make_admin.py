from __future__ import annotations

import argparse
import sys

from ..db import SessionLocal
from ..errors import CarConnectError
from ..services.admin_service import AdminService
from ..services.identity_service import IdentityService


def main() -> None:
    parser = argparse.ArgumentParser(description="Grant the admin role, or brand admin with --brand-id")
    parser.add_argument("email", type=str, help="Email of a user that has signed in at least once")
    parser.add_argument("--brand-id", type=int, default=None, help="Make the user admin of this brand instead")
    args = parser.parse_args()
    db = SessionLocal()
    try:
        if args.brand_id is None:
            user = IdentityService(db).make_admin(args.email)
            print(f"user id={user.id} email={user.email} role={user.role}")
        else:
            row = AdminService(db).make_brand_admin(args.email, args.brand_id)
            print(f"brand_admin id={row.id} brand_id={row.brand_id} user_id={row.user_id}")
    except CarConnectError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()

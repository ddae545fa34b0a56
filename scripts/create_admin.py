import argparse
import sys
from dotenv import load_dotenv

load_dotenv()

from cautela.core import auth
from cautela.core.db import SessionLocal, init as db_init
from cautela.core.models import User
from cautela.core.permissions import Role

def main():
    parser = argparse.ArgumentParser(description="Create or promote a Cautela super admin")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", help="Required when creating a new user")
    parser.add_argument("--password", help="Generated and printed when omitted")
    args = parser.parse_args()

    session = SessionLocal()
    try:
        db_init()
        if user := User.get_by_email(session, args.email):
            user.role = Role.SUPER_ADMIN
            if args.password:
                user.password_hash = auth.hash_password(args.password)
            session.commit()
            print(f"Success! User '{user.email}' promoted to SUPER_ADMIN.")
            return

        if not args.name:
            parser.error("--name is required to create a new user")
        password = args.password or auth.generate_password()
        user = User(
            name=args.name,
            email=args.email.strip().lower(),
            password_hash=auth.hash_password(password),
            role=Role.SUPER_ADMIN,
        )
        session.add(user)
        session.commit()
        print(f"Success! Super admin '{user.email}' created.")
        if not args.password:
            print(f"Password: {password}")
    except Exception as e:
        session.rollback()
        print(f"Database error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        session.close()

if __name__ == "__main__":
    main()

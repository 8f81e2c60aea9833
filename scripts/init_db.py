import argparse
import logging

from app.db.couchdb import close_couch, open_couch
from app.services.posts_service import USER_TYPE
from app.utils import new_doc_id, utc_now

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_user(database, name: str, email: str, role: str) -> dict:
    """Create a user document that posts can reference as their author."""
    return database.save(
        {
            "_id": new_doc_id(),
            "type": USER_TYPE,
            "name": name,
            "email": email,
            "role": role,
            "createdAt": utc_now(),
        }
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the blog database")
    parser.add_argument("--user-name", help="seed an author with this name")
    parser.add_argument("--user-email", default="")
    parser.add_argument("--user-role", default="author", choices=["author", "admin"])
    args = parser.parse_args()

    database = open_couch()
    try:
        if args.user_name:
            user = seed_user(database, args.user_name, args.user_email, args.user_role)
            logger.info(f"Seeded {args.user_role} {user['_id']} ({args.user_name})")
        logger.info("Database ready.")
    except Exception as e:
        logger.error(f"Database setup failed: {e}", exc_info=True)
    finally:
        close_couch(database)

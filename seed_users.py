"""
Seed script to populate the database with located users for trying out swiping.
Run this script with: python seed_users.py
"""
import logging
from werkzeug.security import generate_password_hash
from app import create_app
from models import db, User

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SEED_PASSWORD = "password"

# Test users clustered around Nairobi, plus one without a location
SEED_USERS = [
    {"username": "alex", "lat": -1.2921, "long": 36.8219,
     "bio": "Adventure seeker and coffee enthusiast."},
    {"username": "maya", "lat": -1.2864, "long": 36.8172,
     "bio": "Yoga instructor by day, bookworm by night."},
    {"username": "david", "lat": -1.3032, "long": 36.7073,
     "bio": "Software engineer who loves board games."},
    {"username": "sofia", "lat": -1.2630, "long": 36.8063,
     "bio": "Chef, foodie and weekend hiker."},
    {"username": "james", "lat": None, "long": None,
     "bio": "Hasn't shared a location yet, so never shows up as available."},
]


def seed_users():
    app = create_app()
    with app.app_context():
        db.create_all()

        created = 0
        for data in SEED_USERS:
            if db.session.get(User, data["username"]):
                logger.info(f"User {data['username']} already exists, skipping")
                continue

            db.session.add(User(password=generate_password_hash(SEED_PASSWORD), **data))
            created += 1

        db.session.commit()
        logger.info(f"Seeded {created} users (password: '{SEED_PASSWORD}')")


if __name__ == '__main__':
    seed_users()

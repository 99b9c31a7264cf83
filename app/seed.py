"""
Load demo data for local development
Usage: python -m app.seed [--reset]
"""

import argparse
import logging
import sys
from datetime import date, timedelta

from .database import Base, SessionLocal, engine
from .domain.availability.week import default_week_availability
from .models import AgentProperty, Property, User
from .models_visit import AgentAvailability, Visit
from .security_utils import hash_password_bcrypt

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"name": "Administrator", "email": "admin@visitae.com", "role": "admin", "password": "admin123"},
    {"name": "Super Admin", "email": "super@visitae.com", "role": "superadmin", "password": "super123"},
    {
        "name": "Laura Martinez",
        "email": "laura.martinez@visitae.com",
        "role": "agent",
        "password": "agent123",
        "phone": "+34 612 345 678",
    },
    {
        "name": "Carlos Rodriguez",
        "email": "carlos@example.com",
        "role": "client",
        "password": "client123",
        "phone": "+34 655 123 456",
    },
]

DEMO_PROPERTIES = [
    {
        "title": "Luxury apartment with sea views",
        "price": 450000,
        "location": "Paseo Maritimo, Malaga",
        "image": "/placeholder.svg?height=300&width=400&text=Luxury+Apartment",
        "bedrooms": 3,
        "bathrooms": 2,
        "area": 120,
        "type": "sale",
        "description": "Panoramic views over the Mediterranean, premium finishes and a large terrace.",
        "property_type": "Apartment",
        "address": "Paseo Maritimo 123, 29016 Malaga",
        "features": ["Pool", "Terrace", "Garage", "24h security", "Air conditioning"],
        "status": "featured",
        "is_new": True,
        "is_featured": True,
    },
    {
        "title": "Terraced house with private garden",
        "price": 320000,
        "location": "Los Pinos, Marbella",
        "image": "/placeholder.svg?height=300&width=400&text=Terraced+House",
        "bedrooms": 4,
        "bathrooms": 3,
        "area": 180,
        "type": "sale",
        "description": "Gated community with shared areas, private garden and a spacious living room.",
        "property_type": "Terraced house",
        "address": "Calle Pinos 45, 29603 Marbella",
        "features": ["Private garden", "Community pool", "Green areas", "Security"],
        "status": "published",
    },
    {
        "title": "Duplex penthouse with panoramic terrace",
        "price": 550000,
        "location": "Historic Centre, Seville",
        "image": "/placeholder.svg?height=300&width=400&text=Duplex+Penthouse",
        "bedrooms": 2,
        "bathrooms": 2,
        "area": 95,
        "type": "sale",
        "description": "Penthouse in the historic centre with a 30m2 terrace facing the Giralda.",
        "property_type": "Penthouse",
        "address": "Calle Sierpes 78, 41004 Seville",
        "features": ["Panoramic terrace", "Lift", "Air conditioning", "Premium finishes"],
        "status": "featured",
        "is_new": True,
        "is_featured": True,
    },
    {
        "title": "Renovated flat near the university",
        "price": 950,
        "location": "Centro, Granada",
        "image": "/placeholder.svg?height=300&width=400&text=Renovated+Flat",
        "bedrooms": 2,
        "bathrooms": 1,
        "area": 70,
        "type": "rental",
        "description": "Bright, fully renovated flat a short walk from the university.",
        "property_type": "Flat",
        "address": "Calle Recogidas 12, 18005 Granada",
        "features": ["Furnished", "Lift", "Heating"],
        "status": "published",
    },
]


def reset_database():
    logger.info("Dropping existing tables...")
    Base.metadata.drop_all(bind=engine)


def seed():
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        if db.query(User).first():
            logger.info("Database already contains data; use --reset to reload the demo set")
            return

        users = {}
        for data in DEMO_USERS:
            data = dict(data)
            password = data.pop("password")
            user = User(password=hash_password_bcrypt(password), **data)
            db.add(user)
            users[user.role] = user
        db.flush()
        logger.info(f"👤 Created {len(users)} users")

        properties = [Property(**data) for data in DEMO_PROPERTIES]
        db.add_all(properties)
        db.flush()
        logger.info(f"🏠 Created {len(properties)} properties")

        agent = users["agent"]
        client = users["client"]
        for prop in properties:
            db.add(AgentProperty(agent_id=agent.id, property_id=prop.id))

        # Saturday mornings only for the demo agent
        week = default_week_availability()
        week["saturday"]["timeSlots"] = [{"id": "sat-1", "startTime": "10:00", "endTime": "13:00"}]
        db.add(AgentAvailability(agent_id=agent.id, week_data=week))

        today = date.today()
        visits = [
            Visit(property_id=properties[0].id, client_id=client.id, agent_id=agent.id,
                  date=today + timedelta(days=1), time="10:00", type="in-person", status="confirmed",
                  notes="Client interested in the terrace"),
            Visit(property_id=properties[1].id, client_id=client.id, agent_id=agent.id,
                  date=today + timedelta(days=2), time="12:30", type="video-call", status="pending"),
            Visit(property_id=properties[2].id, client_id=client.id, agent_id=agent.id,
                  date=today - timedelta(days=3), time="17:00", type="in-person", status="completed"),
            Visit(property_id=properties[3].id, client_id=client.id, agent_id=None,
                  date=today - timedelta(days=1), time="09:00", type="in-person", status="cancelled"),
        ]
        db.add_all(visits)
        db.commit()
        logger.info(f"📅 Created {len(visits)} visits")
        logger.info("✅ Seed completed successfully!")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Load Visitae demo data")
    parser.add_argument("--reset", action="store_true", help="drop all tables before seeding")
    args = parser.parse_args(argv)

    if args.reset:
        reset_database()

    try:
        seed()
    except Exception as e:
        logger.error(f"❌ Seed failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

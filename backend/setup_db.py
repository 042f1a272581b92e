import os
from restaurant_api import create_app, db
from restaurant_api.config import DevelopmentConfig, ProductionConfig
from restaurant_api.seed import seed_reference_data

def setup_database():
    """Setup database based on environment"""
    env = os.environ.get('FLASK_ENV', 'development')

    if env == 'production':
        app = create_app(ProductionConfig)
        print("Setting up production database...")
    else:
        app = create_app(DevelopmentConfig)
        print("Setting up development database...")

    with app.app_context():
        try:
            db.create_all()
            print("Database tables created successfully!")

            created = seed_reference_data(db.session)
            if any(created.values()):
                print(f"Reference data created: {created}")
            else:
                print("Reference data already exists.")
        except Exception as e:
            print(f"Error setting up database: {e}")
            db.session.rollback()
            raise

if __name__ == '__main__':
    setup_database()

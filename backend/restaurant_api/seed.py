"""
Reference data the API expects to exist: states, cities, menu categories and
the order status catalog.
"""
from restaurant_api import db
from restaurant_api.models.models import State, City, Category, StatusCatalog

STATES = [
    ('California', 'CA'),
    ('New York', 'NY'),
    ('Texas', 'TX'),
    ('Florida', 'FL'),
    ('Illinois', 'IL'),
]

CITIES = [
    ('Los Angeles', 'CA'),
    ('San Francisco', 'CA'),
    ('New York City', 'NY'),
    ('Buffalo', 'NY'),
    ('Houston', 'TX'),
    ('Dallas', 'TX'),
    ('Miami', 'FL'),
    ('Orlando', 'FL'),
    ('Chicago', 'IL'),
]

CATEGORIES = [
    'Appetizers', 'Main Courses', 'Desserts', 'Beverages', 'Salads',
    'Soups', 'Pizza', 'Burgers', 'Pasta', 'Seafood',
]

STATUSES = [
    ('Pending', 'Order has been placed and is awaiting confirmation'),
    ('Confirmed', 'Order has been confirmed by the restaurant'),
    ('Preparing', 'Restaurant is preparing the order'),
    ('Ready for Pickup', 'Order is ready for driver pickup'),
    ('Picked Up', 'Driver has picked up the order'),
    ('In Transit', 'Order is on the way to customer'),
    ('Delivered', 'Order has been delivered to customer'),
    ('Cancelled', 'Order has been cancelled'),
]

def seed_reference_data(session):
    """Insert any missing reference rows. Safe to run repeatedly."""
    created = {'states': 0, 'cities': 0, 'categories': 0, 'statuses': 0}

    states = {state.code: state for state in session.query(State).all()}
    for name, code in STATES:
        if code not in states:
            states[code] = State(name=name, code=code)
            session.add(states[code])
            created['states'] += 1
    session.flush()

    existing_cities = {(city.name, city.state_id) for city in session.query(City).all()}
    for name, state_code in CITIES:
        state_id = states[state_code].id
        if (name, state_id) not in existing_cities:
            session.add(City(name=name, state_id=state_id))
            created['cities'] += 1

    existing_categories = {category.name for category in session.query(Category).all()}
    for name in CATEGORIES:
        if name not in existing_categories:
            session.add(Category(name=name))
            created['categories'] += 1

    existing_statuses = {status.name for status in session.query(StatusCatalog).all()}
    for name, description in STATUSES:
        if name not in existing_statuses:
            session.add(StatusCatalog(name=name, description=description))
            created['statuses'] += 1

    session.commit()
    return created

def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create database tables"""
        db.create_all()
        print("Database tables created!")

    @app.cli.command('seed-db')
    def seed_db():
        """Insert reference data (states, cities, categories, statuses)"""
        created = seed_reference_data(db.session)
        print(f"Seeded {created['states']} states, {created['cities']} cities, "
              f"{created['categories']} categories, {created['statuses']} statuses")

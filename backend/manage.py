from restaurant_api import create_app
from restaurant_api.config import DevelopmentConfig

# `flask --app manage db upgrade`, `flask --app manage seed-db`, ...
app = create_app(DevelopmentConfig)

if __name__ == '__main__':
    app.run()

from .app import create_app
from .config import Config
from .database.database import validate_db_presence

config = Config()

validate_db_presence(config.database_url)

app = create_app(config.database_url, config)

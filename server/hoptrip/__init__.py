from flask import Flask
from flask.json.provider import DefaultJSONProvider
from flask_cors import CORS
from flask_mail import Mail
from pymongo.errors import PyMongoError
from bson import ObjectId
from datetime import datetime
import logging

from config import Config
from .common import handle_exception, setup_logging

logger = logging.getLogger(__name__)


# Custom JSON Provider to handle MongoDB ObjectId and datetime (Flask 3.x)
class MongoJSONProvider(DefaultJSONProvider):
    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


mail = Mail()


def _init_mongodb(config_class):
    """Ping MongoDB and create indexes; failures leave the app running in degraded mode."""
    from .core.mongodb_client import get_mongodb_client
    try:
        mongodb_client = get_mongodb_client(config_class)
        if mongodb_client.is_healthy():
            mongodb_client.create_indexes()
            logger.info("[INIT] MongoDB initialized, indexes created/verified")
        else:
            logger.warning("[INIT] MongoDB connection not healthy, storage calls will fail")
    except PyMongoError as e:
        logger.warning(f"[INIT] MongoDB initialization failed: {e}")


def create_app(config_class=Config, overrides=None):
    """
    Build the HopTrip API.

    Args:
        config_class: Config class (tests pass a subclass)
        overrides: optional {di_key: instance} replacing registered
            repositories, providers or services

    Raises:
        RuntimeError: JWT_SECRET_KEY is not configured
    """
    if not getattr(config_class, "JWT_SECRET_KEY", None):
        raise RuntimeError("JWT_SECRET_KEY must be set; refusing to start without a token signing secret")

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Setup logging (console + file)
    setup_logging(app)

    # Set custom JSON provider to handle MongoDB ObjectId (Flask 3.x)
    app.json = MongoJSONProvider(app)

    CORS(app, resources={r"/*": {
        "origins": "*",
        "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        "allow_headers": "*",
        "expose_headers": "*"
    }})

    mail.init_app(app)

    if config_class.MONGODB_INIT_ON_STARTUP:
        _init_mongodb(config_class)

    from .config.di_setup import init_di
    init_di(config_class, mail, overrides)

    from .controller.auth import init_app as auth_api_init
    app.register_blueprint(auth_api_init())

    from .controller.trip import init_app as trip_api_init
    app.register_blueprint(trip_api_init())

    from .controller.user import init_app as user_api_init
    app.register_blueprint(user_api_init())

    from .controller.invite import init_app as invite_api_init
    app.register_blueprint(invite_api_init())

    from .controller.health import init_app as health_api_init
    app.register_blueprint(health_api_init())

    app.register_error_handler(Exception, handle_exception)

    return app

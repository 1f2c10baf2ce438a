import pytest

from config import Config
from hoptrip import create_app
from hoptrip.core.di_container import DIContainer
from hoptrip.service.auth_service import AuthService
from hoptrip.service.trip_service import TripService
from hoptrip.service.user_service import UserService
from hoptrip.utils.jwt_helpers import generate_access_token

from fakes import EIFFEL_TOWER, FakePlaceProvider, InMemoryTripRepository, InMemoryUserRepository


class TestConfig(Config):
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "test-secret"
    MONGODB_INIT_ON_STARTUP = False
    GOOGLE_CLIENT_ID = "test-client-id"
    GOOGLE_PLACES_API_KEY = "test-places-key"
    MAIL_DEFAULT_SENDER = "noreply@hoptrip.test"
    MAIL_SUPPRESS_SEND = True
    PUBLIC_BASE_URL = "http://hoptrip.test"


@pytest.fixture
def config(tmp_path):
    return type("TmpTestConfig", (TestConfig,), {"LOG_DIR": str(tmp_path / "logs")})


@pytest.fixture
def trip_repo():
    return InMemoryTripRepository()


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def place_provider():
    return FakePlaceProvider({"eiffel": EIFFEL_TOWER})


@pytest.fixture
def trip_service(trip_repo, user_repo, place_provider, config):
    return TripService(trip_repo, user_repo, place_provider, config)


@pytest.fixture
def user_service(user_repo, trip_repo):
    return UserService(user_repo, trip_repo)


@pytest.fixture
def auth_service(user_repo, config):
    return AuthService(user_repo, config)


@pytest.fixture
def alice(user_repo):
    return user_repo.add("alice@example.com", "Alice")


@pytest.fixture
def bob(user_repo):
    return user_repo.add("bob@example.com", "Bob")


@pytest.fixture
def carol(user_repo):
    return user_repo.add("carol@example.com", "Carol")


@pytest.fixture
def paris_payload():
    return {
        "tripName": "Paris",
        "startDate": "2024-06-01",
        "endDate": "2024-06-03",
        "background": "https://images.example.com/paris.jpg",
    }


@pytest.fixture
def app(config, trip_repo, user_repo, place_provider):
    app = create_app(config, overrides={
        "TripRepositoryInterface": trip_repo,
        "UserRepositoryInterface": user_repo,
        "PlaceLookupProvider": place_provider,
    })
    yield app
    DIContainer.reset()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(config):
    def build(user):
        token = generate_access_token(user["_id"], user["email"], config)
        return {"Authorization": f"Bearer {token}"}
    return build

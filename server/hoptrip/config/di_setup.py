from ..core.di_container import DIContainer


def setup_dependencies(config, mail, overrides=None):
    """
    Register all dependencies in the container.

    Repositories and providers are lazy singletons, so nothing touches
    MongoDB or Google until a request needs it.

    Args:
        config: Config class (or subclass) the app was built with
        mail: flask_mail.Mail bound to the app
        overrides: optional {key: instance} replacing registered implementations
    """
    from ..core.mongodb_client import get_mongodb_client

    # Interfaces
    from ..repo.mongo.interfaces import TripRepositoryInterface, UserRepositoryInterface
    from ..providers.base_provider import PlaceLookupProvider

    # MongoDB repository implementations
    from ..repo.mongo.trip_repository import TripRepository, COLLECTION_NAME as TRIPS
    from ..repo.mongo.user_repository import UserRepository, COLLECTION_NAME as USERS

    # Providers
    from ..providers.places.google_places_provider import GooglePlacesProvider

    # Import services
    from ..service.auth_service import AuthService
    from ..service.trip_service import TripService
    from ..service.user_service import UserService
    from ..service.invitation_service import InvitationService

    DIContainer.reset()
    container = DIContainer.get_instance()

    container.register("Config", lambda c: config)
    container.register("Mail", lambda c: mail)

    # Register MongoDB repository implementations
    container.register_singleton(
        TripRepositoryInterface.__name__,
        lambda c: TripRepository(get_mongodb_client(config).get_collection(TRIPS))
    )
    container.register_singleton(
        UserRepositoryInterface.__name__,
        lambda c: UserRepository(get_mongodb_client(config).get_collection(USERS))
    )

    container.register_singleton(
        PlaceLookupProvider.__name__,
        lambda c: GooglePlacesProvider(
            api_key=config.GOOGLE_PLACES_API_KEY,
            timeout=config.EXTERNAL_TIMEOUT_SEC,
            photo_max_width=config.GOOGLE_PLACES_PHOTO_MAX_WIDTH,
        )
    )

    # Register services with factory functions for proper DI
    def create_auth_service(container):
        user_repo = container.resolve(UserRepositoryInterface.__name__)
        return AuthService(user_repo, config)

    def create_trip_service(container):
        trip_repo = container.resolve(TripRepositoryInterface.__name__)
        user_repo = container.resolve(UserRepositoryInterface.__name__)
        place_provider = container.resolve(PlaceLookupProvider.__name__)
        return TripService(trip_repo, user_repo, place_provider, config)

    def create_user_service(container):
        user_repo = container.resolve(UserRepositoryInterface.__name__)
        trip_repo = container.resolve(TripRepositoryInterface.__name__)
        return UserService(user_repo, trip_repo)

    def create_invitation_service(container):
        trip_service = container.resolve(TripService.__name__)
        return InvitationService(trip_service, container.resolve("Mail"), config)

    container.register_singleton(AuthService.__name__, create_auth_service)
    container.register_singleton(TripService.__name__, create_trip_service)
    container.register_singleton(UserService.__name__, create_user_service)
    container.register_singleton(InvitationService.__name__, create_invitation_service)

    for key, instance in (overrides or {}).items():
        container.register(key, lambda c, value=instance: value)

    return container


# Initialize the dependency injection system
def init_di(config, mail, overrides=None):
    """Initialize the dependency injection system.
    Call this function from your application's entry point."""
    return setup_dependencies(config, mail, overrides)

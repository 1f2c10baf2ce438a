class DIContainer:
    """Simple dependency injection container."""

    _instance = None
    _dependencies = {}
    _singletons = {}

    @classmethod
    def get_instance(cls):
        """Singleton pattern to get the container instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop every registration (a fresh app re-registers everything)."""
        cls._dependencies.clear()
        cls._singletons.clear()

    def register(self, key, implementation):
        """Register an implementation for a key."""
        self._dependencies[key] = implementation
        self._singletons.pop(key, None)

    def register_singleton(self, key, factory):
        """Register a factory whose result is built once, on first resolve."""
        self._dependencies[key] = _Singleton(factory)
        self._singletons.pop(key, None)

    def resolve(self, key):
        """Resolve an implementation for a key."""
        if key not in self._dependencies:
            raise KeyError(f"No implementation registered for {key}")

        implementation = self._dependencies[key]

        if isinstance(implementation, _Singleton):
            if key not in self._singletons:
                self._singletons[key] = implementation.factory(self)
            return self._singletons[key]

        # If it's a factory function that requires the container
        if callable(implementation) and not isinstance(implementation, type):
            return implementation(self)

        # If the registered item is a class, instantiate it
        elif isinstance(implementation, type):
            return implementation()

        return implementation


class _Singleton:
    def __init__(self, factory):
        self.factory = factory

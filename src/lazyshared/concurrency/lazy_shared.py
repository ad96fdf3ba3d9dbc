import enum
import functools
import threading
import time
from typing import Any, Callable, Generic, TypeVar

from lazyshared.config.logging_config import get_logger

log = get_logger(__name__)

T = TypeVar("T")

# Marks an empty slot, so a factory may legitimately return None.
_UNSET: Any = object()


class PublicationState(enum.Enum):
    """Lifecycle of a lazily shared instance."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    PUBLISHED = "published"
    POISONED = "poisoned"


class FailurePolicy(enum.Enum):
    """What happens to a holder after its factory raised."""

    RETRY = "retry"
    POISON = "poison"

    @classmethod
    def parse(cls, value: "FailurePolicy | str") -> "FailurePolicy":
        """Accept an enum member or its case-insensitive name."""
        if isinstance(value, FailurePolicy):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(policy.value for policy in cls)
            raise ValueError(f"Unknown failure policy {value!r}, expected one of: {valid}") from None


class LazySharedInstanceError(Exception):
    """Base exception for lazy shared instance errors."""

    pass


class RecursiveInitializationError(LazySharedInstanceError):
    """Raised when a factory asks its own holder for the instance it is building."""

    pass


class InstancePoisonedError(LazySharedInstanceError):
    """Raised by every call after a construction failed under the poison policy."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class LazySharedInstance(Generic[T]):
    """
    Process-wide holder for exactly one lazily constructed object.

    The object is built by ``factory`` on the first call to
    :meth:`get_instance`, from whichever thread gets there first, and every
    caller afterwards receives the identical object. The hot path is a single
    attribute read; only callers arriving before publication take the lock.

    Construction failures propagate unchanged to the thread that triggered
    them. With ``FailurePolicy.RETRY`` (the default) the holder goes back to
    uninitialized and the next caller runs the factory again. With
    ``FailurePolicy.POISON`` the failure is remembered and every later call
    raises :class:`InstancePoisonedError`. When no policy is passed, the
    ``FAILURE_POLICY`` setting is consulted on the first failure.

    Once published, the reference never changes for the life of the holder.
    There is no reset.

    Example:
        _client = LazySharedInstance(lambda: HttpClient(timeout=5))

        def get_client() -> HttpClient:
            return _client.get_instance()
    """

    def __init__(
        self,
        factory: Callable[[], T],
        name: str | None = None,
        failure_policy: FailurePolicy | str | None = None,
    ):
        """
        Initialize the holder. Nothing is constructed here.

        Args:
            factory: Zero-argument callable that builds the shared object.
            name: Label used in logs and errors. Defaults to the factory's
                  qualified name.
            failure_policy: RETRY or POISON (enum or string). If None, the
                            configured policy is used.

        Raises:
            TypeError: If factory is not callable.
            ValueError: If failure_policy is not a known policy.
        """
        if not callable(factory):
            raise TypeError(f"factory must be callable, got {type(factory).__name__}")

        self._factory: Callable[[], T] | None = factory
        self._name = name or getattr(factory, "__qualname__", None) or repr(factory)
        self._failure_policy = FailurePolicy.parse(failure_policy) if failure_policy is not None else None
        self._instance: Any = _UNSET
        self._state = PublicationState.UNINITIALIZED
        self._failure: BaseException | None = None
        self._owner: int | None = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        """Return the label of this holder."""
        return self._name

    @property
    def state(self) -> PublicationState:
        """Return the current publication state."""
        if self._instance is not _UNSET:
            return PublicationState.PUBLISHED
        return self._state

    @property
    def is_published(self) -> bool:
        """Return True once the shared object has been constructed."""
        return self._instance is not _UNSET

    def get_instance(self) -> T:
        """
        Return the shared object, constructing it on first use.

        Returns:
            The single shared object.

        Raises:
            RecursiveInitializationError: If called from inside this holder's
                                          own factory.
            InstancePoisonedError: If an earlier construction failed under the
                                   poison policy.
            Exception: Whatever the factory raised, on the triggering call.
        """
        instance = self._instance
        if instance is not _UNSET:
            return instance
        return self._initialize()

    def _initialize(self) -> T:
        # Only the constructing thread can ever see its own ident here.
        if self._owner == threading.get_ident():
            raise RecursiveInitializationError(
                f"Shared instance '{self._name}' was requested while it is being constructed"
            )

        log.debug(f"Shared instance '{self._name}' not published yet, acquiring lock")
        with self._lock:
            if self._instance is not _UNSET:
                log.debug(f"Shared instance '{self._name}' was published while waiting for the lock")
                return self._instance

            if self._state is PublicationState.POISONED:
                raise InstancePoisonedError(
                    f"Shared instance '{self._name}' is unavailable: construction failed earlier",
                    cause=self._failure,
                ) from self._failure

            assert self._factory is not None
            self._state = PublicationState.INITIALIZING
            self._owner = threading.get_ident()
            started = time.perf_counter()
            try:
                instance = self._factory()
            except BaseException as e:
                self._fail(e)
                raise
            finally:
                self._owner = None

            elapsed_ms = (time.perf_counter() - started) * 1000
            self._state = PublicationState.PUBLISHED
            self._factory = None
            # Bound last: the fast path treats a bound slot as published.
            self._instance = instance
            log.info(f"Published shared instance '{self._name}' in {elapsed_ms:.1f}ms")
            return instance

    def _fail(self, error: BaseException) -> None:
        # Caller holds the lock.
        self._state = PublicationState.UNINITIALIZED
        if not isinstance(error, Exception):
            return

        try:
            policy = self._resolve_policy()
        except ValueError as e:
            # Not cached, so a corrected setting applies to the next failure.
            log.warning(f"Ignoring invalid failure policy for '{self._name}', using retry: {e}")
            policy = FailurePolicy.RETRY
        log.error(f"Construction of shared instance '{self._name}' failed (policy={policy.value}): {error!r}")
        if policy is FailurePolicy.POISON:
            self._failure = error
            self._state = PublicationState.POISONED

    def _resolve_policy(self) -> FailurePolicy:
        if self._failure_policy is None:
            from lazyshared.config.environment import Environment

            self._failure_policy = FailurePolicy.parse(Environment.get_failure_policy())
        return self._failure_policy

    def __repr__(self) -> str:
        return f"LazySharedInstance(name={self._name!r}, state={self.state.value})"


def shared_instance(
    factory: Callable[[], T] | None = None,
    *,
    name: str | None = None,
    failure_policy: FailurePolicy | str | None = None,
) -> Any:
    """
    Turn a zero-argument factory function into a lazily shared getter.

    The returned getter builds the object on its first call and returns the
    same object on every call after that. The backing
    :class:`LazySharedInstance` is available as ``getter.holder``.

    Example:
        @shared_instance
        def get_settings_cache() -> SettingsCache:
            return SettingsCache.load()

        @shared_instance(failure_policy="poison")
        def get_model() -> Model:
            return Model.from_disk()
    """

    def decorate(fn: Callable[[], T]) -> Callable[[], T]:
        holder: LazySharedInstance[T] = LazySharedInstance(fn, name=name, failure_policy=failure_policy)

        @functools.wraps(fn)
        def getter() -> T:
            return holder.get_instance()

        getter.holder = holder  # type: ignore[attr-defined]
        return getter

    if factory is not None:
        return decorate(factory)
    return decorate


__all__ = [
    "FailurePolicy",
    "InstancePoisonedError",
    "LazySharedInstance",
    "LazySharedInstanceError",
    "PublicationState",
    "RecursiveInitializationError",
    "shared_instance",
]

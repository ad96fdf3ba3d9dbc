from .lazy_shared import (
    FailurePolicy,
    InstancePoisonedError,
    LazySharedInstance,
    LazySharedInstanceError,
    PublicationState,
    RecursiveInitializationError,
    shared_instance,
)

__all__ = [
    "FailurePolicy",
    "InstancePoisonedError",
    "LazySharedInstance",
    "LazySharedInstanceError",
    "PublicationState",
    "RecursiveInitializationError",
    "shared_instance",
]

"""repvote core - error taxonomy, models, configuration and logging."""

from .config import RepvoteSettings, clear_config_cache, get_config
from .exceptions import (
    ConfigException,
    ErrorKind,
    InsufficientVotesError,
    OwnerOnlyError,
    RepvoteException,
    SelfVoteError,
    StorageException,
    UnregisteredVoterError,
    ValidationException,
    VoterAlreadyRegisteredError,
    VotingError,
)
from .logging import (
    CallLogger,
    call_logger,
    configure_logging,
    correlation_context,
)
from .models import I128_MAX, I128_MIN, U128_MAX, Voter

__all__ = [
    # Models
    "Voter",
    "ErrorKind",
    "I128_MIN",
    "I128_MAX",
    "U128_MAX",
    # Config
    "RepvoteSettings",
    "get_config",
    "clear_config_cache",
    # Exceptions
    "RepvoteException",
    "VotingError",
    "OwnerOnlyError",
    "UnregisteredVoterError",
    "InsufficientVotesError",
    "SelfVoteError",
    "VoterAlreadyRegisteredError",
    "ValidationException",
    "ConfigException",
    "StorageException",
    # Logging
    "configure_logging",
    "correlation_context",
    "CallLogger",
    "call_logger",
]

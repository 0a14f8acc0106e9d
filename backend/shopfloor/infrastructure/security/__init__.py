from .bcrypt_hasher import BcryptPasswordHasher
from .shared_secret_policy import SharedSecretAccessPolicy

__all__ = [
    "BcryptPasswordHasher",
    "SharedSecretAccessPolicy",
]

from .api_keys import APIKeyRepository
from .files import FileRepository
from .share_links import ShareLinkRepository

__all__ = ["APIKeyRepository", "FileRepository", "ShareLinkRepository"]

from .api_key import APIKey
from .file import File
from .share_link import ShareLink, ShareLinkState

__all__ = ["APIKey", "File", "ShareLink", "ShareLinkState"]

__all__ = [
    "CrawlResult",
    "CrawlState",
    "SpiderConfig",
    "UrlList",
    "format_url",
    "get_url_list",
    "parse_document",
    "spider_web",
]

from .config import SpiderConfig
from .crawler import CrawlResult, CrawlState, spider_web
from .formatting import format_url
from .tree import parse_document
from .url_list import UrlList
from .walker import get_url_list

"""Newsfeed module. The node helper reads RSS feeds and the module
rotates through the headlines.

Config example (in mirror.yaml):
    - module: "newsfeed"
      position: "bottom_bar"
      config:
        feeds:
          - title: "BBC News"
            url: "http://feeds.bbci.co.uk/news/rss.xml"
        max_news_items: 10
        update_interval: 300
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional
from urllib import request, error

from markupsafe import escape

from core.module import Module
from core.node_helper import NodeHelper
from core.registry import register_module

logger = logging.getLogger(__name__)


def parse_feed(xml_data: bytes, title: str, limit: int) -> List[Dict[str, str]]:
    """Extract headline dicts from an RSS document."""
    root = ET.fromstring(xml_data)
    channel = root.find("channel")
    if channel is None:
        return []

    items = []
    for item in channel.findall("item"):
        headline = (item.findtext("title") or "").strip()
        if not headline:
            continue
        items.append({
            "title": headline,
            "description": (item.findtext("description") or "").strip(),
            "url": (item.findtext("link") or "").strip(),
            "pub_date": (item.findtext("pubDate") or "").strip(),
            "source": title,
        })
        if limit and len(items) >= limit:
            break
    return items


class NewsfeedHelper(NodeHelper):
    """Fetches every configured RSS feed on each cycle."""

    notification = "NEWS_ITEMS"

    def __init__(self, module, bus, config: Dict):
        super().__init__(module, bus, config)
        self.feeds = config.get("feeds") or []
        self.max_items = config.get("max_news_items", 0)
        self._timeout = config.get("timeout", 15)

    def fetch(self) -> Optional[Dict[str, Any]]:
        items: List[Dict[str, str]] = []
        for feed in self.feeds:
            url = feed.get("url")
            if not url:
                continue
            try:
                req = request.Request(url, method="GET")
                req.add_header("User-Agent", "MirrorHost/1.0")
                with request.urlopen(req, timeout=self._timeout) as resp:
                    xml_data = resp.read()
                items.extend(parse_feed(xml_data, feed.get("title", url), self.max_items))
            except error.URLError as exc:
                logger.warning("Newsfeed %s: %s: %s", self.helper_id, url, exc)
            except ET.ParseError as exc:
                logger.warning("Newsfeed %s: RSS parse error in %s: %s", self.helper_id, url, exc)

        if not items:
            return None
        if self.max_items:
            items = items[:self.max_items]
        return {"items": items, "count": len(items)}


@register_module("newsfeed")
class Newsfeed(Module):
    defaults = {
        "feeds": [
            {"title": "New York Times", "url": "https://rss.nytimes.com/services/xml/rss/nyt/HomePage.xml"},
        ],
        "show_source_title": True,
        "show_description": False,
        "max_news_items": 0,
        "update_interval": 300,  # seconds
        "broadcast_news_updates": True,
    }
    helper_class = NewsfeedHelper

    def __init__(self):
        super().__init__()
        self.items: List[Dict[str, str]] = []
        self.active = 0

    def get_styles(self):
        return ["newsfeed.css"]

    def get_translations(self):
        return {"en": "translations/en.json", "de": "translations/de.json"}

    def socket_notification_received(self, notification, payload):
        if notification == NewsfeedHelper.notification:
            self.items = payload.get("items", [])
            self.active = 0
            if self.config.get("broadcast_news_updates"):
                self.send_notification("NEWS_FEED_UPDATE", {"items": self.items})

    def get_dom(self):
        if not self.items:
            return f'<div class="dimmed">{escape(self.translate("LOADING"))}</div>'
        item = self.items[self.active % len(self.items)]
        self.active += 1
        html = ""
        if self.config.get("show_source_title"):
            html += f'<div class="newsfeed-source">{escape(item["source"])}</div>'
        html += f'<div class="newsfeed-title">{escape(item["title"])}</div>'
        if self.config.get("show_description") and item["description"]:
            html += f'<div class="newsfeed-desc">{escape(item["description"])}</div>'
        return html

"""
Static configuration for the aggregation pipeline.

Everything here is immutable and built once by `load_config()`; callers pass the
resulting `PipelineConfig` explicitly so tests can swap in alternate feeds or rules.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Pattern, Sequence, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

UNCATEGORIZED = "uncategorized"
UNKNOWN_SOURCE = "Unknown"


def _word_pattern(term: str) -> Pattern[str]:
    # Unicode-aware boundaries so "ai" never matches inside "kryeministrai"
    return re.compile(r"(?<!\w)" + re.escape(term.lower()) + r"(?!\w)", re.IGNORECASE)


@dataclass(frozen=True)
class CategoryRule:
    """A topic the classifier may assign, with its scoring vocabulary."""
    id: str
    name: str
    keywords: Tuple[str, ...]
    patterns: Tuple[str, ...] = ()
    link_keywords: Tuple[str, ...] = ()
    min_score: int = 2
    compiled_keywords: Tuple[Tuple[str, Pattern[str]], ...] = field(
        init=False, repr=False, compare=False
    )
    compiled_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)
    compiled_link_keywords: Tuple[Pattern[str], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Deduplicate keywords while keeping declaration order
        seen = dict.fromkeys(k.lower().strip() for k in self.keywords if k.strip())
        object.__setattr__(
            self, "compiled_keywords", tuple((k, _word_pattern(k)) for k in seen)
        )
        object.__setattr__(
            self, "compiled_patterns", tuple(re.compile(p, re.IGNORECASE) for p in self.patterns)
        )
        # Link keywords are plain substrings: "sport" must also score "/sporti/"
        object.__setattr__(
            self,
            "compiled_link_keywords",
            tuple(re.compile(re.escape(k.lower()), re.IGNORECASE) for k in self.link_keywords),
        )


DEFAULT_FEEDS: Tuple[str, ...] = (
    "https://telegrafi.com/feeds/feed.rss",
    "https://insajderi.org/feed/",
    "https://www.gazetaexpress.com/feed/",
)

DEFAULT_SOURCE_NAMES: Dict[str, str] = {
    "telegrafi.com": "Telegrafi",
    "insajderi.org": "Insajderi",
    "gazetaexpress.com": "Gazeta Express",
}

DEFAULT_EXCLUDED_CATEGORIES: Tuple[str, ...] = (
    "sport", "sports", "futboll", "basketboll", "tenis", "tennis", "futbol",
    "art", "arte", "kulturë", "kulture", "kulturi", "culture", "kultura",
    "showbiz", "show biz", "show-biz", "entertainment", "zbavitje",
    "horoskop", "horoscope", "astro", "astrologji", "astrology",
    "lifestyle", "jetë", "jetes", "mode", "fashion",
    "auto", "automotive", "makina", "car", "cars",
    "gastronomi", "gastronomy", "ushqim", "food", "receta", "recipe",
    "magazine", "revistë", "revista",
)

DEFAULT_SOCIAL_POST_PHRASES: Tuple[str, ...] = (
    "a post shared by",
    "instagram post",
    "facebook post",
    "postim në instagram",
    "postimi në instagram",
    "postim në facebook",
    "postimi në facebook",
)

DEFAULT_CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(
        id="politike",
        name="Politikë",
        keywords=(
            "qeveri", "parti", "ministër", "kryeministër", "president", "parlament", "zyrtar",
            "politik", "votim", "zgjedhje", "deputet", "albin kurti", "vetëvendosje", "ldk",
            "pdk", "akr", "coalicion", "koalicion", "opozitë", "opozita", "qeverisje", "shtet",
            "shteti", "shtetëror", "zyrtarë", "politikan", "politikës", "kryeministri",
            "ministri", "presidenti", "parlamenti", "asambelë", "asambleja", "kabinetti",
            "kabinet", "qeveria", "ministria", "marrëveshje", "protokoll", "takim", "bisedim",
            "diskutim politik", "politika", "reforma", "legjislacion", "ligj", "ligje",
            "vendim", "vendime", "dekret", "urdhër", "amandament", "referendum", "kandidat",
            "kandidati", "fushata", "kampanjë",
        ),
        patterns=(
            r"\b(ministri|ministër|kryeministri|presidenti|parlamenti|deputet)",
            r"\b(ldk|pdk|akr|vetëvendosje|coalicion)\b",
            r"\b(qeveri|shtet|politik)",
        ),
        link_keywords=("politik", "politika", "qeveri", "parti"),
    ),
    CategoryRule(
        id="showbiz",
        name="Show-Biz",
        keywords=(
            "showbiz", "show biz", "show-biz", "entertainment", "zbavitje", "fam", "celebritet",
            "yje", "aktori", "aktore", "këngëtar", "këngëtare", "instagram", "social media",
            "postim", "post në", "facebook post", "facebook postim", "tiktok", "youtube",
            "influencer", "bloger", "blogu", "stars", "star", "muzik", "muzikë", "album",
            "këngë", "kënga", "premierë", "premiere", "film", "serial", "televizion",
            "tv show", "program", "reality show", "talent show", "festival", "koncert",
            "event", "foto", "fotograf", "fashion week", "modë", "model", "dizajner", "dizajn",
            "magazina", "intervistë", "celebrity", "famous", "superstar",
        ),
        patterns=(
            r"\b(instagram|facebook|tiktok|youtube|social media)\b",
            r"\b(showbiz|show-biz|entertainment)\b",
            r"\b(këngëtar|aktori|celebritet|star)",
        ),
        link_keywords=("showbiz", "entertainment", "celebrity"),
    ),
    CategoryRule(
        id="sport",
        name="Sport",
        keywords=(
            "sport", "futboll", "basketboll", "tenis", "lojtar", "ndeshje", "trajner", "ekip",
            "superliga", "champions league", "mundial", "olimpik", "atletikë", "volejboll",
            "handboll", "futbollist", "basketbollist", "tenisti", "atlet", "gimnastikë",
            "not", "notimi", "notues", "shah", "shahist", "box", "boks", "boksier",
            "judokan", "judo", "karate", "kung fu", "taekwondo", "peshëngritje",
            "peshëngritës", "stadium", "arenë", "arena", "kampionat", "championship", "kupë",
            "cup", "ligë", "liga", "match", "fitore", "humbje", "barazim", "draw", "gol",
            "goal", "piket", "pike", "points", "skor", "score", "coach", "drejtor sportiv",
            "transfer", "transferim", "kontratë", "kontrata", "kampion", "champion", "rekord",
            "record", "olympic",
        ),
        patterns=(
            r"\b(futboll|basketboll|tenis|volejboll|handboll|sport)",
            r"\b(superliga|champions league|mundial|olimpik)",
            r"\b(lojtar|trajner|ekip|ndeshje)",
        ),
        link_keywords=("sport", "futboll", "basketboll", "tenis"),
    ),
    CategoryRule(
        id="teknologji",
        name="Teknologji",
        keywords=(
            "teknologji", "digital", "internet", "aplikacion", "softuer", "harduer",
            "kompjuter", "telefoni", "smartphone", "ai", "artificial intelligence", "cyber",
            "robot", "robotik", "automatizim", "automatik", "informatikë", "programim",
            "programues", "kod", "software", "hardware", "app", "mobil", "tablet", "laptop",
            "pc", "server", "cloud", "cloud computing", "data", "database",
            "baza të dhënash", "cybersecurity", "siguria cyber", "hacker", "hacking", "virus",
            "malware", "blockchain", "crypto", "kripto", "bitcoin", "ethereum", "nft",
            "startup", "tech company", "kompani teknologjie", "innovation", "inovacion",
            "gadget", "device", "teknologji e re", "teknologji e ardhshme", "future tech",
            "5g", "6g", "internet i shpejtë", "wi-fi", "bluetooth", "usb", "cable", "screen",
            "ekran", "display", "monitor", "keyboard", "mouse", "mouse pad",
        ),
        patterns=(
            r"\b(teknologji|digital|internet|cyber|ai|artificial intelligence)\b",
            r"\b(kompjuter|smartphone|software|hardware|app)\b",
            r"\b(robot|blockchain|crypto|startup|innovation)",
        ),
        link_keywords=("tech", "teknologji", "digital"),
    ),
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class PipelineConfig:
    feeds: Tuple[str, ...] = DEFAULT_FEEDS
    source_names: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SOURCE_NAMES))
    excluded_categories: Tuple[str, ...] = DEFAULT_EXCLUDED_CATEGORIES
    category_rules: Tuple[CategoryRule, ...] = DEFAULT_CATEGORY_RULES
    social_post_phrases: Tuple[str, ...] = DEFAULT_SOCIAL_POST_PHRASES
    # Images from these hosts are routed through the relay; the relay only serves them
    hotlink_hosts: Tuple[str, ...] = ("gazetaexpress.com", "telegrafi.com")
    resolution_preferring_sources: Tuple[str, ...] = ("Gazeta Express",)
    enrichment_sources: Tuple[str, ...] = ("Gazeta Express",)
    enrich_min_length: int = 500
    deduplicate: bool = True
    filter_social_posts: bool = True
    proxy_path: str = "/image-proxy"
    http_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    feed_title: str = "Lajme-AI - News Aggregator"
    feed_link: str = ""
    feed_description: str = "News from multiple sources"

    def __post_init__(self) -> None:
        # Read-only copy, so callers cannot mutate the table behind a frozen config
        object.__setattr__(self, "source_names", MappingProxyType(dict(self.source_names)))


def host_matches(host: str, domain: str) -> bool:
    """True when `host` is `domain` or one of its subdomains."""
    host = host.lower()
    domain = domain.lower()
    return host == domain or host.endswith("." + domain)


def resolve_source_name(url: str, source_names: Mapping[str, str]) -> str:
    """Map a feed URL to its publisher display name by hostname; unmatched hosts are Unknown."""
    host = urlparse(url).hostname or ""
    for domain, name in source_names.items():
        if host and host_matches(host, domain):
            return name
    return UNKNOWN_SOURCE


def load_config(*, env_file: Optional[str] = None, **overrides) -> PipelineConfig:
    """
    Build the pipeline configuration, reading `.env` and LAJME_* environment overrides.

    Keyword overrides win over the environment and are applied last.
    """
    load_dotenv(env_file)
    config = PipelineConfig()

    timeout = os.getenv("LAJME_HTTP_TIMEOUT")
    if timeout:
        config = replace(config, http_timeout=float(timeout))

    user_agent = os.getenv("LAJME_USER_AGENT")
    if user_agent:
        config = replace(config, user_agent=user_agent)

    min_length = os.getenv("LAJME_ENRICH_MIN_LENGTH")
    if min_length:
        config = replace(config, enrich_min_length=int(min_length))

    feeds_env = os.getenv("LAJME_FEEDS")
    if feeds_env:
        urls: Sequence[str] = [u.strip() for u in feeds_env.split(",") if u.strip()]
        config = replace(config, feeds=tuple(urls))

    if overrides:
        config = replace(config, **overrides)
    return config

"""
Fallback article generation.

Used when no source produced anything: the key is missing, the network is
down, or every upstream came back empty. Content is curated and fixed per
category; only ids and timestamps depend on the generation time.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from newsgrid.models.domain import Article, ArticleSource, NewsCategory, utc_now
from newsgrid.services.normalizer import placeholder_image

logger = logging.getLogger(__name__)

# <category>-fallback-<index>-<generation time in ms>
FALLBACK_ID_RE = re.compile(r"^(?P<category>[a-z]+)-fallback-(?P<index>\d+)-(?P<stamp>\d+)$")


# image_url is optional per entry; the category placeholder fills it in
CURATED_ARTICLES: dict[NewsCategory, list[dict[str, str]]] = {
    NewsCategory.GENERAL: [
        {
            'title': 'Global Summit Concludes with Historic Agreement',
            'description': 'International leaders leave the summit with a shared plan on trade, climate and security.',
            'content': 'Delegates from more than forty countries signed a joint declaration on the final day of talks...',
            'url': 'https://example.com/news/global-summit-agreement',
            'source': 'Global News Network',
            'author': 'Maria Garcia'
        },
        {
            'title': 'City Councils Expand Public Transport Funding',
            'description': 'Several major cities approve budgets that add night routes and cut fares for students.',
            'content': 'Transit authorities say the new funding will add more than two hundred buses by next year...',
            'url': 'https://example.com/news/public-transport-funding',
            'source': 'Daily Report',
            'author': 'James Miller'
        }
    ],
    NewsCategory.BUSINESS: [
        {
            'title': 'Global Markets Show Strong Performance',
            'description': 'International stock markets continue their upward trend as economic indicators remain positive.',
            'content': 'Market analysis shows continued growth across multiple sectors...',
            'url': 'https://example.com/business/market-performance',
            'source': 'Financial Times',
            'author': 'Sarah Johnson'
        },
        {
            'title': 'Major Corporation Announces Innovative Partnership',
            'description': 'Two industry leaders agree to share logistics networks in a multi-year deal.',
            'content': 'The partnership is expected to reduce delivery times and operating costs for both companies...',
            'url': 'https://example.com/business/corporate-partnership',
            'source': 'Business Wire',
            'author': 'David Lee'
        }
    ],
    NewsCategory.ENTERTAINMENT: [
        {
            'title': 'New Entertainment Series Breaks Streaming Records',
            'description': 'The latest release on streaming platforms has captured global audience attention.',
            'content': 'Entertainment industry analysts report record-breaking viewership...',
            'url': 'https://example.com/entertainment/streaming-records',
            'source': 'Entertainment Weekly',
            'author': 'Lisa Park'
        },
        {
            'title': 'Award-Winning Film Premieres to Critical Acclaim',
            'description': 'Critics praise the festival favourite ahead of its worldwide release.',
            'content': 'The film received a standing ovation at its premiere and is already tipped for awards...',
            'url': 'https://example.com/entertainment/film-premiere',
            'source': 'Screen Daily',
            'author': 'Tom Harris'
        }
    ],
    NewsCategory.HEALTH: [
        {
            'title': 'Revolutionary Health Study Results Released',
            'description': 'New research reveals promising developments in personalized medicine and treatment approaches.',
            'content': 'Medical researchers have published groundbreaking findings...',
            'url': 'https://example.com/health/study-results',
            'source': 'Medical Journal Today',
            'author': 'Dr. Robert Chen'
        },
        {
            'title': 'Mental Health Awareness Campaign Gains Momentum',
            'description': 'Schools and employers sign up to a national programme on wellbeing at work and study.',
            'content': 'Organisers say participation has doubled since the campaign launched in the spring...',
            'url': 'https://example.com/health/mental-health-campaign',
            'source': 'Health Matters',
            'author': 'Anna Kowalski'
        }
    ],
    NewsCategory.SCIENCE: [
        {
            'title': 'Space Mission Discovers New Planetary System',
            'description': 'Astronomers confirm three rocky planets orbiting a nearby star.',
            'content': 'The discovery was made using data collected over eighteen months of observation...',
            'url': 'https://example.com/science/planetary-system',
            'source': 'Science Today',
            'author': 'Dr. Emily Stone'
        },
        {
            'title': 'Renewable Energy Research Achieves Efficiency Milestone',
            'description': 'A new solar cell design converts more sunlight to electricity than any before it.',
            'content': 'The laboratory result still needs to be reproduced at industrial scale...',
            'url': 'https://example.com/science/solar-efficiency',
            'source': 'Research Review',
            'author': 'Kenji Watanabe'
        }
    ],
    NewsCategory.SPORTS: [
        {
            'title': 'Championship Game Delivers Thrilling Finish',
            'description': 'Last-minute victory caps off an incredible season of professional sports.',
            'content': 'In a game that will be remembered for years to come...',
            'url': 'https://example.com/sports/championship-game',
            'source': 'Sports Central',
            'author': 'Mike Williams'
        },
        {
            'title': 'Athlete Breaks Long-Standing World Record',
            'description': 'The record had stood for more than two decades before Saturday\'s race.',
            'content': 'Officials confirmed the time after a review of the timing equipment...',
            'url': 'https://example.com/sports/world-record',
            'source': 'Athletics Weekly',
            'author': 'Carla Mendes'
        }
    ],
    NewsCategory.TECHNOLOGY: [
        {
            'title': 'Breaking: Major Technology Breakthrough Announced',
            'description': 'Scientists have made a significant advancement in quantum computing technology that could revolutionize the field.',
            'content': 'This is a longer content preview that would normally contain the full article text from the news source...',
            'url': 'https://example.com/technology/quantum-breakthrough',
            'source': 'Tech News Daily',
            'author': 'John Smith'
        },
        {
            'title': 'Tech Giants Collaborate on Sustainability Initiative',
            'description': 'Leading technology companies pledge to power their data centres with renewable energy.',
            'content': 'The initiative sets shared targets for energy use and hardware recycling...',
            'url': 'https://example.com/technology/sustainability-initiative',
            'source': 'Digital Trends Weekly',
            'author': 'Priya Natarajan'
        }
    ],
    NewsCategory.WORLD: [
        {
            'title': 'Climate Summit Reaches Historic Agreement',
            'description': 'World leaders unite on ambitious climate goals and renewable energy initiatives.',
            'content': 'The international climate summit concluded with unprecedented cooperation...',
            'url': 'https://example.com/world/climate-summit',
            'source': 'Global News Network',
            'author': 'Maria Garcia'
        },
        {
            'title': 'Humanitarian Corridor Opens After Weeks of Talks',
            'description': 'Aid convoys begin moving supplies to regions cut off since the start of the year.',
            'content': 'Relief agencies said the first trucks crossed the border early on Monday...',
            'url': 'https://example.com/world/humanitarian-corridor',
            'source': 'World Desk',
            'author': 'Omar Haddad'
        }
    ],
    NewsCategory.POLITICS: [
        {
            'title': 'Parliament Passes Landmark Data Protection Bill',
            'description': 'The new law gives citizens more control over how their personal data is used.',
            'content': 'The bill passed with support from both sides after months of committee hearings...',
            'url': 'https://example.com/politics/data-protection-bill',
            'source': 'Political Review',
            'author': 'Helen Brooks'
        },
        {
            'title': 'Election Commission Announces Voter Registration Drive',
            'description': 'Officials aim to register a million new voters before the autumn elections.',
            'content': 'Registration booths will open in libraries and community centres across the country...',
            'url': 'https://example.com/politics/voter-registration',
            'source': 'Capital Times',
            'author': 'Samuel Okafor'
        }
    ],
}


class FallbackGenerator:
    """Produces curated stand-in articles when no live data is available"""

    def __init__(self, curated: Optional[dict[NewsCategory, list[dict[str, str]]]] = None):
        self.curated = curated if curated is not None else CURATED_ARTICLES

    def has_curated(self, category: Optional[NewsCategory]) -> bool:
        return bool(category) and bool(self.curated.get(category))

    def generate(self, category: Optional[NewsCategory] = None,
                 now: Optional[datetime] = None) -> list[Article]:
        """Curated list for the category, or the general set when none exists"""
        now = now or utc_now()
        if not self.has_curated(category):
            category = NewsCategory.GENERAL
        return self._build(category, self.curated.get(category, []), now)

    def generate_mixed(self, now: Optional[datetime] = None) -> list[Article]:
        """Every curated list, for search requests that have no category"""
        now = now or utc_now()
        articles = []
        for category, entries in self.curated.items():
            articles.extend(self._build(category, entries, now))
        return articles

    def find(self, article_id: str) -> Optional[Article]:
        """Rebuild a previously served fallback article from its id

        Content is keyed by category and index, so an id handed out by any
        earlier call still resolves. The article keeps the requested id and
        its timestamp is derived from the stamp in it.
        """
        match = FALLBACK_ID_RE.match(article_id or "")
        if not match:
            return None

        category = NewsCategory.parse(match.group('category'))
        index = int(match.group('index'))
        entries = self.curated.get(category, []) if category else []
        if index >= len(entries):
            return None

        generated_at = datetime.fromtimestamp(int(match.group('stamp')) / 1000, tz=timezone.utc)
        article = self._build(category, entries, generated_at)[index]
        return article.model_copy(update={'id': article_id})

    def _build(self, category: NewsCategory, entries: list[dict[str, str]], now: datetime) -> list[Article]:
        stamp = int(now.timestamp() * 1000)
        articles = []
        for index, entry in enumerate(entries):
            # Back-dated by index so each list is already newest-first
            published_at = now - timedelta(hours=index)
            articles.append(Article(
                id=f"{category.value}-fallback-{index}-{stamp}",
                title=entry['title'],
                description=entry['description'],
                content=entry.get('content') or entry['description'],
                url=entry['url'],
                image_url=entry.get('image_url') or placeholder_image(category),
                published_at=published_at,
                source=ArticleSource(name=entry['source']),
                author=entry.get('author') or entry['source'],
                category=category
            ))
        return articles

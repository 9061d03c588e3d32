"""Declarative rule tables for website classification.

Every table here is evaluated in list order. Order matters: business
model ties resolve to the earlier rule, value-proposition categories are
first-match, and theme ties keep table order after a stable sort.

Keywords are matched case-insensitively on whole words, allowing a plain
"s"/"es" plural suffix (so "service area" matches "service areas" but
"app" does not match "apply").
"""

import re
from dataclasses import dataclass, field


def compile_keyword(keyword: str) -> re.Pattern[str]:
    """Compile a whole-word, plural-tolerant pattern for a keyword or phrase."""
    body = r"\s+".join(re.escape(word) for word in keyword.lower().split())
    return re.compile(rf"\b{body}(?:s|es)?\b", re.IGNORECASE)


@dataclass
class KeywordGroup:
    """Weighted keyword group.

    A group contributes its weight once when any keyword matches, plus
    EXTRA_HIT_BONUS for every further distinct keyword it matched.
    """

    keywords: tuple[str, ...]
    weight: float
    _compiled: list[tuple[str, re.Pattern[str]]] = field(
        init=False, repr=False, default_factory=list
    )

    def __post_init__(self) -> None:
        self._compiled = [(kw, compile_keyword(kw)) for kw in self.keywords]

    def matched(self, text: str) -> list[str]:
        return [kw for kw, pattern in self._compiled if pattern.search(text)]


EXTRA_HIT_BONUS = 0.5

# Score that maps to confidence 1.0
SCORE_SCALE = 10.0


@dataclass
class BusinessModelRule:
    business_type: str
    description: str
    groups: tuple[KeywordGroup, ...]

    def score(self, text: str) -> tuple[float, list[str]]:
        total = 0.0
        hits: list[str] = []
        for group in self.groups:
            matched = group.matched(text)
            if matched:
                total += group.weight + EXTRA_HIT_BONUS * (len(matched) - 1)
                hits.extend(matched)
        return total, hits


DEFAULT_BUSINESS_MODEL = "Service Business"

BUSINESS_MODEL_RULES: list[BusinessModelRule] = [
    BusinessModelRule(
        "B2B SaaS",
        "Software sold to businesses, usually on a subscription",
        (
            KeywordGroup(
                (
                    "enterprise",
                    "teams",
                    "api",
                    "integration",
                    "workflow",
                    "automation",
                    "dashboard",
                    "analytics",
                    "saas",
                    "b2b",
                ),
                3,
            ),
            KeywordGroup(
                (
                    "pricing plans",
                    "free trial",
                    "demo",
                    "schedule a call",
                    "per user",
                    "per seat",
                ),
                2,
            ),
        ),
    ),
    BusinessModelRule(
        "E-commerce",
        "Online store selling products directly to consumers",
        (
            KeywordGroup(
                (
                    "shop",
                    "cart",
                    "checkout",
                    "add to cart",
                    "buy now",
                    "products",
                    "shipping",
                    "shopping",
                ),
                4,
            ),
            KeywordGroup(
                ("free shipping", "returns", "warranty", "in stock", "sale"), 2
            ),
        ),
    ),
    BusinessModelRule(
        "Service Business",
        "Business delivering services to local or regional customers",
        (
            KeywordGroup(
                (
                    "services",
                    "book appointment",
                    "book",
                    "appointment",
                    "schedule",
                    "consultation",
                    "contact us",
                ),
                3,
            ),
            KeywordGroup(
                (
                    "local",
                    "near you",
                    "service area",
                    "locations",
                    "licensed",
                    "insured",
                ),
                2,
            ),
        ),
    ),
    BusinessModelRule(
        "Agency",
        "Agency delivering creative or marketing work for clients",
        (
            KeywordGroup(
                ("agency", "clients", "portfolio", "case studies", "projects", "campaign"),
                4,
            ),
            KeywordGroup(("creative", "design", "marketing", "branding", "digital"), 2),
        ),
    ),
    BusinessModelRule(
        "B2C SaaS",
        "Software or app sold to individual consumers",
        (
            KeywordGroup(
                ("app", "download", "individuals", "ios", "android", "app store"), 3
            ),
            KeywordGroup(("free plan", "upgrade", "personal"), 2),
        ),
    ),
    BusinessModelRule(
        "Marketplace",
        "Platform connecting buyers and sellers",
        (
            KeywordGroup(("marketplace", "sellers", "buyers", "vendors", "listings"), 4),
            KeywordGroup(("browse", "compare", "commission", "sell"), 2),
        ),
    ),
    BusinessModelRule(
        "Consulting",
        "Advisory and consulting firm",
        (
            KeywordGroup(
                ("consulting", "consultant", "advisory", "advisors", "strategy"), 4
            ),
            KeywordGroup(("expertise", "insights", "transformation"), 2),
        ),
    ),
    BusinessModelRule(
        "Education/Training",
        "Courses, training or educational programs",
        (
            KeywordGroup(
                (
                    "course",
                    "training",
                    "learn",
                    "education",
                    "certification",
                    "academy",
                    "curriculum",
                ),
                4,
            ),
            KeywordGroup(("students", "lessons", "tutorial", "enroll", "instructor"), 2),
        ),
    ),
    BusinessModelRule(
        "Content/Media",
        "Publisher monetising content and audience",
        (
            KeywordGroup(("blog", "news", "articles", "magazine", "podcast", "stories"), 3),
            KeywordGroup(("subscribe", "newsletter", "editorial", "read more"), 2),
        ),
    ),
    BusinessModelRule(
        "Healthcare",
        "Healthcare provider or health product",
        (
            KeywordGroup(
                (
                    "health",
                    "medical",
                    "patients",
                    "doctor",
                    "clinic",
                    "healthcare",
                    "hospital",
                ),
                4,
            ),
            KeywordGroup(("wellness", "treatment", "care", "insurance"), 2),
        ),
    ),
    BusinessModelRule(
        "Real Estate",
        "Property sales, rentals or brokerage",
        (
            KeywordGroup(
                ("real estate", "property", "properties", "homes for sale", "realtor", "rent"),
                4,
            ),
            KeywordGroup(("buy", "neighborhood", "open house"), 2),
        ),
    ),
    BusinessModelRule(
        "Financial Services",
        "Banking, lending, insurance or investment services",
        (
            KeywordGroup(
                (
                    "finance",
                    "financial",
                    "banking",
                    "investment",
                    "loans",
                    "mortgage",
                    "insurance",
                ),
                4,
            ),
            KeywordGroup(("credit", "savings", "wealth", "retirement"), 2),
        ),
    ),
    BusinessModelRule(
        "Professional Services",
        "Licensed professional practice (legal, accounting, etc.)",
        (
            KeywordGroup(
                ("professional", "law firm", "attorney", "accounting", "legal", "cpa"), 3
            ),
            KeywordGroup(("certified", "experienced", "expertise"), 2),
        ),
    ),
    BusinessModelRule(
        "Subscription Service",
        "Recurring product or membership subscription",
        (
            KeywordGroup(
                ("subscription", "subscribe and save", "monthly box", "membership"), 4
            ),
            KeywordGroup(("monthly", "cancel anytime", "delivered"), 2),
        ),
    ),
    BusinessModelRule(
        "Freemium Model",
        "Free core product with paid upgrades",
        (
            KeywordGroup(("freemium", "free forever", "free plan", "upgrade to pro"), 4),
            KeywordGroup(("premium features", "unlock"), 2),
        ),
    ),
    BusinessModelRule(
        "Non-profit",
        "Charity or mission-driven organisation",
        (
            KeywordGroup(
                ("donate", "nonprofit", "non-profit", "charity", "volunteer", "foundation"),
                4,
            ),
            KeywordGroup(("mission", "community", "impact"), 2),
        ),
    ),
    BusinessModelRule(
        "Manufacturing",
        "Manufacturer or industrial supplier",
        (
            KeywordGroup(
                ("manufacturing", "manufacturer", "factory", "industrial", "oem"), 4
            ),
            KeywordGroup(("wholesale", "bulk", "supply chain", "production"), 2),
        ),
    ),
    BusinessModelRule(
        "Retail",
        "Physical or omnichannel retailer",
        (
            KeywordGroup(("store", "retail", "in-store", "store locator", "brands"), 3),
            KeywordGroup(("deals", "collection"), 2),
        ),
    ),
    BusinessModelRule(
        "Hospitality",
        "Hotel, restaurant or travel business",
        (
            KeywordGroup(
                ("hotel", "restaurant", "reservations", "rooms", "menu", "dining"), 4
            ),
            KeywordGroup(("stay", "guests", "resort", "travel"), 2),
        ),
    ),
    BusinessModelRule(
        "Technology Product",
        "Hardware or software technology product",
        (
            KeywordGroup(("technology", "device", "hardware", "software"), 3),
            KeywordGroup(("specs", "features", "launch", "innovation"), 2),
        ),
    ),
]

BUSINESS_MODEL_TYPES: list[str] = [rule.business_type for rule in BUSINESS_MODEL_RULES]


@dataclass
class CategoryRule:
    """Keyword rule mapping text to a label (first match wins)."""

    label: str
    keywords: tuple[str, ...]
    _compiled: list[re.Pattern[str]] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self) -> None:
        self._compiled = [compile_keyword(kw) for kw in self.keywords]

    def matches(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self._compiled)


DEFAULT_VALUE_CATEGORY = "overview"

VALUE_CATEGORY_RULES: list[CategoryRule] = [
    CategoryRule(
        "cost_savings",
        (
            "save",
            "saving",
            "reduce cost",
            "cut cost",
            "lower cost",
            "free",
            "affordable",
            "cheaper",
            "roi",
        ),
    ),
    CategoryRule(
        "speed",
        ("fast", "faster", "instant", "instantly", "lightning", "quick", "quickly", "rapid", "real-time"),
    ),
    CategoryRule(
        "security",
        ("secure", "security", "protect", "protection", "encrypted", "encryption", "privacy", "compliant"),
    ),
    CategoryRule(
        "ease_of_use",
        ("easy", "simple", "intuitive", "effortless", "user-friendly", "no-code", "seamless"),
    ),
    CategoryRule(
        "quality",
        ("premium", "best", "trusted", "quality", "award-winning", "top-rated", "reliable"),
    ),
    CategoryRule("growth", ("grow", "growth", "scale", "increase", "boost", "revenue")),
]

# (label, keywords) in display order
JOB_TITLE_RULES: list[CategoryRule] = [
    CategoryRule("CEO", ("ceo", "chief executive")),
    CategoryRule("CTO", ("cto", "chief technology officer")),
    CategoryRule("CFO", ("cfo", "chief financial officer")),
    CategoryRule("CMO", ("cmo", "chief marketing officer")),
    CategoryRule("Founder", ("founder", "co-founder")),
    CategoryRule("Business Owner", ("business owner", "owner")),
    CategoryRule("Entrepreneur", ("entrepreneur",)),
    CategoryRule("Executive", ("executive",)),
    CategoryRule("Director", ("director",)),
    CategoryRule("Manager", ("manager",)),
    CategoryRule("Developer", ("developer", "engineer")),
    CategoryRule("Marketer", ("marketer", "marketing team")),
    CategoryRule("Designer", ("designer",)),
]

PAIN_POINT_MARKERS: list[re.Pattern[str]] = [
    compile_keyword(marker)
    for marker in (
        "tired of",
        "struggling with",
        "struggle with",
        "frustrated by",
        "frustrated with",
        "challenge of",
        "problem with",
        "fed up with",
        "sick of",
        "wasting",
    )
]

GOAL_MARKERS: list[re.Pattern[str]] = [
    compile_keyword(marker)
    for marker in ("grow", "increase", "improve", "achieve", "boost", "maximize", "reach")
]

BEHAVIOR_RULES: list[CategoryRule] = [
    CategoryRule("Tech-savvy", ("tech-savvy", "tech savvy")),
    CategoryRule("Mobile users", ("mobile", "on the go", "smartphone")),
    CategoryRule("Early adopters", ("early adopter", "be the first")),
    CategoryRule("Online shoppers", ("online shopping", "shop online", "order online")),
    CategoryRule("Social media users", ("social media", "instagram", "tiktok")),
    CategoryRule("Remote workers", ("remote work", "remote teams", "work from home")),
    CategoryRule("Small business owners", ("small business",)),
    CategoryRule("Frequent travelers", ("frequent travel", "travelers", "business travel")),
    CategoryRule("Budget-conscious", ("budget-conscious", "budget friendly", "on a budget")),
    CategoryRule("Eco-conscious", ("eco-friendly", "sustainable", "sustainability")),
]

INTEREST_RULES: list[CategoryRule] = [
    CategoryRule("Technology", ("technology", "software", "digital", "ai", "cloud")),
    CategoryRule("Business", ("business", "entrepreneur", "startup", "productivity")),
    CategoryRule("Marketing", ("marketing", "advertising", "seo", "social media")),
    CategoryRule("Health & Fitness", ("fitness", "health", "wellness", "nutrition")),
    CategoryRule("Fashion", ("fashion", "style", "clothing", "apparel")),
    CategoryRule("Travel", ("travel", "vacation", "hotel", "adventure")),
    CategoryRule("Finance", ("finance", "investing", "money", "budget")),
    CategoryRule("Home & Garden", ("home decor", "furniture", "garden", "interior")),
    CategoryRule("Education", ("learning", "education", "course")),
    CategoryRule("Food & Dining", ("food", "recipe", "restaurant", "cooking")),
]

GENDER_RULES: list[CategoryRule] = [
    CategoryRule("female", ("women", "womens", "ladies", "moms", "mothers")),
    CategoryRule("male", ("men", "mens", "gentlemen", "dads", "fathers")),
]


@dataclass
class ThemeRule:
    """Theme cluster; keywords are single tokens longer than four characters."""

    theme: str
    keywords: frozenset[str]


# Only tokens longer than this count toward themes
MIN_THEME_TOKEN_LENGTH = 4

CONTENT_THEME_RULES: list[ThemeRule] = [
    ThemeRule(
        "Innovation",
        frozenset(
            {"innovative", "innovation", "cutting-edge", "advanced", "modern", "revolutionary", "breakthrough"}
        ),
    ),
    ThemeRule(
        "Trust & Security",
        frozenset({"secure", "security", "trusted", "trust", "reliable", "protection", "privacy", "safety"}),
    ),
    ThemeRule(
        "Ease of Use",
        frozenset({"simple", "intuitive", "user-friendly", "effortless", "seamless", "straightforward", "easily"}),
    ),
    ThemeRule(
        "Performance",
        frozenset({"efficient", "efficiency", "performance", "powerful", "optimized", "faster", "speed", "quickly", "rapid"}),
    ),
    ThemeRule(
        "Support",
        frozenset({"support", "assistance", "helpdesk", "dedicated", "onboarding"}),
    ),
    ThemeRule(
        "Value",
        frozenset({"affordable", "savings", "value", "pricing", "cost-effective", "discount"}),
    ),
    ThemeRule(
        "Quality",
        frozenset({"quality", "premium", "excellence", "superior", "crafted", "award-winning"}),
    ),
    ThemeRule(
        "Growth",
        frozenset({"growth", "scale", "scaling", "increase", "revenue", "expand", "success"}),
    ),
    ThemeRule(
        "Collaboration",
        frozenset({"collaboration", "collaborate", "teamwork", "together", "teams", "shared"}),
    ),
    ThemeRule(
        "Customization",
        frozenset({"custom", "customize", "customizable", "flexible", "personalized", "tailored"}),
    ),
]

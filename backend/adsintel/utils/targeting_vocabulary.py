"""Rule-based targeting vocabularies used when AI reasoning is unavailable.

Each business model maps to a vocabulary family. A family lists Meta
interests and behaviors, Google keyword clusters, audiences, placements
and negative keywords. Items start from a base confidence and gain
CUE_BONUS for each cue phrase found in the site text (at most
MAX_CUE_BONUS), capped at MAX_FALLBACK_CONFIDENCE.

Every family carries at least three interests, three behaviors, one
keyword cluster and one audience, so fallback output is never empty.
"""

from dataclasses import dataclass, field

from adsintel.schemas.targeting import DemographicsTarget, LocationTarget
from adsintel.utils.classification_rules import compile_keyword

CUE_BONUS = 0.05
MAX_CUE_BONUS = 0.15
MAX_FALLBACK_CONFIDENCE = 0.95

KEYWORD_FOCUS_BASE_CONFIDENCE = 0.75


def cue_hits(cues: tuple[str, ...], text: str) -> list[str]:
    """Return the cues that appear in text as whole words."""
    return [cue for cue in cues if compile_keyword(cue).search(text)]


def scored_confidence(base: float, cues: tuple[str, ...], text: str) -> float:
    bonus = min(CUE_BONUS * len(cue_hits(cues, text)), MAX_CUE_BONUS)
    return round(min(base + bonus, MAX_FALLBACK_CONFIDENCE), 2)


@dataclass(frozen=True)
class InterestRule:
    category: str
    interests: tuple[str, ...]
    base_confidence: float
    cues: tuple[str, ...]
    reasoning: str


@dataclass(frozen=True)
class BehaviorRule:
    behavior: str
    base_confidence: float
    cues: tuple[str, ...]
    reasoning: str


@dataclass(frozen=True)
class KeywordClusterRule:
    intent: str
    keywords: tuple[str, ...]
    search_volume: int
    competition_level: str
    base_confidence: float
    cues: tuple[str, ...]
    reasoning: str
    match_type: str = "phrase"


@dataclass(frozen=True)
class AudienceRule:
    type: str
    name: str
    description: str


@dataclass(frozen=True)
class PlacementRule:
    type: str
    examples: tuple[str, ...]
    reasoning: str


@dataclass(frozen=True)
class TargetingVocabulary:
    family: str
    interests: tuple[InterestRule, ...]
    behaviors: tuple[BehaviorRule, ...]
    keyword_clusters: tuple[KeywordClusterRule, ...]
    audiences: tuple[AudienceRule, ...]
    placements: tuple[PlacementRule, ...] = ()
    negative_keywords: tuple[str, ...] = field(default=())


# ---------------------------------------------------------------------------
# Vocabulary families
# ---------------------------------------------------------------------------

SAAS = TargetingVocabulary(
    family="saas",
    interests=(
        InterestRule(
            "Technology",
            ("Software", "Cloud computing", "SaaS"),
            0.8,
            ("software", "platform", "cloud", "saas", "app"),
            "Software buyers follow technology and cloud computing topics.",
        ),
        InterestRule(
            "Business and industry",
            ("Small business", "Business management", "Entrepreneurship"),
            0.75,
            ("business", "teams", "company", "startup"),
            "The product is sold to people who run or manage businesses.",
        ),
        InterestRule(
            "Productivity",
            ("Project management", "Remote work", "Productivity software"),
            0.68,
            ("productivity", "workflow", "automation", "collaboration"),
            "Workflow and automation messaging appeals to productivity seekers.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Small business owners",
            0.78,
            ("small business", "founder", "owner"),
            "Owners are usually the ones who sign up for business tools.",
        ),
        BehaviorRule(
            "Technology early adopters",
            0.72,
            ("new", "ai", "innovation", "beta"),
            "Early adopters try new software before the mainstream.",
        ),
        BehaviorRule(
            "Business page admins",
            0.65,
            ("team", "manage", "admin"),
            "Page admins are active decision makers inside companies.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Solution search",
            ("business software", "online platform for teams", "saas tool"),
            2400,
            "high",
            0.8,
            ("software", "platform", "tool"),
            "Searchers describing the problem category are ready to evaluate tools.",
        ),
        KeywordClusterRule(
            "Pricing & trial",
            ("software free trial", "software pricing", "saas pricing plans"),
            880,
            "medium",
            0.78,
            ("pricing", "free trial", "demo", "plans"),
            "Pricing and trial searches come from buyers close to signing up.",
            match_type="exact",
        ),
        KeywordClusterRule(
            "Comparison",
            ("best business software", "software alternatives", "top saas tools"),
            1300,
            "high",
            0.72,
            ("compare", "alternative", "vs"),
            "Comparison searches capture buyers shortlisting vendors.",
        ),
    ),
    audiences=(
        AudienceRule("in_market", "Business Software", "People actively researching business software"),
        AudienceRule("affinity", "Technophiles", "People with a sustained interest in technology"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("producthunt.com", "g2.com", "techcrunch.com"),
            "Software buyers research on review and launch sites.",
        ),
        PlacementRule(
            "youtube",
            ("Software tutorials", "SaaS reviews"),
            "Tutorial viewers are evaluating how tools work.",
        ),
    ),
    negative_keywords=("free download", "crack", "jobs", "internship", "torrent"),
)

ECOMMERCE = TargetingVocabulary(
    family="ecommerce",
    interests=(
        InterestRule(
            "Shopping",
            ("Online shopping", "Shopping and fashion", "Consumer goods"),
            0.8,
            ("shop", "cart", "buy", "products", "shipping"),
            "The site sells products online to people who shop online.",
        ),
        InterestRule(
            "Deals",
            ("Coupons", "Discount stores", "Sales promotions"),
            0.72,
            ("sale", "discount", "deal", "offer", "coupon"),
            "Promotional copy attracts deal-driven shoppers.",
        ),
        InterestRule(
            "Lifestyle",
            ("Lifestyle", "Home and garden", "Fashion accessories"),
            0.65,
            ("style", "home", "fashion", "gift"),
            "Lifestyle interests widen reach around the product catalog.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Engaged shoppers",
            0.8,
            ("buy now", "add to cart", "shop"),
            "Engaged shoppers have clicked Shop Now buttons recently.",
        ),
        BehaviorRule(
            "Frequent online purchasers",
            0.74,
            ("checkout", "free shipping", "order"),
            "Frequent purchasers convert on smooth checkout flows.",
        ),
        BehaviorRule(
            "Premium purchasers",
            0.62,
            ("premium", "luxury", "exclusive"),
            "Premium purchasers respond to higher-priced assortments.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Transactional",
            ("buy online", "shop online", "order online"),
            5400,
            "high",
            0.82,
            ("buy", "shop", "order", "cart"),
            "Buy and order searches carry the strongest purchase intent.",
        ),
        KeywordClusterRule(
            "Deals",
            ("discount code", "free shipping deals", "online sale"),
            3600,
            "medium",
            0.72,
            ("sale", "discount", "free shipping", "coupon"),
            "Deal searches convert when the offer is on the landing page.",
        ),
        KeywordClusterRule(
            "Product research",
            ("best products reviews", "product comparison", "top rated products"),
            2900,
            "medium",
            0.66,
            ("review", "rated", "compare", "best"),
            "Review searches reach shoppers still deciding what to buy.",
        ),
    ),
    audiences=(
        AudienceRule("in_market", "Online Shoppers", "People actively shopping for similar products"),
        AudienceRule("remarketing", "Cart abandoners", "Visitors who added to cart but did not purchase"),
    ),
    placements=(
        PlacementRule(
            "shopping",
            ("Google Shopping", "Product listing ads"),
            "Product listings put price and image in front of buyers.",
        ),
        PlacementRule(
            "youtube",
            ("Product unboxing", "Haul videos"),
            "Unboxing viewers are close to a purchase decision.",
        ),
    ),
    negative_keywords=("free", "diy", "wholesale", "jobs", "repair manual"),
)

LOCAL_SERVICES = TargetingVocabulary(
    family="local_services",
    interests=(
        InterestRule(
            "Home and local services",
            ("Home improvement", "Local businesses", "Home services"),
            0.78,
            ("local", "home", "near you", "service area"),
            "Local service buyers follow home and neighborhood topics.",
        ),
        InterestRule(
            "Business and industry",
            ("Small business", "Professional services", "Customer service"),
            0.7,
            ("business", "professional", "licensed", "insured"),
            "Professional credentials appeal to people comparing providers.",
        ),
        InterestRule(
            "Family and relationships",
            ("Family", "Homeowners", "Parenting"),
            0.62,
            ("family", "homeowner", "kids", "residential"),
            "Households are the usual buyers of residential services.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Local business engagers",
            0.78,
            ("local", "near you", "community"),
            "People who engage with local businesses book nearby providers.",
        ),
        BehaviorRule(
            "Small business owners",
            0.68,
            ("business", "owner", "commercial"),
            "Commercial clients are a second source of bookings.",
        ),
        BehaviorRule(
            "Likely to move",
            0.64,
            ("moving", "relocation", "new home"),
            "People moving home need a new set of local providers.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Local intent",
            ("services near me", "local service provider", "book appointment online"),
            3200,
            "high",
            0.82,
            ("near you", "local", "book", "appointment"),
            "Near-me searches come from people ready to book.",
        ),
        KeywordClusterRule(
            "Service research",
            ("service cost", "service quotes", "free estimate"),
            1900,
            "medium",
            0.72,
            ("quote", "estimate", "pricing", "cost"),
            "Quote searches come from buyers comparing providers.",
        ),
        KeywordClusterRule(
            "Urgent service",
            ("same day service", "24 hour service", "emergency service"),
            1100,
            "high",
            0.66,
            ("emergency", "same day", "24 hour"),
            "Urgent searches convert fast but cost more per click.",
        ),
    ),
    audiences=(
        AudienceRule("in_market", "Local Services", "People looking for services in their area"),
        AudienceRule("custom_intent", "Provider searchers", "People searching for local providers"),
    ),
    placements=(
        PlacementRule(
            "local",
            ("Google Maps", "Local search ads"),
            "Map placements catch people choosing a nearby provider.",
        ),
        PlacementRule(
            "website",
            ("yelp.com", "nextdoor.com"),
            "Review sites are where local buyers shortlist providers.",
        ),
    ),
    negative_keywords=("diy", "jobs", "salary", "training course", "free"),
)

AGENCY = TargetingVocabulary(
    family="agency",
    interests=(
        InterestRule(
            "Marketing",
            ("Digital marketing", "Advertising", "Social media marketing"),
            0.8,
            ("marketing", "campaign", "advertising", "social media"),
            "Agency clients are people responsible for marketing results.",
        ),
        InterestRule(
            "Business and industry",
            ("Entrepreneurship", "Small business", "Business management"),
            0.74,
            ("business", "growth", "brand", "clients"),
            "Business owners hire agencies to grow their brand.",
        ),
        InterestRule(
            "Design",
            ("Graphic design", "Web design", "Branding"),
            0.66,
            ("design", "creative", "branding", "website"),
            "Creative services appeal to people planning a rebrand.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Business page admins",
            0.78,
            ("brand", "business", "page"),
            "Page admins run marketing for their business.",
        ),
        BehaviorRule(
            "Small business owners",
            0.72,
            ("small business", "startup", "founder"),
            "Owners outsource marketing they cannot staff in-house.",
        ),
        BehaviorRule(
            "Marketing decision makers",
            0.64,
            ("cmo", "marketing director", "marketer"),
            "Marketing leads approve agency budgets.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Hire agency",
            ("digital marketing agency", "marketing agency near me", "hire marketing agency"),
            2900,
            "high",
            0.8,
            ("agency", "hire", "clients"),
            "Searches for an agency come from buyers ready to talk.",
        ),
        KeywordClusterRule(
            "Services",
            ("seo services", "ppc management", "social media management"),
            4400,
            "high",
            0.72,
            ("seo", "ppc", "social media", "paid"),
            "Service searches describe the work a buyer wants done.",
        ),
        KeywordClusterRule(
            "Proof research",
            ("marketing case studies", "agency portfolio", "marketing agency reviews"),
            720,
            "medium",
            0.64,
            ("case study", "portfolio", "results"),
            "Portfolio searches reach buyers validating a shortlist.",
        ),
    ),
    audiences=(
        AudienceRule(
            "in_market",
            "Advertising & Marketing Services",
            "People researching marketing services",
        ),
        AudienceRule("affinity", "Business Professionals", "People who follow business news and tools"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("searchenginejournal.com", "adweek.com", "hubspot.com"),
            "Marketing publications are read by agency buyers.",
        ),
        PlacementRule(
            "youtube",
            ("Marketing tips", "Growth strategy"),
            "Marketing how-to viewers are often evaluating outside help.",
        ),
    ),
    negative_keywords=("jobs", "internship", "course", "free template", "salary"),
)

EDUCATION = TargetingVocabulary(
    family="education",
    interests=(
        InterestRule(
            "Education",
            ("Online learning", "Education", "E-learning"),
            0.8,
            ("course", "learn", "training", "lesson"),
            "Course buyers follow online learning topics.",
        ),
        InterestRule(
            "Career",
            ("Professional development", "Career development", "Skill development"),
            0.74,
            ("career", "skills", "certification", "certificate"),
            "Career-driven learners pay for credentials.",
        ),
        InterestRule(
            "Educational technology",
            ("Technology", "Online courses", "Educational technology"),
            0.64,
            ("online", "platform", "video"),
            "Online delivery appeals to people comfortable learning on screen.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Online learners",
            0.76,
            ("online", "course", "enroll"),
            "People who have taken online courses tend to enroll again.",
        ),
        BehaviorRule(
            "Job seekers",
            0.68,
            ("career", "job", "hiring"),
            "Job seekers invest in skills that improve their prospects.",
        ),
        BehaviorRule(
            "Recent graduates",
            0.66,
            ("student", "graduate", "college"),
            "Graduates look for skills their degree did not cover.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Course search",
            ("online courses", "certification programs", "training courses online"),
            6600,
            "high",
            0.82,
            ("course", "certification", "training", "program"),
            "Course searches come from learners choosing where to enroll.",
        ),
        KeywordClusterRule(
            "Skill outcomes",
            ("learn new skills", "career change courses", "upskill online"),
            1800,
            "medium",
            0.72,
            ("skills", "career", "learn"),
            "Outcome searches reach learners who know what they want.",
        ),
        KeywordClusterRule(
            "Enrollment",
            ("enroll online course", "course pricing", "course free trial"),
            720,
            "medium",
            0.66,
            ("enroll", "pricing", "free trial", "sign up"),
            "Pricing and enrollment searches sit at the end of the decision.",
        ),
    ),
    audiences=(
        AudienceRule("in_market", "Education", "People researching courses and training"),
        AudienceRule("affinity", "Lifelong Learners", "People who regularly consume learning content"),
    ),
    placements=(
        PlacementRule(
            "youtube",
            ("Study tips", "Career advice"),
            "Study content viewers are actively learning.",
        ),
        PlacementRule(
            "website",
            ("quora.com", "reddit.com"),
            "Learners ask course questions in community forums.",
        ),
    ),
    negative_keywords=("free pdf", "answers", "cheat", "jobs", "torrent"),
)

MEDIA = TargetingVocabulary(
    family="media",
    interests=(
        InterestRule(
            "Entertainment",
            ("Entertainment", "Online news", "Podcasts"),
            0.76,
            ("news", "podcast", "stories", "articles"),
            "Publishers reach people who consume news and podcasts.",
        ),
        InterestRule(
            "Reading",
            ("Blogs", "Magazines", "Books"),
            0.7,
            ("blog", "magazine", "newsletter", "read"),
            "Readers of similar publications are the natural audience.",
        ),
        InterestRule(
            "Video",
            ("Streaming services", "Online video", "YouTube"),
            0.62,
            ("video", "watch", "stream", "episode"),
            "Video audiences widen reach for multi-format publishers.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Newsletter subscribers",
            0.72,
            ("subscribe", "newsletter", "email"),
            "Subscribers return to publishers they trust.",
        ),
        BehaviorRule(
            "Mobile device users",
            0.66,
            ("mobile", "app", "listen"),
            "Most content is consumed on phones.",
        ),
        BehaviorRule(
            "Digital activities",
            0.62,
            ("online", "digital", "share"),
            "Heavy digital users share and engage with content.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Topic research",
            ("latest news", "industry insights", "expert articles"),
            4800,
            "medium",
            0.72,
            ("news", "articles", "insights"),
            "Topic searches bring readers to the content itself.",
        ),
        KeywordClusterRule(
            "Subscription",
            ("newsletter subscription", "podcast subscribe", "premium content"),
            880,
            "low",
            0.68,
            ("subscribe", "premium", "membership"),
            "Subscription searches come from readers ready to commit.",
        ),
        KeywordClusterRule(
            "Format",
            ("online magazine", "industry blog", "podcast episodes"),
            1600,
            "low",
            0.64,
            ("magazine", "blog", "podcast"),
            "Format searches find people looking for a new source.",
        ),
    ),
    audiences=(
        AudienceRule("affinity", "News & Media Enthusiasts", "People who read news and publications daily"),
        AudienceRule("remarketing", "Returning readers", "People who read at least one article"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("flipboard.com", "medium.com"),
            "Content aggregators reach readers in discovery mode.",
        ),
        PlacementRule(
            "youtube",
            ("Commentary", "Explainers"),
            "Explainer viewers overlap heavily with long-form readers.",
        ),
    ),
    negative_keywords=("jobs", "login", "download free", "torrent"),
)

FINANCE = TargetingVocabulary(
    family="finance",
    interests=(
        InterestRule(
            "Personal finance",
            ("Personal finance", "Financial planning", "Budgeting"),
            0.8,
            ("finance", "money", "budget", "savings"),
            "Financial products are bought by people managing their money.",
        ),
        InterestRule(
            "Investing",
            ("Investing", "Stock market", "Retirement planning"),
            0.74,
            ("invest", "retirement", "wealth", "portfolio"),
            "Investors look for advice and better returns.",
        ),
        InterestRule(
            "Banking",
            ("Banking", "Credit cards", "Loans"),
            0.68,
            ("bank", "credit", "loan", "mortgage"),
            "Banking interests reach people comparing accounts and rates.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Engaged with financial services",
            0.76,
            ("financial", "advisor", "planning"),
            "People already using financial services compare providers.",
        ),
        BehaviorRule(
            "Small business owners",
            0.66,
            ("business", "tax", "accounting"),
            "Owners need banking, tax and accounting services.",
        ),
        BehaviorRule(
            "Premium purchasers",
            0.62,
            ("premium", "wealth", "private"),
            "Affluent buyers are the target for wealth products.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Advisor search",
            ("financial advisor near me", "financial planning services", "wealth management"),
            2400,
            "high",
            0.8,
            ("advisor", "planning", "wealth"),
            "Advisor searches come from people ready for a consultation.",
        ),
        KeywordClusterRule(
            "Product research",
            ("best savings account", "compare loan rates", "investment options"),
            5400,
            "high",
            0.72,
            ("rates", "loan", "savings", "compare"),
            "Rate comparisons reach buyers choosing a product.",
        ),
        KeywordClusterRule(
            "Calculators",
            ("retirement calculator", "mortgage calculator", "loan calculator"),
            9900,
            "medium",
            0.62,
            ("calculator", "retirement", "mortgage"),
            "Calculator users are early in planning and cheap to reach.",
        ),
    ),
    audiences=(
        AudienceRule("in_market", "Financial Services", "People researching financial products"),
        AudienceRule("affinity", "Avid Investors", "People who follow markets and investing"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("investopedia.com", "nerdwallet.com", "bankrate.com"),
            "Finance publications are read by people comparing products.",
        ),
        PlacementRule(
            "youtube",
            ("Personal finance", "Investing basics"),
            "Finance explainer viewers are building a plan.",
        ),
    ),
    negative_keywords=("jobs", "free money", "scam", "salary", "course"),
)

HEALTHCARE = TargetingVocabulary(
    family="healthcare",
    interests=(
        InterestRule(
            "Health and wellness",
            ("Health and wellness", "Healthcare", "Preventive care"),
            0.8,
            ("health", "care", "wellness", "medical"),
            "Patients follow health and wellness topics.",
        ),
        InterestRule(
            "Fitness",
            ("Fitness and wellness", "Nutrition", "Physical fitness"),
            0.7,
            ("fitness", "nutrition", "exercise", "diet"),
            "Fitness interests reach health-conscious adults.",
        ),
        InterestRule(
            "Family health",
            ("Parenting", "Family", "Mental health"),
            0.64,
            ("family", "children", "mental health", "kids"),
            "Parents book care for the whole household.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Engaged with health content",
            0.74,
            ("patient", "health", "treatment"),
            "People researching treatment are likely to book.",
        ),
        BehaviorRule(
            "Parents",
            0.64,
            ("kids", "children", "family"),
            "Parents make most family healthcare decisions.",
        ),
        BehaviorRule(
            "Mobile device users",
            0.62,
            ("app", "online booking", "telehealth"),
            "Mobile users book appointments and telehealth on their phones.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Provider search",
            ("doctor near me", "clinic near me", "book doctor appointment"),
            8100,
            "high",
            0.82,
            ("appointment", "clinic", "doctor", "patient"),
            "Provider searches come from patients ready to book.",
        ),
        KeywordClusterRule(
            "Treatment research",
            ("treatment options", "symptoms and treatment", "specialist consultation"),
            3600,
            "medium",
            0.7,
            ("treatment", "symptom", "specialist"),
            "Treatment research precedes choosing a provider.",
        ),
        KeywordClusterRule(
            "Coverage",
            ("accepts insurance", "medicare providers", "affordable healthcare"),
            1300,
            "medium",
            0.66,
            ("insurance", "medicare", "affordable"),
            "Coverage searches filter for providers a patient can use.",
        ),
    ),
    audiences=(
        AudienceRule("in_market", "Health Services", "People looking for medical providers"),
        AudienceRule("affinity", "Health & Fitness Buffs", "People focused on health and fitness"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("webmd.com", "healthline.com"),
            "Health reference sites reach patients researching symptoms.",
        ),
        PlacementRule(
            "local",
            ("Google Maps",),
            "Patients pick providers close to home.",
        ),
    ),
    negative_keywords=("jobs", "nursing school", "salary", "free samples", "diy"),
)

HOSPITALITY = TargetingVocabulary(
    family="hospitality",
    interests=(
        InterestRule(
            "Travel",
            ("Travel", "Vacations", "Hotels"),
            0.8,
            ("travel", "stay", "hotel", "vacation"),
            "Guests are people planning trips and stays.",
        ),
        InterestRule(
            "Food and dining",
            ("Restaurants", "Food and drink", "Fine dining"),
            0.72,
            ("dining", "restaurant", "menu", "food"),
            "Dining interests reach people choosing where to eat.",
        ),
        InterestRule(
            "Events",
            ("Weddings", "Events", "Nightlife"),
            0.64,
            ("event", "wedding", "venue", "party"),
            "Event planners book venues and group stays.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Frequent travelers",
            0.8,
            ("travel", "booking", "trip"),
            "Frequent travelers book stays several times a year.",
        ),
        BehaviorRule(
            "Business travelers",
            0.68,
            ("business travel", "conference", "corporate"),
            "Business travelers book midweek and on short notice.",
        ),
        BehaviorRule(
            "Frequent international travelers",
            0.62,
            ("international", "abroad", "destination"),
            "International travelers plan further ahead and spend more.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Booking",
            ("book hotel", "hotel deals", "reserve table"),
            12100,
            "high",
            0.82,
            ("book", "reservation", "reserve", "room"),
            "Booking searches come from guests ready to reserve.",
        ),
        KeywordClusterRule(
            "Destination",
            ("things to do", "weekend getaway", "best places to stay"),
            6600,
            "medium",
            0.7,
            ("destination", "getaway", "explore"),
            "Destination searches reach travelers still planning.",
        ),
        KeywordClusterRule(
            "Events",
            ("event venue", "wedding venue", "private dining"),
            1900,
            "medium",
            0.64,
            ("venue", "event", "wedding"),
            "Venue searches bring high-value group bookings.",
        ),
    ),
    audiences=(
        AudienceRule(
            "in_market",
            "Hotels & Accommodations",
            "People planning trips and looking for accommodation",
        ),
        AudienceRule("affinity", "Travel Buffs", "People who travel often and follow travel content"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("tripadvisor.com", "booking.com"),
            "Travel review sites are where guests compare options.",
        ),
        PlacementRule(
            "youtube",
            ("Travel vlogs",),
            "Travel vlog viewers are picking their next destination.",
        ),
    ),
    negative_keywords=("jobs", "careers", "salary", "free"),
)

NONPROFIT = TargetingVocabulary(
    family="nonprofit",
    interests=(
        InterestRule(
            "Charity and causes",
            ("Charity and causes", "Volunteering", "Philanthropy"),
            0.8,
            ("donate", "charity", "mission", "volunteer"),
            "Donors follow charities and causes they care about.",
        ),
        InterestRule(
            "Community",
            ("Community issues", "Social change", "Activism"),
            0.7,
            ("community", "impact", "change", "support"),
            "Community-minded people support local impact.",
        ),
        InterestRule(
            "Environment",
            ("Environmentalism", "Sustainability", "Nature"),
            0.6,
            ("environment", "sustainable", "climate", "nature"),
            "Sustainability interests overlap with cause-driven giving.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Charitable donations",
            0.78,
            ("donate", "donation", "give"),
            "Past donors are the most likely to give again.",
        ),
        BehaviorRule(
            "Community engagement",
            0.68,
            ("volunteer", "community", "event"),
            "Volunteers become donors and advocates.",
        ),
        BehaviorRule(
            "Engaged with causes",
            0.62,
            ("cause", "advocacy", "campaign"),
            "Advocates amplify campaigns through sharing.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Donation",
            ("donate online", "charity donation", "nonprofit donation"),
            2900,
            "medium",
            0.8,
            ("donate", "donation", "give"),
            "Donation searches come from people ready to give.",
        ),
        KeywordClusterRule(
            "Volunteer",
            ("volunteer opportunities", "volunteer near me", "community service"),
            4400,
            "low",
            0.7,
            ("volunteer", "community"),
            "Volunteer searches find people willing to contribute time.",
        ),
        KeywordClusterRule(
            "Cause awareness",
            ("how to help", "support the cause", "charity organizations"),
            1600,
            "low",
            0.62,
            ("help", "support", "cause"),
            "Awareness searches introduce the mission to new supporters.",
        ),
    ),
    audiences=(
        AudienceRule("affinity", "Charitable Givers", "People who regularly support causes"),
        AudienceRule("remarketing", "Past donors", "People who donated before"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("charitynavigator.org", "guidestar.org"),
            "Charity evaluators are visited by donors checking organizations.",
        ),
        PlacementRule(
            "youtube",
            ("Impact stories",),
            "Impact stories move viewers to give.",
        ),
    ),
    negative_keywords=("jobs", "salary", "grant writing jobs", "free stuff"),
)

GENERIC = TargetingVocabulary(
    family="generic",
    interests=(
        InterestRule(
            "Business and industry",
            ("Business and industry", "Small business", "Business management"),
            0.72,
            ("business", "company", "industry", "solutions"),
            "Business interests are a safe starting point for most offers.",
        ),
        InterestRule(
            "Technology",
            ("Technology", "Innovation"),
            0.65,
            ("technology", "innovation", "digital"),
            "Technology interests reach people open to new products.",
        ),
        InterestRule(
            "Shopping",
            ("Online shopping", "Consumer goods"),
            0.6,
            ("shop", "products", "buy"),
            "Shopping interests widen reach to active buyers.",
        ),
    ),
    behaviors=(
        BehaviorRule(
            "Small business owners",
            0.7,
            ("business", "owner", "company"),
            "Owners make purchasing decisions for their business.",
        ),
        BehaviorRule(
            "Digital activities",
            0.65,
            ("online", "digital", "website"),
            "Digitally active users respond to online offers.",
        ),
        BehaviorRule(
            "Engaged shoppers",
            0.6,
            ("buy", "shop", "order"),
            "Engaged shoppers click through to purchase.",
        ),
    ),
    keyword_clusters=(
        KeywordClusterRule(
            "Products and services",
            ("products and services", "company solutions", "industry suppliers"),
            1000,
            "medium",
            0.7,
            ("services", "solutions", "products"),
            "Category searches describe what the business offers.",
        ),
        KeywordClusterRule(
            "Contact",
            ("request a quote", "contact sales", "get pricing"),
            480,
            "low",
            0.68,
            ("quote", "contact", "pricing"),
            "Quote requests come from buyers ready to talk.",
            match_type="exact",
        ),
        KeywordClusterRule(
            "Research",
            ("best providers", "compare providers", "provider reviews"),
            880,
            "medium",
            0.62,
            ("best", "compare", "review"),
            "Comparison searches reach buyers still deciding.",
        ),
    ),
    audiences=(
        AudienceRule("in_market", "Business Services", "People researching business services"),
        AudienceRule("affinity", "Business Professionals", "People who follow business news and tools"),
    ),
    placements=(
        PlacementRule(
            "website",
            ("linkedin.com", "industry publications"),
            "Professional sites reach decision makers at work.",
        ),
    ),
    negative_keywords=("jobs", "free", "salary"),
)

VOCABULARIES: dict[str, TargetingVocabulary] = {
    vocabulary.family: vocabulary
    for vocabulary in (
        SAAS,
        ECOMMERCE,
        LOCAL_SERVICES,
        AGENCY,
        EDUCATION,
        MEDIA,
        FINANCE,
        HEALTHCARE,
        HOSPITALITY,
        NONPROFIT,
        GENERIC,
    )
}

FAMILY_BY_BUSINESS_MODEL: dict[str, str] = {
    "B2B SaaS": "saas",
    "B2C SaaS": "saas",
    "Technology Product": "saas",
    "Freemium Model": "saas",
    "E-commerce": "ecommerce",
    "Retail": "ecommerce",
    "Marketplace": "ecommerce",
    "Subscription Service": "ecommerce",
    "Service Business": "local_services",
    "Professional Services": "local_services",
    "Consulting": "local_services",
    "Real Estate": "local_services",
    "Agency": "agency",
    "Education/Training": "education",
    "Content/Media": "media",
    "Financial Services": "finance",
    "Healthcare": "healthcare",
    "Hospitality": "hospitality",
    "Non-profit": "nonprofit",
    "Manufacturing": "generic",
}


def vocabulary_for(business_model: str | None) -> TargetingVocabulary:
    """Vocabulary for a business model label; unknown labels get GENERIC."""
    family = FAMILY_BY_BUSINESS_MODEL.get(business_model or "", "generic")
    return VOCABULARIES[family]


# Added to every Google fallback
ALL_VISITORS_AUDIENCE = AudienceRule(
    "remarketing", "All website visitors", "People who visited the site in the last 30 days"
)

META_CUSTOM_AUDIENCES: tuple[AudienceRule, ...] = (
    AudienceRule(
        "website_visitors",
        "Website visitors (30 days)",
        "People who visited your website in the last 30 days",
    ),
    AudienceRule(
        "engagement",
        "Social engagers",
        "People who engaged with your Facebook Page or Instagram profile",
    ),
)

CUSTOMER_LIST_AUDIENCE = AudienceRule(
    "customer_list",
    "Customer list",
    "Upload your customer email list to create a custom audience",
)

CUSTOMER_LIST_BUSINESS_MODELS = frozenset(
    {"B2B SaaS", "B2C SaaS", "E-commerce", "Service Business"}
)

LOOKALIKE_TIERS: tuple[tuple[int, str], ...] = (
    (1, "Most similar to your website visitors, highest quality and smallest reach"),
    (3, "Balanced similarity and reach, the recommended starting point"),
    (5, "Broader reach with good similarity, for scaling campaigns"),
)

LOOKALIKE_SOURCE = "Website visitors"


# ---------------------------------------------------------------------------
# Demographics
# ---------------------------------------------------------------------------

DEFAULT_AGE_RANGE = (25, 54)
DEFAULT_LOCATIONS: tuple[str, ...] = ("United States", "Canada", "United Kingdom")
DEFAULT_LANGUAGES: tuple[str, ...] = ("en",)


@dataclass(frozen=True)
class AgeCueRule:
    label: str
    cues: tuple[str, ...]
    age_min: int
    age_max: int


# First match wins
AUDIENCE_AGE_RULES: tuple[AgeCueRule, ...] = (
    AgeCueRule("students", ("student", "college"), 18, 34),
    AgeCueRule("seniors", ("senior", "retirement", "medicare"), 55, 65),
    AgeCueRule("executives", ("executive", "enterprise"), 35, 65),
)

# Applied only to E-commerce when no audience cue matched; first match wins
ECOMMERCE_AGE_RULES: tuple[AgeCueRule, ...] = (
    AgeCueRule("luxury e-commerce", ("luxury",), 30, 65),
    AgeCueRule("fashion e-commerce", ("fashion",), 18, 44),
)


@dataclass(frozen=True)
class LocationCue:
    country: str
    cues: tuple[str, ...]


LOCATION_CUES: tuple[LocationCue, ...] = (
    LocationCue("United Kingdom", ("uk", "london")),
    LocationCue("Australia", ("australia", "sydney")),
    LocationCue("Canada", ("canada", "toronto")),
)


def _promote(locations: list[str], country: str) -> list[str]:
    rest = [name for name in locations if name.lower() != country.lower()]
    return [country, *rest]


def derive_demographics(
    text: str,
    business_model: str | None,
    target_location: str | None = None,
) -> tuple[DemographicsTarget, list[str]]:
    """Derive fallback demographics from site text.

    Returns the demographics and a list of human-readable factors naming
    the cues that changed the defaults. An empty factor list means the
    defaults were used unchanged.
    """
    age_min, age_max = DEFAULT_AGE_RANGE
    factors: list[str] = []

    age_rule = next(
        (rule for rule in AUDIENCE_AGE_RULES if cue_hits(rule.cues, text)), None
    )
    if age_rule is None and business_model == "E-commerce":
        age_rule = next(
            (rule for rule in ECOMMERCE_AGE_RULES if cue_hits(rule.cues, text)), None
        )
    if age_rule is not None:
        age_min, age_max = age_rule.age_min, age_rule.age_max
        factors.append(f"Age range {age_min}-{age_max} from {age_rule.label} cues")

    locations = list(DEFAULT_LOCATIONS)
    # Reversed so the first table entry ends up in front
    for cue in reversed(LOCATION_CUES):
        if cue_hits(cue.cues, text):
            locations = _promote(locations, cue.country)
            factors.append(f"{cue.country} promoted from regional cues")

    if target_location and target_location.strip():
        locations = _promote(locations, target_location.strip())
        factors.append(f"Target location {target_location.strip()} requested")

    demographics = DemographicsTarget(
        age_min=age_min,
        age_max=age_max,
        genders=["all"],
        locations=[LocationTarget(type="country", name=name) for name in locations],
        languages=list(DEFAULT_LANGUAGES),
    )
    return demographics, factors

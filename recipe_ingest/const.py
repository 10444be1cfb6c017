"""Constants for the recipe ingestion pipeline."""

# Configuration keys
CONF_API_KEY = "api_key"
CONF_MODEL = "model"
CONF_FETCH_TIMEOUT = "fetch_timeout"
CONF_AI_TIMEOUT = "ai_timeout"
CONF_MAX_TEXT_LENGTH = "max_text_length"
CONF_AI_FALLBACK = "ai_fallback"
CONF_PREPARATION_WORDS = "preparation_words"

# Environment variables mapped onto configuration keys
ENV_PREFIX = "RECIPE_INGEST_"
ENV_API_KEY = "GOOGLE_API_KEY"

# Default values
DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_TIMEOUT = 30
DEFAULT_AI_TIMEOUT = 60
DEFAULT_MAX_TEXT_LENGTH = 15000
DEFAULT_MAX_RESPONSE_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_OUTPUT_TOKENS = 2000

# Available models
AVAILABLE_MODELS = [
    "gemini-2.5-flash-lite",
    "gemini-2.5-flash",
    "gemini-2.5-pro",
]

# Option keys for a single extraction call
OPT_FORCE_AI = "force_ai"

DIFFICULTIES = ("Easy", "Medium", "Hard")
DEFAULT_DIFFICULTY = "Medium"

USER_FACING_ERROR = "Unable to extract recipe - add it manually"

# Client identity sent with every page fetch
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

ALLOWED_CONTENT_TYPES = ("text/html", "application/xhtml", "application/xml")

# Preparation vocabulary for parenthetical clauses
PREPARATION_WORDS = (
    "chopped",
    "diced",
    "minced",
    "sliced",
    "grated",
    "peeled",
    "crushed",
    "julienned",
    "cubed",
    "shredded",
    "torn",
    "crumbled",
    "pitted",
    "halved",
    "quartered",
    "finely",
    "roughly",
    "coarsely",
    "thinly",
    "to taste",
    "for garnish",
    "trimmed",
    "rinsed",
    "washed",
    "drained",
    "soaked",
    "thawed",
    "beaten",
    "melted",
    "softened",
    "room temperature",
    "chilled",
    "mashed",
    "cut up",
    "cut into pieces",
    "deseeded",
    "seeded",
    "zested",
    "juiced",
)

# Parenthetical content mentioning these is a note, not a preparation
NOTE_WORDS = ("note", "notes", "about", "approx", "approximately")

# Units recognised in quantities (longest spellings first)
UNIT_WORDS = (
    "tablespoons",
    "tablespoon",
    "teaspoons",
    "teaspoon",
    "kilograms",
    "kilogram",
    "milliliters",
    "milliliter",
    "millilitres",
    "millilitre",
    "liters",
    "liter",
    "litres",
    "litre",
    "grams",
    "gram",
    "ounces",
    "ounce",
    "pounds",
    "pound",
    "handfuls",
    "handful",
    "pinches",
    "pinch",
    "bunches",
    "bunch",
    "cloves",
    "clove",
    "cups",
    "cup",
    "tbsp",
    "tsp",
    "lbs",
    "lb",
    "kg",
    "ml",
    "oz",
    "g",
    "l",
)

# Units eligible for dual-unit notation ("300g / 10oz")
DUAL_UNITS = ("kg", "ml", "lbs", "lb", "oz", "g", "l")

# Common food terms used to recognise ingredient lists
FOOD_TERMS = (
    "salt",
    "pepper",
    "butter",
    "flour",
    "sugar",
    "oil",
    "garlic",
    "onion",
    "egg",
    "milk",
    "water",
    "cream",
    "cheese",
    "chicken",
    "beef",
    "pork",
    "rice",
    "tomato",
    "lemon",
    "lime",
    "vinegar",
    "honey",
    "yeast",
    "parsley",
    "basil",
    "cinnamon",
    "vanilla",
    "stock",
    "broth",
    "potato",
    "carrot",
    "beans",
)

# Hero image scoring keywords
IMAGE_DISQUALIFY_WORDS = ("tracking", "pixel", "icon", "logo", "avatar")
IMAGE_HERO_WORDS = ("hero", "featured", "main")
IMAGE_SUBJECT_WORDS = ("recipe", "dish", "food")
IMAGE_MIN_URL_LENGTH = 20
ARTICLE_TAGS = ("article", "main")
HEADER_TAGS = ("header",)

# Containers likely to hold the ingredient list
INGREDIENT_CONTAINER_SELECTORS = (
    '[class*="ingredient"]',
    '[id*="ingredient"]',
)

# Microdata ingredient items
INGREDIENT_ITEM_SELECTOR = '[itemprop="recipeIngredient"], [itemprop="ingredients"]'

# Lists inside these never hold recipe content
BOILERPLATE_TAGS = ("nav", "footer", "header", "aside")

# Containers likely to hold the recipe body, best first
CONTENT_SELECTORS = (
    "article",
    ".recipe",
    ".recipe-content",
    '[itemprop="recipeInstructions"]',
    ".post-content",
    ".entry-content",
    ".content",
    "main",
)

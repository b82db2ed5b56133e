import os

# Entity classes the index layer knows about
RECIPE: str = "recipe"
INGREDIENT: str = "ingredient"
ENTITY_CLASSES: tuple[str, ...] = (RECIPE, INGREDIENT)

# LRU capacity per entity class
CACHE_CAPACITY: int = 100

# Autocomplete / ranking defaults
MAX_SUGGESTIONS: int = 10
TOP_RATED: int = 10

# Store used by Engine.build() when none is given
DEFAULT_DSN: str = "memory://"

# Progress logging (set CATINDEX_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("CATINDEX_VERBOSE") == "1"

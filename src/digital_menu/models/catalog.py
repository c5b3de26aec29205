"""Fixed category catalog for the menu.

Each label nominally names one menu collection. The stored collection names
drifted from these labels over time, which is why category lookups go
through the category resolver rather than reading the label directly.
"""

CATEGORY_CATALOG: tuple[str, ...] = (
    "nibbles",
    "soups",
    "titbits",
    "salads",
    "mangalorean-style",
    "wok",
    "charcoal",
    "continental",
    "pasta",
    "artisan-pizzas",
    "mini-burger-sliders",
    "entree-(main-course)",
    "bao-&-dim-sum",
    "indian-mains---curries",
    "biryanis-&-rice",
    "dals",
    "breads",
    "asian-mains",
    "rice-with-curry---thai-&-asian-bowls",
    "rice-&-noodles",
    "desserts",
    "blended-whisky",
    "blended-scotch-whisky",
    "american-irish-whiskey",
    "single-malt-whisky",
    "vodka",
    "gin",
    "rum",
    "tequila",
    "cognac-brandy",
    "liqueurs",
    "sparkling-wine",
    "white-wines",
    "rose-wines",
    "red-wines",
    "dessert-wines",
    "port-wine",
    "signature-mocktails",
    "soft-beverages",
    "craft-beers-on-tap",
    "draught-beer",
    "pint-beers",
    "classic-cocktails",
    "signature-cocktails",
    "wine-cocktails",
    "sangria",
    "signature-shots",
)

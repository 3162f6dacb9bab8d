"""Canonical expense categories and the keywords that identify them.

Order matters twice over: categories are tried top to bottom and the first one
with a matching keyword wins.  Several keywords are shared between categories
(``"mobile"`` sits in both Shopping and Bills & Utilities), so a description
such as ``"mobile recharge"`` lands in Shopping.  Reordering this table changes
how existing statements are categorised.
"""
from __future__ import annotations

MISCELLANEOUS = "Miscellaneous"

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Food & Dining": (
        "zomato", "swiggy", "uber eats", "restaurant", "cafe", "coffee", "dominos",
        "pizza", "mcdonald", "kfc", "subway", "starbucks", "food", "lunch", "dinner",
        "breakfast", "meal", "dining", "bakery", "grocery", "supermarket", "bigbasket",
        "dunzo", "blinkit", "instamart", "zepto",
    ),
    "Transportation": (
        "uber", "ola", "rapido", "auto", "taxi", "cab", "metro", "bus", "train",
        "flight", "airline", "indigo", "spicejet", "petrol", "diesel", "fuel",
        "parking", "toll", "car", "bike", "vehicle", "transport",
    ),
    "Shopping": (
        "amazon", "flipkart", "myntra", "ajio", "meesho", "shopping", "store",
        "mall", "purchase", "buy", "clothing", "clothes", "fashion", "electronics",
        "gadget", "mobile", "laptop", "shoes", "accessories",
    ),
    "Entertainment": (
        "netflix", "amazon prime", "hotstar", "spotify", "youtube", "movie",
        "cinema", "pvr", "inox", "theatre", "concert", "event", "ticket",
        "gaming", "game", "entertainment", "subscription", "music",
    ),
    "Bills & Utilities": (
        "electricity", "water", "gas", "internet", "wifi", "broadband", "mobile",
        "recharge", "phone bill", "utility", "maintenance", "society", "bill",
    ),
    "Rent & Housing": (
        "rent", "housing", "apartment", "lease", "landlord", "property",
        "mortgage", "emi", "home loan",
    ),
    "Healthcare": (
        "doctor", "hospital", "clinic", "pharmacy", "medicine", "medical",
        "health", "insurance", "appointment", "consultation", "apollo",
        "max", "fortis", "lab", "test",
    ),
    "Education": (
        "course", "udemy", "coursera", "school", "college", "university",
        "tuition", "books", "education", "learning", "training", "certification",
    ),
    "Personal Care": (
        "salon", "spa", "haircut", "beauty", "grooming", "cosmetics",
        "skincare", "gym", "fitness", "yoga", "wellness",
    ),
    MISCELLANEOUS: (),
}

CATEGORIES: tuple[str, ...] = tuple(CATEGORY_KEYWORDS)


__all__ = ["CATEGORIES", "CATEGORY_KEYWORDS", "MISCELLANEOUS"]

"""Search terms per instrument symbol.

Symbols are meme tickers; search engines need the phrases people actually
type. Unknown symbols are searched by their lower-cased ticker.
"""

SEARCH_TERMS: dict[str, tuple[str, ...]] = {
    "SKIBI": ("skibidi toilet", "skibidi", "toilet meme", "gen alpha"),
    "SUS": ("among us", "sus", "imposter", "crewmate", "emergency meeting"),
    "SAHUR": ("tun tun sahur", "sahur", "tamburello", "drumming meme"),
    "LABUB": ("labubu", "pop mart", "labubu doll", "cute monster"),
    "OHIO": ("ohio meme", "ohio final boss", "only in ohio", "ohio skibidi"),
    "RIZZL": ("rizzler", "rizz", "charisma", "ohio rizzler"),
    "GYATT": ("gyatt", "gyat meme", "thick", "kai cenat gyatt"),
    "FRIED": ("deep fryer meme", "fried", "cooking", "deep fried"),
    "SIGMA": ("sigma male", "sigma grindset", "alpha male", "patrick bateman"),
    "TRALA": ("tralalero tralala", "shark nike", "three legged shark", "italian meme"),
    "CROCO": ("bombardiro crocodilo", "crocodile meme", "croco", "italian crocodile"),
    "FANUM": ("fanum tax", "fanum", "kai cenat", "fanum meme"),
    "CAPPU": ("ballerina cappuccina", "coffee dance", "cappuccino", "italian coffee"),
    "BANANI": ("chimpanzini bananini", "monkey banana", "ape meme", "banana ape"),
    "LARILA": ("lirili larila", "cactus elephant", "time control", "italian sound"),
}

# Hashtags differ from search phrases: no spaces, community spelling.
HASHTAGS: dict[str, tuple[str, ...]] = {
    "SKIBI": ("skibidi", "skibiditoilet", "skibidibop"),
    "SUS": ("sus", "amongus", "imposter", "suspicious"),
    "OHIO": ("ohio", "onlyinohio", "ohiomeme"),
    "GYATT": ("gyatt", "gyat", "damnnnn"),
    "RIZZL": ("rizz", "rizzler", "charisma", "rizup"),
    "LABUB": ("labubu", "popmart", "labubumania"),
    "SIGMA": ("sigma", "sigmamale", "sigmamindset", "sigmagrindset"),
    "SAHUR": ("tamburello", "italian", "pasta"),
    "FRIED": ("fried", "food", "cooking"),
    "TRALA": ("tralala", "italian", "italia"),
    "CROCO": ("crocodile", "croco", "reptile"),
    "FANUM": ("fanum", "fanumtax", "tax"),
    "CAPPU": ("cappuccino", "coffee", "espresso"),
    "BANANI": ("banana", "fruit", "yellow"),
    "LARILA": ("larila", "italian", "rare"),
}


def normalize_symbol(symbol: str) -> str:
    """Normalize an instrument symbol (trimmed, uppercase)."""
    return symbol.strip().upper()


def search_terms_for(symbol: str) -> list[str]:
    """Search phrases for a symbol, most specific first."""
    sym = normalize_symbol(symbol)
    return list(SEARCH_TERMS.get(sym, (sym.lower(),)))


def hashtags_for(symbol: str) -> list[str]:
    """Short-video hashtags for a symbol."""
    sym = normalize_symbol(symbol)
    return list(HASHTAGS.get(sym, (sym.lower(),)))

import re

_NON_SLUG = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(name: str) -> str:
    """Erzeugt einen URL-Slug aus einem Namen oder Titel ("Noche de Tango!" -> "noche-de-tango")."""
    slug = (name or "").lower().strip()
    slug = _NON_SLUG.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def unique_slug(name: str, exists) -> str:
    """Hängt -2, -3, ... an, solange ``exists(slug)`` True liefert."""
    base = generate_slug(name) or "item"
    slug = base
    counter = 2
    while exists(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug

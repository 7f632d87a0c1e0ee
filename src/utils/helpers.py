"""
Fonctions utilitaires partagees dans le projet StreamVault.

Ce module centralise les fonctions reutilisees a travers le codebase :
- strip_html : suppression des balises HTML d'un texte libre
- normalize_accents : suppression des diacritiques
- slugify : normalisation d'un texte libre en slug [a-z0-9-]
- title_sort_key : cle de tri insensible a la casse et aux accents
- utc_now : horodatage UTC courant
"""

import re
import unicodedata
from datetime import datetime, timezone

from bs4 import BeautifulSoup

_LIGATURE_MAP = {"œ": "oe", "Œ": "Oe", "æ": "ae", "Æ": "Ae", "ß": "ss"}

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

_DROPPED_ELEMENTS = ("script", "style")


def utc_now() -> datetime:
    """Retourne l'instant courant en UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


def strip_invisible_chars(text: str) -> str:
    """
    Retire les caractères Unicode invisibles d'une chaîne.

    Supprime les caractères de contrôle et les marques directionnelles
    (LRM, RLM, BOM, etc.).
    """
    return "".join(
        char for char in text if unicodedata.category(char) not in ("Cf", "Cc")
    )


def strip_html(text: str) -> str:
    """
    Retire les balises HTML d'un texte libre, contenu textuel conserve.

    Le contenu des elements script et style est supprime. Les chevrons
    restants sont re-echappes : le resultat est stable si on le nettoie
    a nouveau (validation a chaque chargement du document).

    Ex: "<b>Alien</b><script>x()</script>" -> "Alien"
    """
    if "<" not in text and "&" not in text:
        return text
    soup = BeautifulSoup(text, "html.parser")
    for element in soup(_DROPPED_ELEMENTS):
        element.decompose()
    return soup.get_text().replace("<", "&lt;").replace(">", "&gt;").strip()


def _expand_ligatures(text: str) -> str:
    """Remplace les ligatures Unicode par leurs équivalents ASCII."""
    for lig, expanded in _LIGATURE_MAP.items():
        text = text.replace(lig, expanded)
    return text


def normalize_accents(text: str) -> str:
    """
    Supprime les accents d'une chaine.

    Utilise la decomposition NFD puis filtre les caracteres diacritiques (Mn).
    Ex: "Élégie" -> "Elegie"
    """
    normalized = unicodedata.normalize("NFD", text)
    return "".join(char for char in normalized if unicodedata.category(char) != "Mn")


def slugify(text: str) -> str:
    """
    Normalise un texte libre en slug URL-safe.

    Applique dans l'ordre : suppression du HTML, nettoyage invisibles,
    expansion ligatures, translitteration ASCII, mise en minuscules,
    remplacement de toute sequence non alphanumerique par un tiret unique.

    Ex: "Échos d'Atlas : Saison 1" -> "echos-d-atlas-saison-1"

    Returns:
        Le slug, eventuellement vide si le texte ne contient aucun
        caractere translitterable.
    """
    cleaned = _expand_ligatures(strip_invisible_chars(strip_html(text)))
    ascii_text = (
        normalize_accents(cleaned).encode("ascii", "ignore").decode("ascii").lower()
    )
    return _NON_SLUG_CHARS.sub("-", ascii_text).strip("-")


def title_sort_key(title: str) -> str:
    """Clé de tri normalisée pour un titre (accents et casse ignorés)."""
    return normalize_accents(_expand_ligatures(title)).casefold()

"""
Constantes globales pour StreamVault.

Ce module contient les constantes utilisees dans l'application:
- Hotes autorises par defaut pour les URLs de flux, affiches et sous-titres
- Expressions regulieres des slugs et des noms d'utilisateur
- Bornes de longueur des champs texte
- Noms des fichiers de stockage
"""

import re

# Hotes autorises par defaut (surcharges via STREAMVAULT_ALLOWED_MEDIA_HOSTS)
DEFAULT_MEDIA_HOSTS = (
    "example.com",
    "cdn.example.com",
    "videos.local",
    "stream.local",
)

# Alphabet des slugs : minuscules ASCII, chiffres, tirets
SLUG_PATTERN = r"^[a-z0-9-]+$"
SLUG_RE = re.compile(SLUG_PATTERN)

# Noms d'utilisateur : alphanumerique + . _ -
USERNAME_PATTERN = r"^[a-zA-Z0-9_.-]+$"
USERNAME_RE = re.compile(USERNAME_PATTERN)
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 64

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

# Longueurs maximales des champs texte
TITLE_MAX_LENGTH = 160
DESCRIPTION_MAX_LENGTH = 1024
CATEGORY_FIELD_MAX_LENGTH = 64

# Annee minimale d'un film
MIN_MOVIE_YEAR = 1900

# Fichiers de stockage (relatifs au data_dir)
CATALOG_DIRNAME = "catalog"
SERIES_DIRNAME = "series"
USERS_DIRNAME = "users"
HISTORY_DIRNAME = "history"
MOVIES_FILENAME = "movies.json"
CATEGORIES_FILENAME = "categories.json"
USERS_FILENAME = "users.json"
ADMIN_FILENAME = "admin.json"
AUDIT_LOG_FILENAME = "audit.log"
LOGS_DIRNAME = "logs"
LOG_FILENAME = "streamvault.log"

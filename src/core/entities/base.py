"""
Modele de base et types contraints partages par les entites.

Les documents JSON utilisent des cles camelCase (posterUrl, createdAt...)
alors que les attributs Python sont en snake_case : la conversion est
assuree par l'alias generator de pydantic.

Les hotes autorises pour les URLs sont transmis via le contexte de
validation pydantic (cle "allowed_hosts"). Sans contexte, les hotes par
defaut de src.utils.constants s'appliquent.
"""

import uuid
from typing import Annotated, Any, TypeVar
from urllib.parse import urlparse

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    StringConstraints,
    ValidationInfo,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from src.core.errors import ValidationError, format_pydantic_errors
from src.utils.constants import (
    DEFAULT_MEDIA_HOSTS,
    DESCRIPTION_MAX_LENGTH,
    SLUG_PATTERN,
    TITLE_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    USERNAME_PATTERN,
)
from src.utils.helpers import strip_html

ALLOWED_HOSTS_CONTEXT_KEY = "allowed_hosts"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _check_uuid(value: str) -> str:
    """Verifie qu'une chaine est un UUID et la retourne normalisee."""
    try:
        return str(uuid.UUID(value))
    except (ValueError, AttributeError, TypeError) as exc:
        raise ValueError("identifiant UUID invalide") from exc


UuidStr = Annotated[str, AfterValidator(_check_uuid)]


def _required_text(value: str) -> str:
    """Texte sans HTML, qui doit rester non vide une fois nettoye."""
    cleaned = strip_html(value)
    if not cleaned:
        raise ValueError("texte vide une fois le HTML retire")
    return cleaned


# Textes libres affiches : le HTML est retire a chaque validation
HtmlFree = AfterValidator(_required_text)

Slug = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        pattern=SLUG_PATTERN,
    ),
]

Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH),
    HtmlFree,
]

Description = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=DESCRIPTION_MAX_LENGTH),
    AfterValidator(strip_html),
]

Username = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
    ),
]


def allowed_hosts_from(info: ValidationInfo) -> tuple[str, ...]:
    """Extrait les hotes autorises du contexte de validation."""
    context: Any = info.context
    if isinstance(context, dict) and context.get(ALLOWED_HOSTS_CONTEXT_KEY):
        return tuple(context[ALLOWED_HOSTS_CONTEXT_KEY])
    return DEFAULT_MEDIA_HOSTS


def check_media_url(value: str, info: ValidationInfo, label: str) -> str:
    """
    Verifie qu'une URL est http(s) et que son hote est autorise.

    Args:
        value: URL a verifier
        info: Contexte de validation pydantic (hotes autorises)
        label: Nom du champ pour le message d'erreur

    Returns:
        L'URL inchangee

    Raises:
        ValueError: URL invalide ou hote non autorise
    """
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"{label} : URL invalide")
    if parsed.hostname not in allowed_hosts_from(info):
        raise ValueError(f"{label} : domaine non autorise ({parsed.hostname})")
    return value


def validation_context(allowed_hosts: tuple[str, ...] | list[str]) -> dict:
    """Construit le contexte de validation pour une liste d'hotes."""
    return {ALLOWED_HOSTS_CONTEXT_KEY: tuple(allowed_hosts)}


class CatalogModel(BaseModel):
    """
    Base des entites persistees (cles camelCase en JSON).

    Une cle inconnue dans un document stocke est une erreur de validation :
    elle serait sinon perdue a la sauvegarde suivante.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    def to_document(self) -> dict:
        """Serialise l'entite au format JSON du stockage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_entity(model: type[ModelT], data: Any, context: dict, source: str) -> ModelT:
    """
    Valide des donnees contre un modele et convertit l'erreur pydantic.

    Args:
        model: Modele cible
        data: Donnees brutes (dict, instance...)
        context: Contexte de validation (voir validation_context)
        source: Libelle de l'objet valide pour le message d'erreur

    Raises:
        ValidationError: Donnees non conformes (jamais corrigees en silence)
    """
    try:
        return model.model_validate(data, context=context)
    except PydanticValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise ValidationError(f"{source} invalide : {format_pydantic_errors(errors)}", errors) from e

"""
Payloads de creation et patchs de mise a jour, par type d'enregistrement.

Un patch ne liste que les champs modifiables ; seuls les champs
effectivement fournis (exclude_unset) sont appliques sur l'enregistrement
stocke. La validation complete (hotes autorises, bornes, motifs) est
refaite sur l'entite resultante.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.core.entities.users import Role, StreamType
from src.core.entities.base import Username
from src.utils.constants import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH


class PayloadModel(BaseModel):
    """Base des payloads entrants : champs inconnus refuses."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    def supplied(self, *, exclude: set[str] | None = None) -> dict:
        """Retourne les champs fournis et non nuls (noms Python)."""
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude=exclude)


class SubtitleInput(PayloadModel):
    """Piste de sous-titres telle que recue (hote verifie par l'entite)."""

    lang: str
    label: str
    url: str


# ==================
# Categories
# ==================


class CategoryCreate(PayloadModel):
    """Creation d'une categorie. Le slug est derive du nom s'il est absent."""

    name: str
    slug: Optional[str] = None
    order: int = 0


class CategoryPatch(PayloadModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    order: Optional[int] = None


# ==================
# Films
# ==================


class MovieCreate(PayloadModel):
    """Creation d'un film. Le slug est derive du titre s'il est absent."""

    title: str
    slug: Optional[str] = None
    description: str = ""
    year: int
    duration: int
    poster_url: str
    stream_url: str
    subtitles: list[SubtitleInput] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    published: bool = False
    featured: bool = False


class MoviePatch(PayloadModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    year: Optional[int] = None
    duration: Optional[int] = None
    poster_url: Optional[str] = None
    stream_url: Optional[str] = None
    subtitles: Optional[list[SubtitleInput]] = None
    categories: Optional[list[str]] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None


# ==================
# Series
# ==================


class EpisodePayload(PayloadModel):
    """
    Episode entrant, complet ou partiel.

    Seul le numero d'episode est obligatoire : pour un episode existant,
    les champs fournis ecrasent les champs stockes ; pour un nouvel episode,
    l'entite Episode exige titre, duree et URL de flux.
    L'id et le compteur de vues appartiennent au stockage : ils ne sont pas
    des champs entrants, et comme les autres champs inconnus (createdAt
    d'un export...) ils sont ignores.
    """

    model_config = ConfigDict(extra="ignore")

    season: Optional[int] = Field(default=None, ge=1)
    episode: int = Field(ge=1)
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    stream_url: Optional[str] = None
    subtitles: Optional[list[SubtitleInput]] = None
    published: Optional[bool] = None


class EpisodeUpsert(EpisodePayload):
    """Episode cible d'un merge unitaire : la saison est obligatoire."""

    season: int = Field(ge=1)


class SeasonPayload(PayloadModel):
    model_config = ConfigDict(extra="ignore")

    season: int = Field(ge=1)
    episodes: list[EpisodePayload] = Field(default_factory=list)


class SeriesPayload(PayloadModel):
    """
    Serie entrante pour creation ou import.

    Si une serie de meme slug existe, les champs fournis sont fusionnes
    et les saisons passent par le moteur de merge.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    poster_url: Optional[str] = None
    categories: Optional[list[str]] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None
    seasons: list[SeasonPayload] = Field(default_factory=list)


class SeriesPatch(PayloadModel):
    """Mise a jour d'une serie ; les saisons fournies sont fusionnees."""

    name: Optional[str] = None
    description: Optional[str] = None
    poster_url: Optional[str] = None
    categories: Optional[list[str]] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None
    seasons: Optional[list[SeasonPayload]] = None


# ==================
# Utilisateurs
# ==================


class UserCreate(PayloadModel):
    username: Username
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    role: Role = Role.USER


class UserPatch(PayloadModel):
    password: Optional[str] = Field(
        default=None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )
    active: Optional[bool] = None
    role: Optional[Role] = None


class HistoryEntryCreate(PayloadModel):
    """Entree d'historique recue ; last_watched vaut maintenant si absent."""

    content_id: str
    type: StreamType
    progress: float
    last_watched: Optional[datetime] = None
    season: Optional[int] = None
    episode: Optional[int] = None


# ==================
# Actions unitaires
# ==================


class CategoryOrder(PayloadModel):
    """Nouvel ordre des categories (liste d'ids)."""

    ids: list[str]


class PublishToggle(PayloadModel):
    published: bool


class FeatureToggle(PayloadModel):
    featured: bool


class EpisodeRef(PayloadModel):
    """Reference d'un episode (saison, numero) pour un increment de vues."""

    season: int = Field(ge=1)
    episode: int = Field(ge=1)

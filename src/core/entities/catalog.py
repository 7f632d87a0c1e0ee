"""
Entites du catalogue : categories, films, series, saisons, episodes.

Chaque entite est un modele pydantic qui valide l'integralite du document
a chaque chargement et a chaque sauvegarde.

Les textes libres affiches (titres, descriptions, noms, libelles) sont
debarrasses de tout HTML a chaque validation.

Invariants portes par les schemas :
- dans une serie, les numeros de saison sont uniques
- dans une saison, les numeros d'episode sont uniques et chaque episode
  porte le numero de sa saison
"""

from datetime import datetime
from typing import Annotated

from pydantic import (
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
    model_validator,
)

from src.core.entities.base import (
    CatalogModel,
    Description,
    HtmlFree,
    Slug,
    Title,
    UuidStr,
    check_media_url,
)
from src.utils.constants import CATEGORY_FIELD_MAX_LENGTH, MIN_MOVIE_YEAR
from src.utils.helpers import utc_now

CategoryName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=CATEGORY_FIELD_MAX_LENGTH),
    HtmlFree,
]
SubtitleLang = Annotated[str, StringConstraints(min_length=2, max_length=8), HtmlFree]
SubtitleLabel = Annotated[str, StringConstraints(min_length=1, max_length=64), HtmlFree]


class Subtitle(CatalogModel):
    """Piste de sous-titres (langue, libelle, URL)."""

    lang: SubtitleLang
    label: SubtitleLabel
    url: str

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str, info: ValidationInfo) -> str:
        return check_media_url(value, info, "URL de sous-titres")


class Category(CatalogModel):
    """
    Categorie d'affichage du catalogue.

    Attributes:
        id: Identifiant UUID stable
        name: Nom affiche
        slug: Identifiant URL unique parmi les categories
        order: Position d'affichage (egalites departagees par le nom)
    """

    id: UuidStr
    name: CategoryName
    slug: Slug = Field(max_length=CATEGORY_FIELD_MAX_LENGTH)
    order: int = Field(ge=0)


class Movie(CatalogModel):
    """
    Film du catalogue.

    Les references de categories ne sont pas verifiees contre
    l'existence des categories.
    """

    id: UuidStr
    title: Title
    slug: Slug
    description: Description = ""
    year: int = Field(ge=MIN_MOVIE_YEAR)
    duration: int = Field(gt=0)
    poster_url: str
    stream_url: str
    subtitles: list[Subtitle] = Field(default_factory=list)
    categories: list[UuidStr] = Field(default_factory=list)
    published: bool = False
    featured: bool = False
    views: int = Field(default=0, ge=0)
    created_at: datetime
    updated_at: datetime

    @field_validator("year")
    @classmethod
    def _check_year(cls, value: int) -> int:
        max_year = utc_now().year + 1
        if value > max_year:
            raise ValueError(f"annee superieure a {max_year}")
        return value

    @field_validator("poster_url")
    @classmethod
    def _check_poster_url(cls, value: str, info: ValidationInfo) -> str:
        return check_media_url(value, info, "URL d'affiche")

    @field_validator("stream_url")
    @classmethod
    def _check_stream_url(cls, value: str, info: ValidationInfo) -> str:
        return check_media_url(value, info, "URL de flux")


class Episode(CatalogModel):
    """
    Episode d'une serie.

    Attributes:
        season: Numero de la saison contenant l'episode (>= 1)
        episode: Numero de l'episode dans sa saison (>= 1)
        views: Compteur de vues (monotone, >= 0)
        last_updated: Dernier horodatage de modification
    """

    id: UuidStr
    title: Title
    description: Description = ""
    season: int = Field(ge=1)
    episode: int = Field(ge=1)
    duration: int = Field(gt=0)
    stream_url: str
    subtitles: list[Subtitle] = Field(default_factory=list)
    published: bool = False
    views: int = Field(default=0, ge=0)
    last_updated: datetime

    @field_validator("stream_url")
    @classmethod
    def _check_stream_url(cls, value: str, info: ValidationInfo) -> str:
        return check_media_url(value, info, "URL de flux")


class Season(CatalogModel):
    """Saison d'une serie et ses episodes."""

    season: int = Field(ge=1)
    episodes: list[Episode] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_episodes(self) -> "Season":
        seen: set[int] = set()
        for episode in self.episodes:
            if episode.season != self.season:
                raise ValueError(
                    f"l'episode {episode.episode} porte la saison {episode.season} "
                    f"au lieu de {self.season}"
                )
            if episode.episode in seen:
                raise ValueError(
                    f"numero d'episode {episode.episode} duplique dans la saison {self.season}"
                )
            seen.add(episode.episode)
        return self


class Series(CatalogModel):
    """
    Serie du catalogue, stockee dans son propre fichier nomme par le slug.

    Les saisons sont triees par numero croissant par les services qui
    ecrivent le document.
    """

    id: UuidStr
    name: Title
    slug: Slug
    description: Description = ""
    poster_url: str
    categories: list[UuidStr] = Field(default_factory=list)
    seasons: list[Season] = Field(default_factory=list)
    published: bool = False
    featured: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("poster_url")
    @classmethod
    def _check_poster_url(cls, value: str, info: ValidationInfo) -> str:
        return check_media_url(value, info, "URL d'affiche")

    @model_validator(mode="after")
    def _check_seasons(self) -> "Series":
        numbers = [season.season for season in self.seasons]
        if len(numbers) != len(set(numbers)):
            raise ValueError("numeros de saison dupliques")
        return self

    def find_episode(self, season_number: int, episode_number: int) -> Episode | None:
        """Retourne l'episode (saison, numero) ou None."""
        for season in self.seasons:
            if season.season == season_number:
                for episode in season.episodes:
                    if episode.episode == episode_number:
                        return episode
        return None

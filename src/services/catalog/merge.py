"""
Moteur de merge des series.

Reconcilie une serie stockee avec une serie entrante partielle (tout ou
partie des saisons, tout ou partie des episodes de chaque saison).

Regles :
- un numero de saison ou d'episode en collision n'est jamais rejete :
  les champs fournis ecrasent les champs stockes, un par un, et
  lastUpdated est restampe meme si rien n'a change
- un nouvel episode recoit toujours un id neuf, 0 vue et lastUpdated ;
  un episode existant garde son id et son compteur de vues
- le merge ne supprime jamais de saison ni d'episode
- saisons et episodes sont tries par numero croissant

Fonctions pures : aucune entree/sortie, l'horodatage est passe par l'appelant.
"""

import uuid
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from src.core.entities import Episode, Season, Series
from src.core.entities.base import validate_entity, validation_context
from src.core.errors import ValidationError
from src.core.value_objects.payloads import (
    EpisodePayload,
    EpisodeUpsert,
    SeasonPayload,
    SeriesPayload,
)
from src.utils.constants import DEFAULT_MEDIA_HOSTS
from src.utils.helpers import slugify


def _episode_label(season_number: int, episode_number: int) -> str:
    return f"Episode S{season_number:02d}E{episode_number:02d}"


def _merge_episode(
    current: Optional[Episode],
    payload: EpisodePayload,
    season_number: int,
    now: datetime,
    context: dict,
) -> Episode:
    """Ecrase les champs fournis sur l'episode existant, ou cree l'episode."""
    fields = payload.supplied(exclude={"season"})
    fields["season"] = season_number
    label = _episode_label(season_number, payload.episode)

    if current is None:
        data = {**fields, "id": str(uuid.uuid4()), "views": 0, "last_updated": now}
        return validate_entity(Episode, data, context, label)

    data = current.model_dump()
    data.update(fields)
    data["last_updated"] = now
    return validate_entity(Episode, data, context, label)


def _merge_season_episodes(
    episodes: Iterable[Episode],
    incoming: Iterable[EpisodePayload],
    season_number: int,
    now: datetime,
    context: dict,
) -> list[Episode]:
    by_number = {episode.episode: episode for episode in episodes}
    for payload in incoming:
        by_number[payload.episode] = _merge_episode(
            by_number.get(payload.episode), payload, season_number, now, context
        )
    return [by_number[number] for number in sorted(by_number)]


def merge_seasons(
    existing: list[Season],
    incoming: list[SeasonPayload],
    now: datetime,
    allowed_hosts: tuple[str, ...] | list[str] = DEFAULT_MEDIA_HOSTS,
) -> list[Season]:
    """
    Fusionne des saisons entrantes dans les saisons existantes.

    Args:
        existing: Saisons stockees (non modifiees, copiees)
        incoming: Saisons entrantes, eventuellement partielles
        now: Horodatage applique aux episodes crees ou modifies
        allowed_hosts: Hotes autorises pour les URLs des episodes

    Returns:
        Nouvelle liste de saisons triee par numero croissant

    Raises:
        ValidationError: Si un episode resultant ne respecte pas le schema
    """
    context = validation_context(allowed_hosts)
    by_number: dict[int, list[Episode]] = {
        season.season: list(season.episodes) for season in existing
    }

    for season_payload in incoming:
        number = season_payload.season
        by_number[number] = _merge_season_episodes(
            by_number.get(number, []), season_payload.episodes, number, now, context
        )

    return [
        validate_entity(
            Season, {"season": number, "episodes": by_number[number]}, context, f"Saison {number}"
        )
        for number in sorted(by_number)
    ]


def upsert_episode(
    series: Series,
    payload: EpisodeUpsert,
    now: datetime,
    allowed_hosts: tuple[str, ...] | list[str] = DEFAULT_MEDIA_HOSTS,
) -> Series:
    """
    Cree ou met a jour un seul episode (saison, numero) d'une serie.

    La saison est creee si absente ; updatedAt de la serie est restampe.

    Returns:
        Nouvelle instance de la serie
    """
    incoming = SeasonPayload.model_construct(season=payload.season, episodes=[payload])
    seasons = merge_seasons(series.seasons, [incoming], now, allowed_hosts)
    return series.model_copy(update={"seasons": seasons, "updated_at": now})


def series_slug(payload: SeriesPayload) -> str:
    """Slug normalise d'une serie entrante (slug fourni, sinon nom)."""
    slug = slugify(payload.slug or payload.name)
    if not slug:
        raise ValidationError(f"Impossible de deriver un slug de '{payload.name}'")
    return slug


def merge_series(
    existing: Optional[Series],
    payload: SeriesPayload,
    now: datetime,
    allowed_hosts: tuple[str, ...] | list[str] = DEFAULT_MEDIA_HOSTS,
) -> Series:
    """
    Construit la serie resultant d'une creation ou d'un import.

    Pour une serie existante, l'id et createdAt sont conserves, les champs
    fournis ecrasent les champs stockes et les saisons sont fusionnees.

    Raises:
        ValidationError: Si la serie resultante ne respecte pas le schema
    """
    context = validation_context(allowed_hosts)
    slug = series_slug(payload)
    fields = payload.supplied(exclude={"id", "slug", "seasons"})

    if existing is None:
        data = {
            "id": payload.id or str(uuid.uuid4()),
            **fields,
            "slug": slug,
            "seasons": merge_seasons([], payload.seasons, now, allowed_hosts),
            "created_at": now,
            "updated_at": now,
        }
    else:
        data = existing.model_dump(exclude={"seasons"})
        data.update(fields)
        data["slug"] = slug
        data["seasons"] = merge_seasons(existing.seasons, payload.seasons, now, allowed_hosts)
        data["updated_at"] = now

    return validate_entity(Series, data, context, f"Serie '{slug}'")

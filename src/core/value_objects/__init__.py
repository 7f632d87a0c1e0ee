"""
Objets valeur representant les donnees entrantes du domaine.

Les payloads et patchs sont definis par leurs attributs et ne portent
pas d'identite : ils decrivent une intention de creation ou de mise a jour.

Exports :
- CategoryCreate / CategoryPatch / CategoryOrder
- MovieCreate / MoviePatch
- SeriesPayload / SeasonPayload / EpisodePayload / EpisodeUpsert / SeriesPatch
- PublishToggle / FeatureToggle / EpisodeRef
- UserCreate / UserPatch
- HistoryEntryCreate
"""

from src.core.value_objects.payloads import (
    CategoryCreate,
    CategoryOrder,
    CategoryPatch,
    EpisodePayload,
    EpisodeRef,
    EpisodeUpsert,
    FeatureToggle,
    HistoryEntryCreate,
    MovieCreate,
    MoviePatch,
    PublishToggle,
    SeasonPayload,
    SeriesPatch,
    SeriesPayload,
    SubtitleInput,
    UserCreate,
    UserPatch,
)

__all__ = [
    "CategoryCreate",
    "CategoryOrder",
    "CategoryPatch",
    "EpisodePayload",
    "EpisodeRef",
    "EpisodeUpsert",
    "FeatureToggle",
    "HistoryEntryCreate",
    "MovieCreate",
    "MoviePatch",
    "PublishToggle",
    "SeasonPayload",
    "SeriesPatch",
    "SeriesPayload",
    "SubtitleInput",
    "UserCreate",
    "UserPatch",
]

"""Dependency injection container for the matching engine."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .core import MatchScorer, ScoreBands
from .schemas.config import load_config
from .services import AssignmentService, BoardService, RecalculationService
from .store import MatchStore, SqlMatchStore


class MatchContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    store = providers.Singleton(
        SqlMatchStore,
        url=config.database.url,
        echo=config.database.echo,
    )

    scorer = providers.Singleton(MatchScorer)

    bands = providers.Singleton(
        ScoreBands,
        excellent=config.distribution.excellent,
        good=config.distribution.good,
        fair=config.distribution.fair,
    )

    recalculation = providers.Factory(
        RecalculationService,
        store=store,
        scorer=scorer,
    )

    assignment = providers.Factory(
        AssignmentService,
        store=store,
        scorer=scorer,
    )

    boards = providers.Factory(
        BoardService,
        store=store,
        recalculation=recalculation,
        bands=bands,
    )


def create_container(
    *,
    settings: dict[str, Any] | None = None,
    store: MatchStore | None = None,
) -> MatchContainer:
    """Instantiate container with validated settings and an optional store."""

    container = MatchContainer()
    container.config.from_dict(load_config(settings or {}).to_settings())

    if store is not None:
        container.store.override(providers.Object(store))

    return container

"""Dependency injection containers for the netrc-editor application."""

from __future__ import annotations

from dependency_injector import containers, providers

from netrc_editor.config import Settings
from netrc_editor.helpers import init_logger
from netrc_editor.services.netrc_service import NetrcService
from netrc_editor.storage.copy_strategies import select_copy_strategy
from netrc_editor.storage.file_utility import FileUtility
from netrc_editor.storage.platform import Platform


class StorageContainer(containers.DeclarativeContainer):
    """Container for the persistence layer."""

    logger = providers.Dependency()

    platform = providers.Singleton(Platform.detect)
    copy_strategy = providers.Singleton(select_copy_strategy, platform)

    file_utility = providers.Singleton(
        FileUtility,
        platform=platform,
        copy_strategy=copy_strategy,
        logger=logger,
    )


class AppContainer(containers.DeclarativeContainer):
    """Main application container."""

    config = providers.Singleton(Settings)
    verbosity = providers.Object(0)
    logger = providers.Singleton(init_logger, "netrc_editor", verbosity)

    storage = providers.Container(
        StorageContainer,
        logger=logger,
    )

    netrc_service = providers.Factory(
        NetrcService,
        file_utility=storage.file_utility,
        logger=logger,
        settings=config,
    )

"""Explicit workspace state container.

The application root owns one Workspace and hands it to consumers (the API
receives it through a FastAPI dependency). All tree state lives in its
EntityStore and every mutation goes through its WorkspaceService; nothing
else keeps a private copy of the tree.
"""

from dataclasses import dataclass

from dataroom.components.workspace.navigation import NavigationState
from dataroom.components.workspace.service import WorkspaceService
from dataroom.components.workspace.storage import EntityStore
from dataroom.components.workspace.storage_provider import (
    IdentityProtocol,
    ObjectStorageProtocol,
    PersistenceProtocol,
    get_object_storage,
    get_persistence,
)


@dataclass
class Workspace:
    store: EntityStore
    navigation: NavigationState
    service: WorkspaceService


def create_workspace(
    persistence: PersistenceProtocol | None = None,
    object_storage: ObjectStorageProtocol | None = None,
    identity: IdentityProtocol | None = None,
    **service_options,
) -> Workspace:
    """Wire a store, navigation state and service around the collaborators.

    Collaborators default to the adapters selected by settings.
    """
    if identity is None:
        from dataroom.services.identity import StaticIdentity

        identity = StaticIdentity()

    store = EntityStore()
    navigation = NavigationState(store)
    service = WorkspaceService(
        store,
        navigation,
        persistence or get_persistence(),
        object_storage or get_object_storage(),
        identity,
        **service_options,
    )
    return Workspace(store=store, navigation=navigation, service=service)

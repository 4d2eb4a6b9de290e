"""Browse, search, export and import ZooKeeper trees."""

from zktree.connection import close_session, connect, open_session, require_connected
from zktree.models import MASKED_VALUE, ROLE_ADMIN, ROLE_USER, LeafBean
from zktree.mutations import (
    create_folder,
    create_node,
    delete_folders,
    delete_leaves,
    node_exists,
    set_property_value,
)
from zktree.search import search_tree
from zktree.store import (
    AlreadyExistsError,
    NotFoundError,
    ReservedPathError,
    StoreConnectionError,
    StoreError,
    ZkTreeError,
)
from zktree.transfer import MalformedImportLine, export_lines, import_data
from zktree.walker import export_tree, list_folders, list_leaves

__version__ = "0.1.0"

__all__ = [
    "MASKED_VALUE",
    "ROLE_ADMIN",
    "ROLE_USER",
    "AlreadyExistsError",
    "LeafBean",
    "MalformedImportLine",
    "NotFoundError",
    "ReservedPathError",
    "StoreConnectionError",
    "StoreError",
    "ZkTreeError",
    "close_session",
    "connect",
    "create_folder",
    "create_node",
    "delete_folders",
    "delete_leaves",
    "export_lines",
    "export_tree",
    "import_data",
    "list_folders",
    "list_leaves",
    "node_exists",
    "open_session",
    "require_connected",
    "search_tree",
    "set_property_value",
]

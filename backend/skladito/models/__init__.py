from skladito.models.category import Category
from skladito.models.container import Container
from skladito.models.container_access import ContainerAccess
from skladito.models.item import Item
from skladito.models.user import User

__all__ = [
    "Category",
    "Container",
    "ContainerAccess",
    "Item",
    "User",
]

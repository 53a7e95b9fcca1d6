from skladito.core.clock import utcnow
from skladito.core.store import CONTAINERS
from skladito.services.access_resolver import AccessResolver, build_children_index, collect_descendants


def test_owner_sees_owned_tree(store, make_user, make_container) -> None:
    alice = make_user("alice")
    shelf = make_container(alice, "Shelf")
    box = make_container(alice, "Box", parent=shelf)
    pouch = make_container(alice, "Pouch", parent=box)

    assert AccessResolver(store).accessible_containers(alice["id"]) == {shelf["id"], box["id"], pouch["id"]}


def test_grant_exposes_granted_subtree_only(store, admin, make_user, make_container, grant) -> None:
    bob = make_user("bob")
    garage = make_container(admin, "Garage")
    rack = make_container(admin, "Rack", parent=garage)
    drawer = make_container(admin, "Drawer", parent=rack)
    attic = make_container(admin, "Attic")
    grant(rack, bob)

    visible = AccessResolver(store).accessible_containers(bob["id"])

    assert visible == {rack["id"], drawer["id"]}
    assert garage["id"] not in visible
    assert attic["id"] not in visible


def test_user_without_ownership_or_grants_sees_nothing(store, admin, make_user, make_container) -> None:
    carol = make_user("carol")
    make_container(admin, "Garage")

    assert AccessResolver(store).accessible_containers(carol["id"]) == set()


def test_nested_container_inherits_owner_visibility(store, admin, make_user, make_container, grant) -> None:
    bob = make_user("bob")
    garage = make_container(admin, "Garage")
    grant(garage, bob)
    # bob creates inside admin's tree; the new container is owned by admin
    bin_ = make_container(bob, "Bin", parent=garage)

    assert bin_["owner_id"] == admin["id"]
    assert bin_["id"] in AccessResolver(store).accessible_containers(bob["id"])
    assert bin_["id"] in AccessResolver(store).accessible_containers(admin["id"])


def test_dangling_grant_is_ignored(store, admin, make_user, make_container, grant) -> None:
    bob = make_user("bob")
    garage = make_container(admin, "Garage")
    grant(garage, bob)
    store.delete_one(CONTAINERS, {"id": garage["id"]})

    assert AccessResolver(store).accessible_containers(bob["id"]) == set()


def test_cyclic_parent_graph_terminates(store, make_user) -> None:
    alice = make_user("alice")
    for container_id, parent in (("ca", "cb"), ("cb", "ca"), ("cc", "ca")):
        store.insert(
            CONTAINERS,
            {"id": container_id, "name": container_id, "parent": parent, "owner_id": alice["id"], "created": utcnow()},
        )

    resolver = AccessResolver(store)

    assert resolver.accessible_containers(alice["id"]) == {"ca", "cb", "cc"}
    assert resolver.descendants("ca") == {"cb", "cc"}


def test_collect_descendants_walks_every_depth() -> None:
    containers = [
        {"id": "r", "parent": None},
        {"id": "a", "parent": "r"},
        {"id": "b", "parent": "a"},
        {"id": "c", "parent": "b"},
        {"id": "x", "parent": None},
    ]
    children = build_children_index(containers)

    assert collect_descendants(children, ["a"]) == {"a", "b", "c"}
    assert collect_descendants(children, ["r", "x"]) == {"r", "a", "b", "c", "x"}
    assert collect_descendants(children, []) == set()


def test_admin_can_see_everything_without_resolving(store, admin, make_user, make_container) -> None:
    alice = make_user("alice")
    private = make_container(alice, "Private")

    assert AccessResolver(store).can_see(admin, private["id"])

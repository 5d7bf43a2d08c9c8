import pytest

from lacquer.dsl import reset, resolve_mixin
from lacquer.errors import DefinitionGoneError
from lacquer.registry import DefinitionRegistry
from lacquer.version import Version
from photos import Person, Photo


class Snapshot:
    def __init__(self, caption=None):
        self.caption = caption


@pytest.fixture
def registry():
    registry = DefinitionRegistry()
    Photo.declare_dsl(version="1.1", registry=registry)
    Photo.declare_dsl(version="1.0", registry=registry)
    return registry


def resolved_version(mixin):
    return mixin.registry.find_by_identity(mixin.identity).version


def test_mixin_constructs_an_instance(registry):
    photo = resolve_mixin("photo", registry=registry)

    assert isinstance(photo(), Photo)


def test_mixin_passes_arguments_to_constructor(registry):
    sunset = resolve_mixin("photo", registry=registry)("Sunset", metadata={"iso": 100})

    assert sunset.caption == "Sunset"
    assert sunset["iso"] == 100


def test_unconstrained_resolution_picks_highest_version(registry):
    assert resolved_version(resolve_mixin("photo", registry=registry)) == Version.parse("1.1.0")


def test_constrained_resolution(registry):
    photo = resolve_mixin("photo", ">=1.0,<1.1", registry=registry)

    assert resolved_version(photo) == Version.parse("1.0.0")


def test_mixin_stays_bound_to_its_definition(registry):
    original = resolve_mixin("photo", registry=registry)
    registry.define("photo", target=Snapshot, version="2.0.0")

    assert isinstance(original("Sunset"), Photo)
    assert isinstance(resolve_mixin("photo", registry=registry)("Sunset"), Snapshot)


def test_mixins_are_not_cached_but_equivalent(registry):
    first = resolve_mixin("photo", registry=registry)
    second = resolve_mixin("photo", registry=registry)

    assert first is not second
    assert first == second


def test_mixin_fails_once_definition_is_gone(registry):
    photo = resolve_mixin("photo", registry=registry)
    registry.clear()

    with pytest.raises(DefinitionGoneError, match="'photo'"):
        photo()


def test_mixin_from_default_registry_fails_after_reset():
    reset()
    Photo.declare_dsl()
    photo = resolve_mixin("photo")
    reset()

    with pytest.raises(DefinitionGoneError):
        photo()


def test_configuration_block_acts_on_new_instance(registry):
    photo = resolve_mixin("photo", registry=registry)

    def configure(p):
        p.caption = "Beach"
        p.add_person("Ann").age = 31
        p.add_person(Person("Bob"))

    beach = photo(configure=configure)

    assert beach.caption == "Beach"
    assert [(person.name, person.age) for person in beach.people] == [("Ann", 31), ("Bob", None)]


def test_configuration_block_result_is_discarded(registry):
    photo = resolve_mixin("photo", registry=registry)

    result = photo("Sunset", configure=lambda p: p.add_person("Ann"))

    assert isinstance(result, Photo)
    assert result.caption == "Sunset"


def test_configuration_block_does_not_touch_enclosing_scope(registry):
    photo = resolve_mixin("photo", registry=registry)
    definition = registry.find("photo")
    receivers = []

    class Album:
        caption = "Holiday"

        def build(self):
            return photo(configure=lambda p: receivers.append(definition.runner.current))

    album = Album()
    built = album.build()

    assert receivers == [built]
    assert album.caption == "Holiday"
    assert definition.runner.current is None


def test_runner_is_cleared_when_block_raises(registry):
    photo = resolve_mixin("photo", registry=registry)
    definition = registry.find("photo")

    def explode(p):
        raise ValueError("bad configuration")

    with pytest.raises(ValueError, match="bad configuration"):
        photo(configure=explode)

    assert definition.runner.current is None
    assert not definition.runner.running
    assert photo("Next", configure=lambda p: p.add_person("Ann")).people[0].name == "Ann"


def test_nested_configuration_restores_outer_receiver(registry):
    photo = resolve_mixin("photo", registry=registry)
    runner = registry.find("photo").runner
    seen = []

    def configure_outer(outer):
        seen.append(runner.current is outer)
        inner = photo("inner", configure=lambda p: seen.append(runner.current is p))
        seen.append(runner.current is outer)
        outer.metadata["inner"] = inner

    outer = photo("outer", configure=configure_outer)

    assert seen == [True, True, True]
    assert outer["inner"].caption == "inner"
    assert runner.current is None


def test_entry_point_is_named_after_dsl(registry):
    entry_point = resolve_mixin("photo", registry=registry).entry_point

    assert entry_point.__name__ == "photo"
    assert isinstance(entry_point("Sunset"), Photo)


def test_mixin_class_can_be_inherited(registry):
    photo_mixin = resolve_mixin("photo", registry=registry).as_class()

    class Gallery(photo_mixin):
        def hang(self, caption):
            return self.photo(caption, configure=lambda p: p.add_person("Curator"))

    assert "photo" in vars(photo_mixin)
    hung = Gallery().hang("Sunset")
    assert isinstance(hung, Photo)
    assert hung.people[0].name == "Curator"


def test_mixin_can_be_held_as_class_attribute(registry):
    class Album:
        photo = resolve_mixin("photo", registry=registry)

    assert isinstance(Album().photo("Sunset"), Photo)
